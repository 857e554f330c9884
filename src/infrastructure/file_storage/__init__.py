"""
File Storage Infrastructure Module

Historical quote exports read with Polars.

Exports:
    - QuoteExportReader: Read CSV/Excel quote exports into QuoteRecords
"""

from .quote_export_reader import QuoteExportReader

__all__ = ["QuoteExportReader"]
