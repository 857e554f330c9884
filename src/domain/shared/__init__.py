"""
Shared Domain Module

Shared domain concepts used across subdomains.

This module exports:
    - DomainException: Base exception for all domain errors
    - Specific domain exceptions raised by configuration, persistence and
      orchestration code
"""

from .exceptions import (
    DomainException,
    InvalidMatchingConfigError,
    InvalidQuoteMatchError,
    MatchNotFoundError,
    PersistenceError,
    QuoteNotFoundError,
    UnsupportedExportFormatError,
)

__all__ = [
    "DomainException",
    "InvalidMatchingConfigError",
    "InvalidQuoteMatchError",
    "QuoteNotFoundError",
    "MatchNotFoundError",
    "PersistenceError",
    "UnsupportedExportFormatError",
]
