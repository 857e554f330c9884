"""
Quoting Entities

Domain entities with identity. Currently a single entity:
    - QuoteRecord: shipping-quote request/response row
"""

from .quote_record import QuoteRecord

__all__ = ["QuoteRecord"]
