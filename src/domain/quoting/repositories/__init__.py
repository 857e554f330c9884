"""
Quoting Repository Interfaces

Persistence contracts defined by the domain and implemented in the
Infrastructure Layer:
    - QuoteRepositoryProtocol: historical quote store (candidate pool)
    - QuoteMatchRepositoryProtocol: computed match store and match feedback
"""

from .quote_repository import QuoteRepositoryProtocol
from .quote_match_repository import QuoteMatchRepositoryProtocol

__all__ = ["QuoteRepositoryProtocol", "QuoteMatchRepositoryProtocol"]
