"""
Repository Implementations

Exports:
    - RedisQuoteRepository: implements QuoteRepositoryProtocol
    - RedisQuoteMatchRepository: implements QuoteMatchRepositoryProtocol
"""

from .redis_quote_repository import RedisQuoteRepository
from .redis_quote_match_repository import RedisQuoteMatchRepository

__all__ = ["RedisQuoteRepository", "RedisQuoteMatchRepository"]
