"""
Quoting Subdomain Module

Core business logic for historical quote matching and price suggestion.
Contains entities, value objects, services, and repository interfaces.

Exports:
    Entities:
        - QuoteRecord: shipping-quote request/response row

    Value Objects:
        - SimilarityScore, PriceSuggestion, QuoteMatch

    Services:
        - QuoteMatchingEngine, QuoteMatchingEngineProtocol, find_matches

    Configuration:
        - MatchingConfig

    Repository Interfaces:
        - QuoteRepositoryProtocol, QuoteMatchRepositoryProtocol

Usage:
    >>> from src.domain.quoting import QuoteMatchingEngine, QuoteRecord
    >>> engine = QuoteMatchingEngine()
    >>> matches = engine.find_matches(QuoteRecord(quote_id=1), historical)
"""

from .entities import QuoteRecord
from .value_objects import PriceSuggestion, QuoteMatch, SimilarityScore
from .matching_config import MatchingConfig
from .services import QuoteMatchingEngine, QuoteMatchingEngineProtocol, find_matches
from .repositories import QuoteMatchRepositoryProtocol, QuoteRepositoryProtocol

__all__ = [
    "QuoteRecord",
    "SimilarityScore",
    "PriceSuggestion",
    "QuoteMatch",
    "MatchingConfig",
    "QuoteMatchingEngine",
    "QuoteMatchingEngineProtocol",
    "find_matches",
    "QuoteRepositoryProtocol",
    "QuoteMatchRepositoryProtocol",
]
