"""
Quoting Domain Services Module

Business operations of the quote matching core:
    - similarity: per-attribute similarity scorers (pure functions)
    - aggregator: weighted overall score + breakdown
    - price_suggester: suggested price + confidence from one match
    - QuoteMatchingEngine: match finder orchestrating the above
    - QuoteMatchingEngineProtocol: contract used by the Application Layer
"""

from .matching_engine import QuoteMatchingEngineProtocol
from .aggregator import calculate_similarity, score_attributes
from .price_suggester import suggest_price
from .quote_matching_engine import QuoteMatchingEngine, find_matches

__all__ = [
    "QuoteMatchingEngineProtocol",
    "QuoteMatchingEngine",
    "find_matches",
    "calculate_similarity",
    "score_attributes",
    "suggest_price",
]
