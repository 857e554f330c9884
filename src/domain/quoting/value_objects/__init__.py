"""
Quoting Value Objects.

Value Objects are immutable objects that represent domain concepts by their
value, not by their identity.

Available Value Objects:
    - SimilarityScore: Weighted overall score + per-attribute breakdown
    - PriceSuggestion: Suggested price + confidence
    - QuoteMatch: Complete match result with matched-quote summary
    - MatchedQuoteSummary: Display summary of the matched quote
    - MatchFeedback: User rating of a stored match
    - FeedbackStatistics: Aggregate feedback over stored matches
"""

from src.domain.quoting.value_objects.similarity_score import SimilarityScore
from src.domain.quoting.value_objects.price_suggestion import PriceSuggestion
from src.domain.quoting.value_objects.quote_match import (
    MatchedQuoteSummary,
    QuoteMatch,
)
from src.domain.quoting.value_objects.match_feedback import (
    FeedbackReason,
    FeedbackStatistics,
    MatchFeedback,
)

__all__ = [
    "SimilarityScore",
    "PriceSuggestion",
    "QuoteMatch",
    "MatchedQuoteSummary",
    "FeedbackReason",
    "MatchFeedback",
    "FeedbackStatistics",
]
