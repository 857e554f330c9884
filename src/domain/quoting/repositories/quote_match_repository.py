"""
QuoteMatchRepository Interface

Repository pattern interface for storing computed QuoteMatch results and the
feedback users give on them.

Architecture Notes:
    - Protocol-based interface (structural typing)
    - Async methods
    - One stored match per (source_quote_id, matched_quote_id) pair
    - One feedback entry per (match, user_id); anonymous entries accumulate
"""

from typing import Iterable, Optional, Protocol

from ..value_objects.match_feedback import FeedbackStatistics, MatchFeedback
from ..value_objects.quote_match import QuoteMatch


class QuoteMatchRepositoryProtocol(Protocol):
    """Protocol defining the contract for match and feedback persistence."""

    async def save_matches(self, matches: Iterable[QuoteMatch]) -> int:
        """
        Bulk-store matches.

        A match for an already stored (source, matched) pair replaces it.

        Returns:
            Number of matches written
        """
        ...

    async def get_matches_for_quote(
        self, quote_id: int, limit: int = 10, min_score: float = 0.0
    ) -> list[QuoteMatch]:
        """Stored matches of `quote_id`, score descending, filtered and capped."""
        ...

    async def get_match(
        self, source_quote_id: int, matched_quote_id: int
    ) -> Optional[QuoteMatch]:
        """Stored match of one pair, or None."""
        ...

    async def delete_matches_for_quote(self, quote_id: int) -> int:
        """Remove every stored match of `quote_id`, returning how many were removed."""
        ...

    async def save_feedback(self, feedback: MatchFeedback) -> None:
        """Store feedback, replacing earlier feedback of the same user on the match."""
        ...

    async def get_feedback_for_match(
        self, source_quote_id: int, matched_quote_id: int
    ) -> list[MatchFeedback]:
        """Feedback on one match, newest first."""
        ...

    async def get_feedback_statistics(
        self, algorithm_version: Optional[str] = None
    ) -> FeedbackStatistics:
        """
        Aggregate feedback over matches that are still stored.

        Args:
            algorithm_version: Only count matches computed with this version
        """
        ...
