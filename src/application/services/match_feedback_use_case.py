"""
Match Feedback Use Case - Application Orchestration

Responsibility:
    Records user feedback on stored matches and exposes the aggregate
    statistics used to judge matching quality per algorithm version.

Architecture Notes:
    - Part of Application Layer (Services/Use Cases)
    - Depends on Domain Layer via QuoteMatchRepositoryProtocol
    - No direct HTTP handling (that's API Layer concern)
"""

import logging
from typing import Optional

from src.application.commands.submit_match_feedback import SubmitMatchFeedbackCommand
from src.domain.quoting.repositories import QuoteMatchRepositoryProtocol
from src.domain.quoting.value_objects import FeedbackStatistics, MatchFeedback
from src.domain.shared.exceptions import MatchNotFoundError

logger = logging.getLogger(__name__)


class MatchFeedbackUseCase:
    """
    Feedback on computed matches.

    Flow of submit_feedback():
        1. Check that the (source, matched) match is stored
        2. Build MatchFeedback from the command
        3. Persist it (replacing the same user's earlier feedback)

    Dependencies:
        - match_repository: QuoteMatchRepositoryProtocol
    """

    def __init__(self, match_repository: QuoteMatchRepositoryProtocol):
        self.match_repository = match_repository

    async def submit_feedback(
        self,
        source_quote_id: int,
        matched_quote_id: int,
        command: SubmitMatchFeedbackCommand,
    ) -> MatchFeedback:
        """
        Record feedback on a stored match.

        Raises:
            MatchNotFoundError: If the match is not stored
            PersistenceError: If storage fails
        """
        await self._require_match(source_quote_id, matched_quote_id)

        feedback = command.to_feedback(source_quote_id, matched_quote_id)
        await self.match_repository.save_feedback(feedback)

        logger.info(
            f"Feedback {feedback.rating:+d} on match {source_quote_id} -> "
            f"{matched_quote_id}"
            + (f" ({feedback.feedback_reason.value})" if feedback.feedback_reason else "")
        )
        return feedback

    async def get_feedback(
        self, source_quote_id: int, matched_quote_id: int
    ) -> list[MatchFeedback]:
        """
        Feedback on a stored match, newest first.

        Raises:
            MatchNotFoundError: If the match is not stored
        """
        await self._require_match(source_quote_id, matched_quote_id)
        return await self.match_repository.get_feedback_for_match(
            source_quote_id, matched_quote_id
        )

    async def get_statistics(
        self, algorithm_version: Optional[str] = None
    ) -> FeedbackStatistics:
        return await self.match_repository.get_feedback_statistics(
            algorithm_version=algorithm_version
        )

    async def _require_match(self, source_quote_id: int, matched_quote_id: int) -> None:
        if await self.match_repository.get_match(source_quote_id, matched_quote_id) is None:
            raise MatchNotFoundError(source_quote_id, matched_quote_id)
