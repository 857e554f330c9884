"""
Redis Quote Match Repository

Concrete implementation of QuoteMatchRepositoryProtocol from Domain Layer.

Storage Strategy:
    - Hash "quote:matches:{source_quote_id}"
    - Field: matched quote id
    - Value: JSON serialized QuoteMatch.to_dict()

    One hash field per (source, matched) pair, so re-saving a pair replaces
    the earlier match instead of duplicating it.

    Feedback:
    - Hash "quote:feedback:{source_quote_id}"
    - Field: "{matched}:user:{user_id}" (replaced on resubmission) or
      "{matched}:anon:{uuid}" for anonymous feedback
    - Set "quote:feedback_index": source ids that have feedback
"""

import json
import logging
import uuid
from typing import Iterable, Optional

from redis import Redis
from redis.exceptions import RedisError

from src.domain.quoting.value_objects.match_feedback import (
    FeedbackStatistics,
    MatchFeedback,
)
from src.domain.quoting.value_objects.quote_match import QuoteMatch
from src.domain.shared.exceptions import PersistenceError
from src.infrastructure.persistence.redis.connection import get_redis_client

logger = logging.getLogger(__name__)

MATCHES_KEY_PREFIX = "quote:matches:"
FEEDBACK_KEY_PREFIX = "quote:feedback:"
FEEDBACK_INDEX_KEY = "quote:feedback_index"


class RedisQuoteMatchRepository:
    """
    Redis-based implementation of QuoteMatchRepositoryProtocol.

    Examples:
        >>> repo = RedisQuoteMatchRepository()
        >>> await repo.save_matches(matches)
        3
        >>> best = (await repo.get_matches_for_quote(10726, limit=1))[0]
    """

    def __init__(self, redis_client: Optional[Redis] = None) -> None:
        self._redis = redis_client

    @property
    def redis(self) -> Redis:
        if self._redis is None:
            self._redis = get_redis_client()
        return self._redis

    @staticmethod
    def _get_key(source_quote_id: int) -> str:
        return f"{MATCHES_KEY_PREFIX}{source_quote_id}"

    async def save_matches(self, matches: Iterable[QuoteMatch]) -> int:
        """
        Bulk-store matches in one pipeline.

        Returns:
            Number of matches written

        Raises:
            PersistenceError: If Redis fails
        """
        matches = list(matches)
        if not matches:
            return 0

        try:
            pipe = self.redis.pipeline()
            for match in matches:
                pipe.hset(
                    self._get_key(match.source_quote_id),
                    str(match.matched_quote_id),
                    json.dumps(match.to_dict()),
                )
            pipe.execute()
        except RedisError as e:
            logger.error(f"Failed to save {len(matches)} match(es): {e}")
            raise PersistenceError(
                "Failed to save matches", operation="save_matches", original_error=e
            ) from e

        logger.debug(f"Saved {len(matches)} match(es)")
        return len(matches)

    async def get_matches_for_quote(
        self, quote_id: int, limit: int = 10, min_score: float = 0.0
    ) -> list[QuoteMatch]:
        """
        Stored matches of `quote_id` with score >= min_score, best first.

        Raises:
            PersistenceError: If Redis fails
        """
        try:
            stored = self.redis.hgetall(self._get_key(quote_id))
        except RedisError as e:
            logger.error(f"Failed to load matches for quote {quote_id}: {e}")
            raise PersistenceError(
                f"Failed to load matches for quote {quote_id}",
                operation="get_matches_for_quote",
                original_error=e,
            ) from e

        matches = [QuoteMatch.from_dict(json.loads(raw)) for raw in stored.values()]
        matches = [match for match in matches if match.similarity_score >= min_score]
        matches.sort(key=lambda match: (-match.similarity_score, match.matched_quote_id))
        return matches[:limit]

    async def get_match(
        self, source_quote_id: int, matched_quote_id: int
    ) -> Optional[QuoteMatch]:
        """
        Stored match of one (source, matched) pair.

        Raises:
            PersistenceError: If Redis fails
        """
        try:
            raw = self.redis.hget(self._get_key(source_quote_id), str(matched_quote_id))
        except RedisError as e:
            raise PersistenceError(
                f"Failed to load match {source_quote_id} -> {matched_quote_id}",
                operation="get_match",
                original_error=e,
            ) from e

        return QuoteMatch.from_dict(json.loads(raw)) if raw else None

    async def delete_matches_for_quote(self, quote_id: int) -> int:
        """
        Remove every stored match of `quote_id`.

        Returns:
            Number of matches removed

        Raises:
            PersistenceError: If Redis fails
        """
        key = self._get_key(quote_id)
        try:
            pipe = self.redis.pipeline()
            pipe.hlen(key)
            pipe.delete(key)
            count, _ = pipe.execute()
        except RedisError as e:
            logger.error(f"Failed to delete matches for quote {quote_id}: {e}")
            raise PersistenceError(
                f"Failed to delete matches for quote {quote_id}",
                operation="delete_matches_for_quote",
                original_error=e,
            ) from e

        return int(count)

    # ------------------------------------------------------------------
    # Feedback
    # ------------------------------------------------------------------

    @staticmethod
    def _get_feedback_key(source_quote_id: int) -> str:
        return f"{FEEDBACK_KEY_PREFIX}{source_quote_id}"

    @staticmethod
    def _feedback_field(feedback: MatchFeedback) -> str:
        if feedback.user_id is not None:
            return f"{feedback.matched_quote_id}:user:{feedback.user_id}"
        return f"{feedback.matched_quote_id}:anon:{uuid.uuid4().hex}"

    async def save_feedback(self, feedback: MatchFeedback) -> None:
        """
        Store one feedback entry.

        Raises:
            PersistenceError: If Redis fails
        """
        try:
            pipe = self.redis.pipeline()
            pipe.hset(
                self._get_feedback_key(feedback.source_quote_id),
                self._feedback_field(feedback),
                json.dumps(feedback.to_dict()),
            )
            pipe.sadd(FEEDBACK_INDEX_KEY, str(feedback.source_quote_id))
            pipe.execute()
        except RedisError as e:
            logger.error(
                f"Failed to save feedback on match {feedback.source_quote_id} -> "
                f"{feedback.matched_quote_id}: {e}"
            )
            raise PersistenceError(
                "Failed to save feedback", operation="save_feedback", original_error=e
            ) from e

        logger.debug(
            f"Saved feedback ({feedback.rating:+d}) on match "
            f"{feedback.source_quote_id} -> {feedback.matched_quote_id}"
        )

    async def get_feedback_for_match(
        self, source_quote_id: int, matched_quote_id: int
    ) -> list[MatchFeedback]:
        """
        Feedback on one match, newest first.

        Raises:
            PersistenceError: If Redis fails
        """
        try:
            stored = list(
                self.redis.hscan_iter(
                    self._get_feedback_key(source_quote_id),
                    match=f"{matched_quote_id}:*",
                )
            )
        except RedisError as e:
            raise PersistenceError(
                f"Failed to load feedback on match {source_quote_id} -> {matched_quote_id}",
                operation="get_feedback_for_match",
                original_error=e,
            ) from e

        feedback = [MatchFeedback.from_dict(json.loads(raw)) for _, raw in stored]
        feedback.sort(key=lambda entry: entry.created_at, reverse=True)
        return feedback

    async def get_feedback_statistics(
        self, algorithm_version: Optional[str] = None
    ) -> FeedbackStatistics:
        """
        Aggregate all feedback joined with the matches it rates.

        Feedback whose match was deleted (e.g. by a rematch) is not counted.

        Raises:
            PersistenceError: If Redis fails
        """
        rated_matches: list[tuple[MatchFeedback, QuoteMatch]] = []
        try:
            members = self.redis.smembers(FEEDBACK_INDEX_KEY)
            source_ids = sorted(int(member) for member in members)
            for source_id in source_ids:
                feedback_entries = self.redis.hgetall(self._get_feedback_key(source_id))
                if not feedback_entries:
                    continue
                stored_matches = self.redis.hgetall(self._get_key(source_id))
                for raw in feedback_entries.values():
                    feedback = MatchFeedback.from_dict(json.loads(raw))
                    raw_match = stored_matches.get(str(feedback.matched_quote_id))
                    if raw_match is not None:
                        rated_matches.append(
                            (feedback, QuoteMatch.from_dict(json.loads(raw_match)))
                        )
        except RedisError as e:
            logger.error(f"Failed to compute feedback statistics: {e}")
            raise PersistenceError(
                "Failed to compute feedback statistics",
                operation="get_feedback_statistics",
                original_error=e,
            ) from e

        return FeedbackStatistics.from_feedback(
            rated_matches, algorithm_version=algorithm_version
        )
