"""
MatchFeedback Value Object

User verdict on one stored match (thumbs up / thumbs down), plus the
aggregate view used to track how well matching performs over time.

Responsibility:
    - Validate a single feedback entry (rating, reason, notes, price used)
    - Aggregate feedback joined with its matches into FeedbackStatistics

Architecture Notes:
    - Value Objects (immutable, Pydantic validated)
    - Storage is behind QuoteMatchRepositoryProtocol
"""

from collections import Counter
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Final, Iterable, Optional

from pydantic import BaseModel, Field, field_validator

from src.domain.quoting.normalization import clean_text
from src.domain.quoting.value_objects.quote_match import QuoteMatch


class FeedbackReason(str, Enum):
    """Why a user rated a match the way they did."""

    GOOD_MATCH = "good_match"
    EXCELLENT_SUGGESTION = "excellent_suggestion"
    WRONG_ROUTE = "wrong_route"
    DIFFERENT_CARGO = "different_cargo"
    PRICE_OUTDATED = "price_outdated"
    WEIGHT_MISMATCH = "weight_mismatch"
    SERVICE_MISMATCH = "service_mismatch"
    DIFFERENT_CLIENT_TYPE = "different_client_type"
    OTHER = "other"


VALID_FEEDBACK_REASONS: Final[frozenset[str]] = frozenset(
    reason.value for reason in FeedbackReason
)

THUMBS_UP: Final[int] = 1
THUMBS_DOWN: Final[int] = -1


class MatchFeedback(BaseModel):
    """
    Feedback on the match (source_quote_id -> matched_quote_id).

    Attributes:
        source_quote_id: Quote the match was computed for
        matched_quote_id: Historical quote that was suggested
        rating: 1 (thumbs up) or -1 (thumbs down)
        feedback_reason: Optional FeedbackReason
        feedback_notes: Free text, blank becomes None
        actual_price_used: Price the user actually quoted (>= 0)
        user_id: Who gave the feedback; None for anonymous feedback
        created_at: Submission time (UTC)

    Business Rules:
        - A user has at most one feedback entry per match (a new submission
          replaces the earlier one); anonymous entries are all kept

    Examples:
        >>> feedback = MatchFeedback(
        ...     source_quote_id=10726, matched_quote_id=10611, rating=1,
        ...     feedback_reason="good_match", actual_price_used=2250,
        ... )
        >>> feedback.is_positive
        True
    """

    source_quote_id: int
    matched_quote_id: int
    rating: int
    feedback_reason: Optional[FeedbackReason] = None
    feedback_notes: Optional[str] = Field(default=None, max_length=2000)
    actual_price_used: Optional[float] = Field(default=None, ge=0.0, allow_inf_nan=False)
    user_id: Optional[str] = Field(default=None, max_length=128)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": True}

    @field_validator("rating")
    @classmethod
    def validate_rating(cls, rating: int) -> int:
        if rating not in (THUMBS_UP, THUMBS_DOWN):
            raise ValueError(f"rating must be 1 or -1, got {rating}")
        return rating

    @field_validator("feedback_notes", "user_id", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Optional[str]:
        return clean_text(value)

    @property
    def is_positive(self) -> bool:
        return self.rating == THUMBS_UP

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_quote_id": self.source_quote_id,
            "matched_quote_id": self.matched_quote_id,
            "rating": self.rating,
            "feedback_reason": (
                self.feedback_reason.value if self.feedback_reason else None
            ),
            "feedback_notes": self.feedback_notes,
            "actual_price_used": self.actual_price_used,
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MatchFeedback":
        return cls.model_validate(data)


class FeedbackReasonCount(BaseModel):
    """Number of feedback entries with a given (reason, rating) pair."""

    feedback_reason: FeedbackReason
    rating: int
    count: int

    model_config = {"frozen": True}


class FeedbackStatistics(BaseModel):
    """
    Aggregate feedback over stored matches.

    Attributes:
        total_feedback: Feedback entries counted
        thumbs_up / thumbs_down: Entries per rating
        avg_rating: Mean rating (-1..1, 4 dp), None without feedback
        approval_rate: thumbs_up / total_feedback (4 dp), None without feedback
        avg_similarity_score: Mean score of the rated matches (4 dp)
        price_feedback_count: Entries that reported actual_price_used
        avg_price_error: Mean |suggested_price - actual_price_used| (2 dp) over
            entries whose match had a suggested price
        by_reason: Counts per (reason, rating), most frequent first
        algorithm_version: Filter the statistics were computed with, if any
    """

    total_feedback: int = 0
    thumbs_up: int = 0
    thumbs_down: int = 0
    avg_rating: Optional[float] = None
    approval_rate: Optional[float] = None
    avg_similarity_score: Optional[float] = None
    price_feedback_count: int = 0
    avg_price_error: Optional[float] = None
    by_reason: list[FeedbackReasonCount] = Field(default_factory=list)
    algorithm_version: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def from_feedback(
        cls,
        rated_matches: Iterable[tuple[MatchFeedback, QuoteMatch]],
        algorithm_version: Optional[str] = None,
    ) -> "FeedbackStatistics":
        """
        Aggregate (feedback, match) pairs.

        Pairs whose match was computed with a different algorithm_version are
        ignored when `algorithm_version` is given.
        """
        pairs = [
            (feedback, match)
            for feedback, match in rated_matches
            if algorithm_version is None or match.algorithm_version == algorithm_version
        ]
        total = len(pairs)
        if not total:
            return cls(algorithm_version=algorithm_version)

        thumbs_up = sum(1 for feedback, _ in pairs if feedback.is_positive)
        priced = [
            (feedback.actual_price_used, match.suggested_price)
            for feedback, match in pairs
            if feedback.actual_price_used is not None
        ]
        price_errors = [
            abs(suggested - actual)
            for actual, suggested in priced
            if suggested is not None
        ]
        reasons = Counter(
            (feedback.feedback_reason, feedback.rating)
            for feedback, _ in pairs
            if feedback.feedback_reason is not None
        )

        return cls(
            total_feedback=total,
            thumbs_up=thumbs_up,
            thumbs_down=total - thumbs_up,
            avg_rating=round(sum(f.rating for f, _ in pairs) / total, 4),
            approval_rate=round(thumbs_up / total, 4),
            avg_similarity_score=round(
                sum(m.similarity_score for _, m in pairs) / total, 4
            ),
            price_feedback_count=len(priced),
            avg_price_error=(
                round(sum(price_errors) / len(price_errors), 2) if price_errors else None
            ),
            by_reason=[
                FeedbackReasonCount(feedback_reason=reason, rating=rating, count=count)
                for (reason, rating), count in reasons.most_common()
            ],
            algorithm_version=algorithm_version,
        )
