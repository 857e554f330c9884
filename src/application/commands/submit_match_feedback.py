"""
SubmitMatchFeedbackCommand - CQRS Write Command

Body of POST /api/matching/quotes/{quote_id}/matches/{matched_id}/feedback.
The match itself is identified by the path; the use case checks it exists.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from src.domain.quoting.value_objects.match_feedback import FeedbackReason, MatchFeedback


class SubmitMatchFeedbackCommand(BaseModel):
    """
    Thumbs up / thumbs down on a stored match.

    Attributes:
        rating: 1 (useful match) or -1 (not useful)
        feedback_reason: Optional reason from FeedbackReason
        feedback_notes: Free text
        actual_price_used: Price the user ended up quoting
        user_id: Identifies the user; resubmitting replaces their feedback
    """

    rating: Literal[1, -1]
    feedback_reason: Optional[FeedbackReason] = None
    feedback_notes: Optional[str] = Field(default=None, max_length=2000)
    actual_price_used: Optional[float] = Field(default=None, ge=0.0, allow_inf_nan=False)
    user_id: Optional[str] = Field(default=None, max_length=128)

    model_config = {
        "json_schema_extra": {
            "example": {
                "rating": 1,
                "feedback_reason": "good_match",
                "actual_price_used": 2250,
                "user_id": "dispatcher-7",
            }
        }
    }

    def to_feedback(self, source_quote_id: int, matched_quote_id: int) -> MatchFeedback:
        return MatchFeedback(
            source_quote_id=source_quote_id,
            matched_quote_id=matched_quote_id,
            **self.model_dump(),
        )
