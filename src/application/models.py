"""
Shared Application Models

Responsibility:
    Contains shared models used across Application Layer.
    Prevents circular dependencies between use cases, commands and the API.

Architecture Notes:
    - Part of Application Layer (Shared)
    - Plain DTOs, no business logic (belongs to Domain Layer)
    - API Layer returns these directly as response bodies

Contains:
    - MatchingError: one per-quote failure of a batch run
    - MatchingRunSummary: outcome of a batch matching run
"""

from typing import Optional

from pydantic import BaseModel, Field


class MatchingError(BaseModel):
    """
    Failure recorded for a single quote during a batch run.

    Attributes:
        quote_id: Quote whose matching failed
        error: Human-readable error description
    """

    quote_id: int
    error: str


class MatchingRunSummary(BaseModel):
    """
    Outcome of QuoteMatchingUseCase.process_new_quotes().

    Attributes:
        processed: Number of quotes matched successfully (zero matches counts)
        matches_created: Number of matches written to the match store
        errors: Per-quote failures (the run continues past them)
        results: Best similarity score per processed quote, None if no match

    Usage:
        >>> summary = MatchingRunSummary(processed=2, matches_created=3)
        >>> summary.failed
        0
    """

    processed: int = Field(default=0, ge=0)
    matches_created: int = Field(default=0, ge=0)
    errors: list[MatchingError] = Field(default_factory=list)
    results: dict[int, Optional[float]] = Field(default_factory=dict)

    model_config = {
        "json_schema_extra": {
            "example": {
                "processed": 2,
                "matches_created": 3,
                "errors": [{"quote_id": 10731, "error": "Redis unavailable"}],
                "results": {"10726": 0.9312, "10727": None},
            }
        }
    }

    @property
    def failed(self) -> int:
        return len(self.errors)
