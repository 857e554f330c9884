"""
RunQuoteMatchingCommand - CQRS Write Command

Encapsulates all data needed to run batch matching for newly parsed quotes.

Responsibility:
    - Data holder for a matching run
    - Validation of quote ids and matching options
    - Conversion into the domain MatchingConfig

Architecture Notes:
    - Part of Application Layer (orchestration)
    - Used by QuoteMatchingUseCase and accepted as-is by POST /api/matching/run
    - Does NOT check that the quotes exist (Use Case responsibility)
"""

import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from src.domain.quoting.matching_config import (
    DEFAULT_ALGORITHM_VERSION,
    DEFAULT_CANDIDATE_LIMIT,
    DEFAULT_MAX_MATCHES,
    DEFAULT_MIN_SCORE,
    MatchingConfig,
)


def _default_candidate_limit() -> int:
    return int(os.getenv("QUOTE_MATCHING_CANDIDATE_LIMIT", str(DEFAULT_CANDIDATE_LIMIT)))


def _default_algorithm_version() -> str:
    return os.getenv("QUOTE_MATCHING_ALGORITHM_VERSION", DEFAULT_ALGORITHM_VERSION)


class RunQuoteMatchingCommand(BaseModel):
    """
    Command triggering matching for a batch of quotes.

    Attributes:
        quote_ids: Quotes to match (non-empty, duplicates dropped, order kept)
        min_score: Minimum overall similarity (0-1)
        max_matches: Matches kept per quote (>= 1)
        algorithm_version: Tag stored with every match
        candidate_limit: Size cap of the historical pool

    Examples:
        >>> command = RunQuoteMatchingCommand(quote_ids=[10726, 10727, 10726])
        >>> command.quote_ids
        [10726, 10727]
        >>> command.to_matching_config().max_matches
        10
    """

    quote_ids: list[int] = Field(description="Quote ids to match", min_length=1)
    min_score: float = Field(default=DEFAULT_MIN_SCORE, ge=0.0, le=1.0)
    max_matches: int = Field(default=DEFAULT_MAX_MATCHES, ge=1)
    algorithm_version: str = Field(default_factory=_default_algorithm_version)
    candidate_limit: int = Field(default_factory=_default_candidate_limit, ge=1)

    model_config = {
        "json_schema_extra": {
            "example": {
                "quote_ids": [10726, 10727],
                "min_score": 0.5,
                "max_matches": 10,
            }
        }
    }

    @field_validator("quote_ids")
    @classmethod
    def deduplicate_quote_ids(cls, value: list[int]) -> list[int]:
        """Drop repeated ids, keeping first occurrence order."""
        return list(dict.fromkeys(value))

    def to_matching_config(self, base: Optional[MatchingConfig] = None) -> MatchingConfig:
        """Build the MatchingConfig the engine runs with."""
        return (base or MatchingConfig.default()).with_overrides(
            min_score=self.min_score,
            max_matches=self.max_matches,
            algorithm_version=self.algorithm_version,
        )
