"""
SimilarityScore Value Object

Overall similarity between a query quote and one candidate, together with the
per-attribute breakdown it was computed from.

Architecture Notes:
    - Value Object (immutable, defined by values)
    - Uses Pydantic for validation
    - Scores are rounded to 4 decimal places by the aggregator before they
      reach this object, so persisted/compared values stay stable
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class SimilarityScore(BaseModel):
    """
    Immutable weighted similarity result.

    Attributes:
        score: Weighted average over the attributes present in the weight
            table (0-1)
        criteria: Attribute name -> individual score (0-1), always contains
            every scored attribute even if it carried no weight

    Examples:
        >>> similarity = SimilarityScore(
        ...     score=0.8125,
        ...     criteria={"origin": 1.0, "destination": 0.625},
        ... )
        >>> similarity.is_above(0.5)
        True
    """

    score: float = Field(..., description="Overall weighted score (0-1)", ge=0.0, le=1.0)

    criteria: dict[str, float] = Field(
        default_factory=dict, description="Per-attribute scores (0-1)"
    )

    model_config = {"frozen": True}

    @field_validator("criteria")
    @classmethod
    def validate_criteria_range(cls, criteria: dict[str, float]) -> dict[str, float]:
        """Every attribute score must lie in [0, 1]."""
        for name, value in criteria.items():
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Score for '{name}' must be in range 0-1, got {value}")
        return criteria

    def is_above(self, threshold: float) -> bool:
        """True if score >= threshold."""
        return self.score >= threshold

    def to_dict(self) -> dict[str, Any]:
        return {"score": self.score, "criteria": dict(self.criteria)}
