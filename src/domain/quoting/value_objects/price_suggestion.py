"""
PriceSuggestion Value Object

Price derived from one historical quote plus how much to trust it.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


class PriceSuggestion(BaseModel):
    """
    Immutable price suggestion.

    Attributes:
        suggested_price: Price taken from the historical quote, None when the
            quote carries no price
        price_confidence: 0-1, similarity score plus a bonus for accepted
            (final) prices; always 0 when there is no suggested price
        from_final_price: True if the price came from final_agreed_price

    Examples:
        >>> PriceSuggestion.none().suggested_price is None
        True
    """

    suggested_price: Optional[float] = None
    price_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    from_final_price: bool = False

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_confidence_without_price(self) -> "PriceSuggestion":
        """A missing price cannot carry confidence."""
        if self.suggested_price is None and self.price_confidence != 0.0:
            raise ValueError(
                f"price_confidence must be 0 without a suggested price, "
                f"got {self.price_confidence}"
            )
        return self

    @property
    def has_price(self) -> bool:
        return self.suggested_price is not None

    @classmethod
    def none(cls) -> "PriceSuggestion":
        """Suggestion for a candidate that has no usable price."""
        return cls(suggested_price=None, price_confidence=0.0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "suggested_price": self.suggested_price,
            "price_confidence": self.price_confidence,
            "from_final_price": self.from_final_price,
        }
