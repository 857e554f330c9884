"""
QuoteRecord Entity

Core domain entity representing one shipping-quote request/response row.
The same shape is used for the query (a newly parsed request) and for every
historical candidate it is compared against.

Responsibility:
    - Typed representation of route, cargo and pricing attributes
    - Lenient parsing of values produced by the extraction pipeline
    - Distinguish "not stated" (None) from explicit False/0
    - Expose the preferred price source for price suggestion

Architecture Notes:
    - Entity (identity = quote_id, immutable once created)
    - Uses Pydantic for validation
    - Part of Quoting subdomain
    - No external dependencies (no DB, no LLM)
"""

from decimal import Decimal
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from src.domain.quoting.normalization import (
    clean_text,
    parse_bool,
    parse_decimal,
    parse_float,
    parse_int,
)


class QuoteRecord(BaseModel):
    """
    Immutable shipping-quote record.

    Attributes:
        quote_id: Unique integer identifier of the quote
        origin_city / origin_state_province / origin_country: Pickup location
        destination_city / destination_state_province / destination_country:
            Delivery location
        cargo_description: Free-text description of the goods
        cargo_weight: Weight in `weight_unit` (kg assumed when unit is None)
        weight_unit: "kg", "lbs", "tons", "t", ...
        cargo_length / cargo_width / cargo_height: Dimensions, unit consistent
            within one record
        number_of_pieces: Piece/pallet count
        hazardous_material: True/False when stated, None when not stated
        service_type: Ground, Drayage, Ocean, Intermodal, Transloading, ...
        initial_quote_amount: First price quoted to the customer
        final_agreed_price: Price the customer accepted (authoritative)

    Parsing Rules:
        Numeric fields accept numbers or numeric strings ("65,000",
        "$2,200.00"). Values that still cannot be parsed become None instead
        of failing validation, so one bad field never aborts a matching run.

    Examples:
        >>> record = QuoteRecord(
        ...     quote_id=1,
        ...     origin_city="Savannah",
        ...     cargo_weight="65,000",
        ...     weight_unit="lbs",
        ...     final_agreed_price="2200",
        ... )
        >>> record.cargo_weight
        65000.0
        >>> record.preferred_price
        Decimal('2200')
    """

    quote_id: int = Field(..., description="Unique quote identifier")

    origin_city: Optional[str] = None
    origin_state_province: Optional[str] = None
    origin_country: Optional[str] = None

    destination_city: Optional[str] = None
    destination_state_province: Optional[str] = None
    destination_country: Optional[str] = None

    cargo_description: Optional[str] = None
    cargo_weight: Optional[float] = None
    weight_unit: Optional[str] = None
    cargo_length: Optional[float] = None
    cargo_width: Optional[float] = None
    cargo_height: Optional[float] = None
    number_of_pieces: Optional[int] = None
    hazardous_material: Optional[bool] = None

    service_type: Optional[str] = None
    initial_quote_amount: Optional[Decimal] = None
    final_agreed_price: Optional[Decimal] = None

    model_config = {
        "frozen": True,
        "extra": "ignore",
        "json_schema_extra": {
            "examples": [
                {
                    "quote_id": 2,
                    "origin_city": "Savannah",
                    "origin_state_province": "GA",
                    "origin_country": "USA",
                    "destination_city": "Chicago",
                    "destination_state_province": "IL",
                    "destination_country": "USA",
                    "service_type": "Drayage",
                    "cargo_weight": 64000,
                    "weight_unit": "lbs",
                    "final_agreed_price": 2200,
                }
            ]
        },
    }

    @field_validator(
        "origin_city",
        "origin_state_province",
        "origin_country",
        "destination_city",
        "destination_state_province",
        "destination_country",
        "cargo_description",
        "weight_unit",
        "service_type",
        mode="before",
    )
    @classmethod
    def _normalize_text(cls, value: Any) -> Optional[str]:
        return clean_text(value)

    @field_validator(
        "cargo_weight", "cargo_length", "cargo_width", "cargo_height", mode="before"
    )
    @classmethod
    def _parse_measure(cls, value: Any) -> Optional[float]:
        return parse_float(value)

    @field_validator("number_of_pieces", mode="before")
    @classmethod
    def _parse_pieces(cls, value: Any) -> Optional[int]:
        return parse_int(value)

    @field_validator("hazardous_material", mode="before")
    @classmethod
    def _parse_hazmat(cls, value: Any) -> Optional[bool]:
        return parse_bool(value)

    @field_validator("initial_quote_amount", "final_agreed_price", mode="before")
    @classmethod
    def _parse_price(cls, value: Any) -> Optional[Decimal]:
        return parse_decimal(value)

    @property
    def preferred_price(self) -> Optional[Decimal]:
        """Final agreed price when present, otherwise the initial quote."""
        if self.final_agreed_price is not None:
            return self.final_agreed_price
        return self.initial_quote_amount

    @property
    def has_pricing(self) -> bool:
        """True when the record can serve as a price-suggestion source."""
        return self.preferred_price is not None

    @property
    def dimensions(self) -> tuple[Optional[float], Optional[float], Optional[float]]:
        """(length, width, height) as supplied."""
        return (self.cargo_length, self.cargo_width, self.cargo_height)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "QuoteRecord":
        """
        Build a record from a database/JSON row.

        Unknown keys are ignored, so full `shipping_quotes` rows can be
        passed as-is.
        """
        return cls.model_validate(dict(row))

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation (prices as strings)."""
        return self.model_dump(mode="json")

    def __str__(self) -> str:
        origin = self.origin_city or "?"
        destination = self.destination_city or "?"
        return f"Quote {self.quote_id}: {origin} -> {destination} ({self.service_type or 'n/a'})"
