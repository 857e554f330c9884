"""
QuoteMatch Value Object

Represents one historical quote that matched a query quote, with the score
breakdown and the price suggested from it.

Responsibility:
    - Encapsulate a match result (matched quote + scores + suggested price)
    - Provide transparency (per-attribute breakdown)
    - Carry a summary of the matched quote for caller convenience
    - Immutable value object, never persisted by the domain itself

Architecture Notes:
    - Value Object (immutable, defined by values)
    - Uses Pydantic for validation
    - Persistence (if any) is the caller's responsibility via
      QuoteMatchRepositoryProtocol
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from src.domain.quoting.entities.quote_record import QuoteRecord
from src.domain.quoting.matching_config import DEFAULT_ALGORITHM_VERSION
from src.domain.quoting.value_objects.price_suggestion import PriceSuggestion
from src.domain.quoting.value_objects.similarity_score import SimilarityScore
from src.domain.shared.exceptions import InvalidQuoteMatchError


class MatchedQuoteSummary(BaseModel):
    """
    Display summary of the matched historical quote.

    Attributes:
        origin: "City, Country" of the matched quote
        destination: "City, Country" of the matched quote
        cargo: Cargo description
        service_type: Service type of the matched quote
        final_price: final_agreed_price as supplied
        initial_price: initial_quote_amount as supplied
    """

    origin: str
    destination: str
    cargo: Optional[str] = None
    service_type: Optional[str] = None
    final_price: Optional[float] = None
    initial_price: Optional[float] = None

    model_config = {"frozen": True}

    @classmethod
    def from_record(cls, record: QuoteRecord) -> "MatchedQuoteSummary":
        return cls(
            origin=_format_location(record.origin_city, record.origin_country),
            destination=_format_location(
                record.destination_city, record.destination_country
            ),
            cargo=record.cargo_description,
            service_type=record.service_type,
            final_price=_to_float(record.final_agreed_price),
            initial_price=_to_float(record.initial_quote_amount),
        )


class QuoteMatch(BaseModel):
    """
    Immutable match between a source (query) quote and a historical quote.

    Attributes:
        source_quote_id: Quote the matches were searched for
        matched_quote_id: Historical quote that matched (never the source)
        similarity_score: Overall weighted score (0-1, 4 dp)
        match_criteria: Per-attribute breakdown (0-1, 4 dp)
        suggested_price: Price suggested from the matched quote, or None
        price_confidence: 0-1 when suggested_price is set, otherwise None
        matched_quote: Summary of the matched quote
        algorithm_version: Tag identifying the scoring configuration
        created_at: When the match was computed

    Business Rules:
        - source_quote_id != matched_quote_id (self-matches are forbidden)
        - price_confidence is present only together with suggested_price

    Examples:
        >>> match = QuoteMatch(
        ...     source_quote_id=1,
        ...     matched_quote_id=2,
        ...     similarity_score=0.9312,
        ...     match_criteria={"origin": 1.0},
        ...     suggested_price=2200.0,
        ...     price_confidence=1.0,
        ...     matched_quote=MatchedQuoteSummary(origin="Savannah, USA",
        ...                                       destination="Chicago, USA"),
        ... )
        >>> match.has_price_suggestion
        True
    """

    source_quote_id: int
    matched_quote_id: int

    similarity_score: float = Field(..., ge=0.0, le=1.0)
    match_criteria: dict[str, float] = Field(default_factory=dict)

    suggested_price: Optional[float] = None
    price_confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    matched_quote: MatchedQuoteSummary
    algorithm_version: str = DEFAULT_ALGORITHM_VERSION
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_invariants(self) -> "QuoteMatch":
        """Reject self-matches and out-of-range breakdown values."""
        if self.source_quote_id == self.matched_quote_id:
            raise ValueError(
                f"Quote {self.source_quote_id} cannot be matched with itself"
            )
        for name, value in self.match_criteria.items():
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Criteria '{name}' must be in range 0-1, got {value}")
        if self.suggested_price is None and self.price_confidence is not None:
            raise ValueError("price_confidence requires a suggested_price")
        return self

    @property
    def has_price_suggestion(self) -> bool:
        return self.suggested_price is not None

    @classmethod
    def create(
        cls,
        source: QuoteRecord,
        candidate: QuoteRecord,
        similarity: SimilarityScore,
        suggestion: PriceSuggestion,
        algorithm_version: str = DEFAULT_ALGORITHM_VERSION,
    ) -> "QuoteMatch":
        """
        Factory method assembling a match from engine outputs.

        Args:
            source: Query quote
            candidate: Historical quote that passed the threshold
            similarity: Aggregated score and breakdown
            suggestion: Price suggested from the candidate
            algorithm_version: Configuration tag

        Returns:
            New QuoteMatch instance

        Raises:
            InvalidQuoteMatchError: If source and candidate are the same quote
        """
        if source.quote_id == candidate.quote_id:
            raise InvalidQuoteMatchError(
                f"Quote {source.quote_id} cannot be matched with itself"
            )

        return cls(
            source_quote_id=source.quote_id,
            matched_quote_id=candidate.quote_id,
            similarity_score=similarity.score,
            match_criteria=dict(similarity.criteria),
            suggested_price=suggestion.suggested_price,
            price_confidence=(
                suggestion.price_confidence if suggestion.has_price else None
            ),
            matched_quote=MatchedQuoteSummary.from_record(candidate),
            algorithm_version=algorithm_version,
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary representation.

        Used for API responses, logging and the Redis match store.
        """
        return {
            "source_quote_id": self.source_quote_id,
            "matched_quote_id": self.matched_quote_id,
            "similarity_score": self.similarity_score,
            "match_criteria": dict(self.match_criteria),
            "suggested_price": self.suggested_price,
            "price_confidence": self.price_confidence,
            "matched_quote": self.matched_quote.model_dump(),
            "algorithm_version": self.algorithm_version,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QuoteMatch":
        """Rebuild a match from to_dict() output."""
        return cls.model_validate(data)


def _format_location(city: Optional[str], country: Optional[str]) -> str:
    return ", ".join(part for part in (city, country) if part) or "Unknown"


def _to_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None
