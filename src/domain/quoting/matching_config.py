"""
Matching Configuration

Configuration constants for QuoteMatchingEngine attribute weighting, tolerances
and thresholds. Defines the business rules for historical quote matching.

Business Context:
    A new shipping-quote request is compared against historical quotes on eight
    attributes. The weights reflect how strongly each attribute drives price:
    - Origin (20%) / Destination (20%) - the lane is the main price driver
    - Cargo type (15%) / Weight (15%) - what is moved and how heavy it is
    - Dimensions (10%) / Service type (10%) - equipment and mode
    - Hazmat (5%) / Pieces (5%) - surcharges and handling

Design Principles:
    - Configuration as code (not database)
    - Immutable configuration object passed into the engine
    - No process-wide mutable state
"""

import math
from dataclasses import dataclass, field
from numbers import Real
from types import MappingProxyType
from typing import Any, Final, Mapping, Optional

from src.domain.shared.exceptions import InvalidMatchingConfigError


# ============================================================================
# ATTRIBUTE WEIGHTS - Business rules for scoring importance
# ============================================================================

WEIGHT_ORIGIN: Final[float] = 0.20
WEIGHT_DESTINATION: Final[float] = 0.20
WEIGHT_CARGO_TYPE: Final[float] = 0.15
WEIGHT_WEIGHT: Final[float] = 0.15
WEIGHT_DIMENSIONS: Final[float] = 0.10
WEIGHT_SERVICE_TYPE: Final[float] = 0.10
WEIGHT_HAZMAT: Final[float] = 0.05
WEIGHT_PIECES: Final[float] = 0.05

DEFAULT_WEIGHTS: Final[Mapping[str, float]] = MappingProxyType(
    {
        "origin": WEIGHT_ORIGIN,
        "destination": WEIGHT_DESTINATION,
        "cargo_type": WEIGHT_CARGO_TYPE,
        "weight": WEIGHT_WEIGHT,
        "dimensions": WEIGHT_DIMENSIONS,
        "service_type": WEIGHT_SERVICE_TYPE,
        "hazmat": WEIGHT_HAZMAT,
        "pieces": WEIGHT_PIECES,
    }
)

# Attribute names produced by the aggregator, in breakdown order
ATTRIBUTE_NAMES: Final[tuple[str, ...]] = tuple(DEFAULT_WEIGHTS.keys())

DEFAULT_WEIGHTS_SUM: Final[float] = sum(DEFAULT_WEIGHTS.values())


# ============================================================================
# LOCATION COMPONENT WEIGHTS
# ============================================================================

LOCATION_WEIGHT_COUNTRY: Final[float] = 0.4
LOCATION_WEIGHT_CITY: Final[float] = 0.4
LOCATION_WEIGHT_STATE: Final[float] = 0.2


# ============================================================================
# NUMERIC TOLERANCES - relative difference at which a score reaches 0
# ============================================================================

DEFAULT_NUMERIC_TOLERANCE: Final[float] = 0.2
WEIGHT_TOLERANCE: Final[float] = 0.3
PIECES_TOLERANCE: Final[float] = 0.3
DIMENSIONS_TOLERANCE: Final[float] = 0.4


# ============================================================================
# UNIT CONVERSION
# ============================================================================

DEFAULT_WEIGHT_UNIT: Final[str] = "kg"
KG_PER_POUND: Final[float] = 0.453592
KG_PER_TON: Final[float] = 1000.0


# ============================================================================
# THRESHOLDS, LIMITS AND PRICE CONFIDENCE
# ============================================================================

DEFAULT_MIN_SCORE: Final[float] = 0.5
DEFAULT_MAX_MATCHES: Final[int] = 10

# Confidence bonus when the price comes from final_agreed_price
FINAL_PRICE_CONFIDENCE_BONUS: Final[float] = 0.1

# Decimal places kept on every returned score
SCORE_PRECISION: Final[int] = 4

DEFAULT_ALGORITHM_VERSION: Final[str] = "v1"

# Historical pool cap applied by callers before invoking the engine
DEFAULT_CANDIDATE_LIMIT: Final[int] = 500


def round_score(value: float) -> float:
    """Round a score to SCORE_PRECISION decimal places."""
    return round(value, SCORE_PRECISION)


def _is_finite(value: Real) -> bool:
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


@dataclass(frozen=True)
class MatchingConfig:
    """
    Complete configuration for QuoteMatchingEngine.

    Encapsulates all tunable values in a single immutable object that is
    passed to the engine constructor. The weight table may be a reduced or
    custom table; it does not have to sum to 1.0 because the aggregator
    normalises by the weights actually present.

    Attributes:
        weights: Attribute name -> weight (read-only mapping)
        min_score: Minimum overall score for a candidate to be returned (0-1)
        max_matches: Maximum number of matches returned per query
        algorithm_version: Tag stored alongside persisted matches for A/B comparison

    Usage:
        config = MatchingConfig.default()
        engine = QuoteMatchingEngine(config=config)
    """

    weights: Mapping[str, float] = field(default_factory=lambda: DEFAULT_WEIGHTS)
    min_score: float = DEFAULT_MIN_SCORE
    max_matches: int = DEFAULT_MAX_MATCHES
    algorithm_version: str = DEFAULT_ALGORITHM_VERSION

    def __post_init__(self) -> None:
        """Validate values and freeze the weight table."""
        frozen_weights: dict[str, float] = {}
        for name, weight in dict(self.weights).items():
            if isinstance(weight, bool) or not isinstance(weight, Real):
                raise InvalidMatchingConfigError(
                    f"Weight for '{name}' must be a number, got {weight!r}",
                    field_name="weights",
                )
            if not _is_finite(weight):
                raise InvalidMatchingConfigError(
                    f"Weight for '{name}' must be finite, got {weight}",
                    field_name="weights",
                )
            if weight < 0:
                raise InvalidMatchingConfigError(
                    f"Weight for '{name}' must be non-negative, got {weight}",
                    field_name="weights",
                )
            frozen_weights[str(name)] = float(weight)

        if not 0.0 <= self.min_score <= 1.0:
            raise InvalidMatchingConfigError(
                f"min_score must be in range 0-1, got {self.min_score}",
                field_name="min_score",
            )
        if self.max_matches < 0:
            raise InvalidMatchingConfigError(
                f"max_matches must be >= 0, got {self.max_matches}",
                field_name="max_matches",
            )

        object.__setattr__(self, "weights", MappingProxyType(frozen_weights))

    @classmethod
    def default(cls) -> "MatchingConfig":
        """
        Get default configuration from module constants.

        Examples:
            >>> config = MatchingConfig.default()
            >>> config.min_score
            0.5
            >>> config.weights["origin"]
            0.2
        """
        return cls()

    @classmethod
    def for_testing(cls, **overrides: Any) -> "MatchingConfig":
        """
        Create configuration with custom overrides for testing.

        Args:
            **overrides: weights, min_score, max_matches, algorithm_version

        Returns:
            MatchingConfig with specified overrides applied

        Raises:
            InvalidMatchingConfigError: If an override is out of range
        """
        defaults: dict[str, Any] = {
            "weights": DEFAULT_WEIGHTS,
            "min_score": DEFAULT_MIN_SCORE,
            "max_matches": DEFAULT_MAX_MATCHES,
            "algorithm_version": DEFAULT_ALGORITHM_VERSION,
        }
        defaults.update(overrides)
        return cls(**defaults)

    def with_overrides(
        self,
        min_score: Optional[float] = None,
        max_matches: Optional[int] = None,
        weights: Optional[Mapping[str, float]] = None,
        algorithm_version: Optional[str] = None,
    ) -> "MatchingConfig":
        """
        Return a copy with per-call overrides applied.

        None means "keep the current value"; an empty weights mapping is a
        valid override (every candidate then scores 0).
        """
        return MatchingConfig(
            weights=self.weights if weights is None else weights,
            min_score=self.min_score if min_score is None else min_score,
            max_matches=self.max_matches if max_matches is None else max_matches,
            algorithm_version=algorithm_version or self.algorithm_version,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization/logging."""
        return {
            "weights": dict(self.weights),
            "min_score": self.min_score,
            "max_matches": self.max_matches,
            "algorithm_version": self.algorithm_version,
        }


# ============================================================================
# MODULE-LEVEL VALIDATION
# ============================================================================

assert (
    0.99 <= DEFAULT_WEIGHTS_SUM <= 1.01
), f"Default weights must sum to 1.0, got {DEFAULT_WEIGHTS_SUM}"

assert (
    0.0 <= DEFAULT_MIN_SCORE <= 1.0
), f"Default min score must be 0-1, got {DEFAULT_MIN_SCORE}"
