"""
Similarity Scorer

Pure functions computing a [0, 1] similarity value for one attribute pair of
two quote records.

Responsibility:
    - String similarity (normalized Levenshtein distance)
    - Location similarity (city/state/country blend over shared fields)
    - Numeric similarity with relative tolerance bands
    - Unit-normalized weight comparison
    - Volumetric dimension comparison
    - Token-set (Jaccard) cargo description comparison
    - Case-insensitive exact match

Business Rules:
    - Missing data is never an error: it scores 0 unless stated otherwise
    - Two absent strings are a vacuous match (1.0) so records that both lack
      an optional field are not penalized
    - Location components absent on either side are excluded from the
      weighted blend instead of scoring 0

Architecture Notes:
    - Pure domain service (no I/O, no state, deterministic)
    - Thread-safe by construction
"""

from typing import Any, Iterable, Optional

from src.domain.quoting.entities.quote_record import QuoteRecord
from src.domain.quoting.matching_config import (
    DEFAULT_NUMERIC_TOLERANCE,
    DIMENSIONS_TOLERANCE,
    LOCATION_WEIGHT_CITY,
    LOCATION_WEIGHT_COUNTRY,
    LOCATION_WEIGHT_STATE,
    WEIGHT_TOLERANCE,
)
from src.domain.quoting.normalization import parse_float, to_kilograms, tokenize


def _is_absent(value: Any) -> bool:
    return value is None or value == ""


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


# ============================================================================
# STRING SIMILARITY
# ============================================================================


def levenshtein_distance(left: str, right: str) -> int:
    """
    Case-insensitive Levenshtein edit distance.

    Examples:
        >>> levenshtein_distance("Chicago", "chicgo")
        1
    """
    left = left.lower()
    right = right.lower()

    if left == right:
        return 0
    if not left:
        return len(right)
    if not right:
        return len(left)

    previous = list(range(len(right) + 1))
    for i, left_char in enumerate(left, start=1):
        current = [i]
        for j, right_char in enumerate(right, start=1):
            cost = 0 if left_char == right_char else 1
            current.append(
                min(current[j - 1] + 1, previous[j] + 1, previous[j - 1] + cost)
            )
        previous = current
    return previous[-1]


def string_similarity(left: Optional[str], right: Optional[str]) -> float:
    """
    Normalized edit-distance similarity.

    Returns:
        1.0 if both strings are absent, 0.0 if exactly one is absent,
        otherwise 1 - levenshtein / max(len), clamped to [0, 1]

    Examples:
        >>> string_similarity("Savannah", "savannah")
        1.0
        >>> string_similarity(None, None)
        1.0
        >>> string_similarity("GA", None)
        0.0
    """
    if _is_absent(left) and _is_absent(right):
        return 1.0
    if _is_absent(left) or _is_absent(right):
        return 0.0

    left_text = str(left)
    right_text = str(right)
    max_length = max(len(left_text), len(right_text))
    distance = levenshtein_distance(left_text, right_text)
    return _clamp(1.0 - distance / max_length)


def location_similarity(
    city1: Optional[str],
    state1: Optional[str],
    country1: Optional[str],
    city2: Optional[str],
    state2: Optional[str],
    country2: Optional[str],
) -> float:
    """
    Weighted blend of country (0.4), city (0.4) and state/province (0.2).

    A component only takes part when both sides have it; its weight is then
    part of the denominator. With no comparable component the result is 0.

    Examples:
        >>> location_similarity(None, None, "USA", None, None, "USA")
        1.0
        >>> location_similarity(None, None, None, "Miami", "FL", "USA")
        0.0
    """
    components = (
        (country1, country2, LOCATION_WEIGHT_COUNTRY),
        (city1, city2, LOCATION_WEIGHT_CITY),
        (state1, state2, LOCATION_WEIGHT_STATE),
    )

    total_weight = 0.0
    weighted_sum = 0.0
    for left, right, weight in components:
        if _is_absent(left) or _is_absent(right):
            continue
        weighted_sum += weight * string_similarity(left, right)
        total_weight += weight

    if total_weight == 0:
        return 0.0
    return _clamp(weighted_sum / total_weight)


# ============================================================================
# NUMERIC SIMILARITY
# ============================================================================


def numeric_similarity(
    value1: Any, value2: Any, tolerance: float = DEFAULT_NUMERIC_TOLERANCE
) -> float:
    """
    Relative-difference similarity with a tolerance band.

    Formula: max(0, 1 - |v1 - v2| / max(|v1|, |v2|) / tolerance)

    Args:
        value1: Number or numeric string (None/unparseable -> 0)
        value2: Number or numeric string (None/unparseable -> 0)
        tolerance: Relative difference at which the score reaches 0

    Examples:
        >>> numeric_similarity(100, 100)
        1.0
        >>> numeric_similarity(0, 0)
        1.0
        >>> numeric_similarity(100, 90)
        0.5
        >>> numeric_similarity(None, 5)
        0.0
    """
    number1 = parse_float(value1)
    number2 = parse_float(value2)
    if number1 is None or number2 is None:
        return 0.0

    max_value = max(abs(number1), abs(number2))
    if max_value == 0:
        return 1.0

    relative_difference = abs(number1 - number2) / max_value
    return _clamp(1.0 - relative_difference / tolerance)


def weight_similarity(
    weight1: Any, unit1: Optional[str], weight2: Any, unit2: Optional[str]
) -> float:
    """
    Compare two cargo weights after converting both to kilograms.

    Missing or zero weights, and weights that cannot be converted, score 0.
    Uses the 30% weight tolerance.

    Examples:
        >>> round(weight_similarity(1000, "lbs", 453.592, "kg"), 4)
        1.0
    """
    kg1 = to_kilograms(weight1, unit1)
    kg2 = to_kilograms(weight2, unit2)
    if not kg1 or not kg2:
        return 0.0
    return numeric_similarity(kg1, kg2, WEIGHT_TOLERANCE)


def _volume_proxy(dimensions: Iterable[Any]) -> Optional[float]:
    """Product of the populated dimensions, None when none is populated."""
    populated = [parse_float(value) for value in dimensions]
    populated = [value for value in populated if value]
    if not populated:
        return None

    volume = 1.0
    for value in populated:
        volume *= value
    return volume


def dimensions_similarity(record1: QuoteRecord, record2: QuoteRecord) -> float:
    """
    Compare cargo volume proxies with a 40% tolerance.

    The proxy multiplies only the dimensions present on each side, so a record
    with only a length is compared as if that length were its volume.

    Returns 0 if either side has no populated dimension.
    """
    volume1 = _volume_proxy(record1.dimensions)
    volume2 = _volume_proxy(record2.dimensions)
    if volume1 is None or volume2 is None:
        return 0.0
    return numeric_similarity(volume1, volume2, DIMENSIONS_TOLERANCE)


# ============================================================================
# TEXT AND CATEGORY SIMILARITY
# ============================================================================


def cargo_similarity(description1: Optional[str], description2: Optional[str]) -> float:
    """
    Jaccard similarity of cargo description token sets.

    Examples:
        >>> cargo_similarity("steel coils", "coils of steel")
        1.0
        >>> cargo_similarity("steel coils", None)
        0.0
    """
    tokens1 = tokenize(description1)
    tokens2 = tokenize(description2)
    if not tokens1 or not tokens2:
        return 0.0
    return len(tokens1 & tokens2) / len(tokens1 | tokens2)


def _as_comparable_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).strip().lower()


def exact_match(value1: Any, value2: Any) -> float:
    """
    Case-insensitive equality after coercion to string.

    Booleans compare as "true"/"false", so an explicit False is a stated
    value and only None (or "") counts as absent.

    Returns:
        1.0 if both absent, 0.0 if exactly one absent, else 1.0/0.0 for
        equal/unequal

    Examples:
        >>> exact_match("Drayage", "DRAYAGE")
        1.0
        >>> exact_match(False, None)
        0.0
        >>> exact_match(None, None)
        1.0
    """
    if _is_absent(value1) and _is_absent(value2):
        return 1.0
    if _is_absent(value1) or _is_absent(value2):
        return 0.0
    return 1.0 if _as_comparable_text(value1) == _as_comparable_text(value2) else 0.0
