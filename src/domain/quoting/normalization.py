"""
Normalization Helpers

Lenient parsing and normalization used by the QuoteRecord entity and the
similarity scorer.

Responsibility:
    - Parse numeric-or-string values into floats/Decimals (failure -> None)
    - Parse textual boolean flags (failure -> None)
    - Convert cargo weights to kilograms
    - Tokenize cargo descriptions for set comparison

Business Rules:
    - Upstream extraction produces strings such as "65,000", "$2,200.00" or
      "N/A"; anything that cannot be read as a number is treated as missing
    - Weight unit fallback is kilograms, and only the documented unit families
      (pounds, tons) are converted
"""

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from src.domain.quoting.matching_config import (
    DEFAULT_WEIGHT_UNIT,
    KG_PER_POUND,
    KG_PER_TON,
)

# Currency symbols, thousands separators and whitespace stripped before parsing
_NUMERIC_NOISE_PATTERN = re.compile(r"[\s,$€£]")
_NON_ALNUM_PATTERN = re.compile(r"[^a-z0-9\s]")
_MIN_TOKEN_LENGTH = 3

_TRUE_VALUES = frozenset({"true", "t", "yes", "y", "1"})
_FALSE_VALUES = frozenset({"false", "f", "no", "n", "0"})


def clean_text(value: Any) -> Optional[str]:
    """Return stripped text, or None for None/blank values."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_float(value: Any) -> Optional[float]:
    """
    Parse a number from int/float/Decimal/str.

    Returns None for None, booleans, blank or unparseable strings, NaN,
    infinities and integers too large for a float.

    Examples:
        >>> parse_float("65,000")
        65000.0
        >>> parse_float("$2,200.50")
        2200.5
        >>> parse_float("N/A") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float, Decimal)):
        try:
            number = float(value)
        except OverflowError:
            return None
    else:
        text = _NUMERIC_NOISE_PATTERN.sub("", str(value))
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None

    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Parse a monetary amount; same leniency rules as parse_float()."""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        if parse_float(value) is None:
            return None
        amount = Decimal(str(value))
    else:
        text = _NUMERIC_NOISE_PATTERN.sub("", str(value))
        if not text:
            return None
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None

    # Out of float range
    if not amount.is_finite() or parse_float(amount) is None:
        return None
    return amount


def parse_int(value: Any) -> Optional[int]:
    """Parse a whole-number count; fractional values are truncated."""
    number = parse_float(value)
    if number is None:
        return None
    return int(number)


def parse_bool(value: Any) -> Optional[bool]:
    """
    Parse a tri-state flag.

    None and unrecognised values stay None ("not stated"), which is distinct
    from an explicit False.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)

    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None


def to_kilograms(weight: Any, unit: Optional[str]) -> Optional[float]:
    """
    Convert a weight to kilograms.

    Conversion table:
        - unit containing "lb" or starting with "pound" -> x 0.453592
        - unit starting with "ton" or exactly "t"        -> x 1000
        - anything else (including missing unit)         -> assumed kg

    Args:
        weight: Numeric or numeric-string weight
        unit: Unit of measure as supplied by the extraction pipeline

    Returns:
        Weight in kilograms, or None if the weight is not numeric

    Examples:
        >>> round(to_kilograms(1000, "lbs"), 3)
        453.592
        >>> to_kilograms("2", "tons")
        2000.0
        >>> to_kilograms(500, None)
        500.0
    """
    number = parse_float(weight)
    if number is None:
        return None

    normalized_unit = (clean_text(unit) or DEFAULT_WEIGHT_UNIT).lower()

    if "lb" in normalized_unit or normalized_unit.startswith("pound"):
        return number * KG_PER_POUND
    if normalized_unit.startswith("ton") or normalized_unit == "t":
        return number * KG_PER_TON
    return number


def tokenize(text: Optional[str]) -> set[str]:
    """
    Tokenize a cargo description into a set of comparable words.

    Lowercases, replaces every non-alphanumeric character with whitespace,
    splits, and drops tokens of two characters or fewer.

    Examples:
        >>> sorted(tokenize("Steel coils, 20' container (HC)"))
        ['coils', 'container', 'steel']
    """
    if not text:
        return set()
    normalized = _NON_ALNUM_PATTERN.sub(" ", text.lower())
    return {token for token in normalized.split() if len(token) >= _MIN_TOKEN_LENGTH}
