"""
Similarity Aggregator

Combines the eight per-attribute scores of two quote records into one
weighted overall score.

Responsibility:
    - Run every attribute scorer for a (source, candidate) pair
    - Weighted average over the attributes present in the weight table
    - Round overall and per-attribute scores to 4 decimal places

Business Rules:
    - Attributes missing from the supplied weight table are dropped from both
      numerator and denominator (a reduced table re-normalizes)
    - An empty (or all-zero) effective weight table yields an overall score of 0
    - The breakdown always reports all eight attributes
"""

from typing import Mapping, Optional

from src.domain.quoting.entities.quote_record import QuoteRecord
from src.domain.quoting.matching_config import (
    DEFAULT_WEIGHTS,
    PIECES_TOLERANCE,
    round_score,
)
from src.domain.quoting.services.similarity import (
    cargo_similarity,
    dimensions_similarity,
    exact_match,
    location_similarity,
    numeric_similarity,
    weight_similarity,
)
from src.domain.quoting.value_objects.similarity_score import SimilarityScore


def score_attributes(source: QuoteRecord, candidate: QuoteRecord) -> dict[str, float]:
    """
    Compute the raw (unrounded) score of every attribute.

    Returns:
        Mapping with keys origin, destination, cargo_type, weight, dimensions,
        service_type, hazmat, pieces
    """
    return {
        "origin": location_similarity(
            source.origin_city,
            source.origin_state_province,
            source.origin_country,
            candidate.origin_city,
            candidate.origin_state_province,
            candidate.origin_country,
        ),
        "destination": location_similarity(
            source.destination_city,
            source.destination_state_province,
            source.destination_country,
            candidate.destination_city,
            candidate.destination_state_province,
            candidate.destination_country,
        ),
        "cargo_type": cargo_similarity(
            source.cargo_description, candidate.cargo_description
        ),
        "weight": weight_similarity(
            source.cargo_weight,
            source.weight_unit,
            candidate.cargo_weight,
            candidate.weight_unit,
        ),
        "dimensions": dimensions_similarity(source, candidate),
        "service_type": exact_match(source.service_type, candidate.service_type),
        "hazmat": exact_match(source.hazardous_material, candidate.hazardous_material),
        "pieces": numeric_similarity(
            source.number_of_pieces, candidate.number_of_pieces, PIECES_TOLERANCE
        ),
    }


def aggregate_scores(
    criteria: Mapping[str, float], weights: Mapping[str, float]
) -> float:
    """
    Weighted average of `criteria` over the keys present in `weights`.

    Weight keys that name no known attribute are ignored.

    Examples:
        >>> aggregate_scores({"origin": 1.0, "weight": 0.5}, {"origin": 0.2})
        1.0
        >>> aggregate_scores({"origin": 1.0}, {})
        0.0
    """
    total_weight = 0.0
    weighted_sum = 0.0
    for name, weight in weights.items():
        if name not in criteria:
            continue
        weighted_sum += weight * criteria[name]
        total_weight += weight

    if total_weight <= 0:
        return 0.0
    return weighted_sum / total_weight


def calculate_similarity(
    source: QuoteRecord,
    candidate: QuoteRecord,
    weights: Optional[Mapping[str, float]] = None,
) -> SimilarityScore:
    """
    Score a candidate against the source quote.

    Args:
        source: Query quote
        candidate: Historical quote
        weights: Attribute weight table (default: DEFAULT_WEIGHTS)

    Returns:
        SimilarityScore with overall score and breakdown, both rounded to
        4 decimal places
    """
    criteria = score_attributes(source, candidate)
    overall = aggregate_scores(
        criteria, DEFAULT_WEIGHTS if weights is None else weights
    )

    return SimilarityScore(
        score=_bounded(round_score(overall)),
        criteria={name: _bounded(round_score(value)) for name, value in criteria.items()},
    )


def _bounded(value: float) -> float:
    return max(0.0, min(1.0, value))
