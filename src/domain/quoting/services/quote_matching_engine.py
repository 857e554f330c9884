"""
QuoteMatchingEngine - Domain Service

Match Finder: the public entry point of the quote matching core. Given one
query quote and a pool of historical quotes it scores every candidate,
keeps those above the threshold, suggests a price from each, and returns a
ranked, truncated list.

Architecture Notes:
    - Implements QuoteMatchingEngineProtocol
    - Pure domain service (no infrastructure dependencies)
    - Stateless: configuration is an immutable MatchingConfig, per-call
      overrides build a new config instead of mutating shared state
    - Safe to call concurrently for independent queries

Business Rules:
    - Candidates with the query's quote_id are skipped (no self-matches)
    - Candidates scoring below min_score are dropped
    - Results sorted by score descending with a stable sort, so ties keep
      the candidate pool's iteration order
    - Candidates without any price still match, with suggested_price None
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from src.domain.quoting.entities.quote_record import QuoteRecord
from src.domain.quoting.matching_config import MatchingConfig
from src.domain.quoting.services.aggregator import calculate_similarity
from src.domain.quoting.services.price_suggester import suggest_price
from src.domain.quoting.value_objects.quote_match import QuoteMatch

logger = logging.getLogger(__name__)

CandidateLike = Union[QuoteRecord, Mapping[str, Any]]

# Default partition size for find_matches_partitioned()
DEFAULT_PARTITION_SIZE = 5000


@dataclass
class QuoteMatchingEngine:
    """
    Domain service finding similar historical quotes and suggesting prices.

    Responsibilities:
        - Score every candidate with the similarity scorer + aggregator
        - Filter by threshold, attach price suggestions
        - Sort (stable) and truncate

    Does NOT:
        - Fetch candidates (caller / QuoteRepositoryProtocol)
        - Persist matches (caller / QuoteMatchRepositoryProtocol)
        - Parse email text (upstream extraction pipeline)

    Attributes:
        config: Weights, threshold, result cap and algorithm version

    Usage Example:
        >>> engine = QuoteMatchingEngine()
        >>> matches = engine.find_matches(query, historical_quotes)
        >>> best = matches[0] if matches else None
        >>> if best and best.has_price_suggestion:
        ...     print(best.suggested_price, best.price_confidence)
    """

    config: MatchingConfig = field(default_factory=MatchingConfig.default)

    def find_matches(
        self,
        query: CandidateLike,
        candidates: Iterable[CandidateLike],
        min_score: Optional[float] = None,
        max_matches: Optional[int] = None,
        weights: Optional[Mapping[str, float]] = None,
    ) -> list[QuoteMatch]:
        """
        Find historical quotes similar to `query`.

        Algorithm:
            1. Resolve effective configuration (per-call overrides)
            2. For each candidate whose id differs from the query's:
                a. Aggregate attribute scores into an overall score
                b. If score >= min_score, suggest a price and emit a match
            3. Stable sort by score descending
            4. Truncate to max_matches

        Args:
            query: Newly parsed quote (QuoteRecord or row mapping)
            candidates: Historical pool (QuoteRecords or row mappings)
            min_score: Threshold override (0-1)
            max_matches: Result cap override
            weights: Weight table override (may be reduced or empty)

        Returns:
            Ranked list of QuoteMatch, possibly empty

        Raises:
            TypeError: If candidates is not iterable or holds unsupported items
            InvalidMatchingConfigError: If an override is out of range
        """
        config = self.config.with_overrides(
            min_score=min_score, max_matches=max_matches, weights=weights
        )
        source = _as_record(query)
        matches = self._score_pool(source, _iterate(candidates), config)
        ranked = _rank(matches, config.max_matches)

        logger.debug(
            f"Quote {source.quote_id}: {len(matches)} candidate(s) >= "
            f"{config.min_score}, returning {len(ranked)}"
            + (f", best score {ranked[0].similarity_score}" if ranked else "")
        )
        return ranked

    def find_matches_partitioned(
        self,
        query: CandidateLike,
        candidates: Sequence[CandidateLike],
        partition_size: int = DEFAULT_PARTITION_SIZE,
        max_workers: Optional[int] = None,
        min_score: Optional[float] = None,
        max_matches: Optional[int] = None,
        weights: Optional[Mapping[str, float]] = None,
    ) -> list[QuoteMatch]:
        """
        Same contract as find_matches(), for very large candidate pools.

        The pool is split into consecutive partitions scored on a thread
        pool; partial results are merged in partition order and re-ranked,
        so the output (including tie order) equals find_matches().

        Scoring is pure Python and holds the GIL, so on a standard
        interpreter the threads do not score faster than find_matches().
        Partitioning bounds the work handed to each task; throughput only
        improves on a free-threaded build.

        Args:
            partition_size: Candidates per partition (>= 1)
            max_workers: Thread pool size (default: executor default)
        """
        if partition_size < 1:
            raise ValueError(f"partition_size must be >= 1, got {partition_size}")

        config = self.config.with_overrides(
            min_score=min_score, max_matches=max_matches, weights=weights
        )
        source = _as_record(query)
        pool = list(_iterate(candidates))
        partitions = [
            pool[start : start + partition_size]
            for start in range(0, len(pool), partition_size)
        ]

        if len(partitions) <= 1:
            return _rank(self._score_pool(source, pool, config), config.max_matches)

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            partial_results = list(
                executor.map(
                    lambda partition: self._score_pool(source, partition, config),
                    partitions,
                )
            )

        merged = [match for partial in partial_results for match in partial]
        logger.debug(
            f"Quote {source.quote_id}: scored {len(pool)} candidates in "
            f"{len(partitions)} partitions, {len(merged)} above threshold"
        )
        return _rank(merged, config.max_matches)

    def score_candidate(
        self,
        query: CandidateLike,
        candidate: CandidateLike,
        config: Optional[MatchingConfig] = None,
    ) -> Optional[QuoteMatch]:
        """
        Score a single candidate.

        Returns:
            QuoteMatch if the candidate is not the query itself and reaches
            min_score, otherwise None
        """
        effective = config or self.config
        source = _as_record(query)
        historical = _as_record(candidate)
        if historical.quote_id == source.quote_id:
            return None

        similarity = calculate_similarity(source, historical, effective.weights)
        if not similarity.is_above(effective.min_score):
            return None

        suggestion = suggest_price(historical, similarity.score)
        return QuoteMatch.create(
            source=source,
            candidate=historical,
            similarity=similarity,
            suggestion=suggestion,
            algorithm_version=effective.algorithm_version,
        )

    def _score_pool(
        self,
        source: QuoteRecord,
        candidates: Iterable[CandidateLike],
        config: MatchingConfig,
    ) -> list[QuoteMatch]:
        matches: list[QuoteMatch] = []
        for candidate in candidates:
            match = self.score_candidate(source, candidate, config)
            if match is not None:
                matches.append(match)
        return matches


def find_matches(
    query: CandidateLike,
    candidates: Iterable[CandidateLike],
    options: Optional[Mapping[str, Any]] = None,
) -> list[QuoteMatch]:
    """
    Functional entry point using the default configuration.

    Args:
        query: Newly parsed quote
        candidates: Historical pool
        options: Optional mapping with min_score/minScore,
            max_matches/maxMatches and weights

    Examples:
        >>> matches = find_matches(query, pool, {"minScore": 0.6, "maxMatches": 5})
    """
    options = options or {}
    return QuoteMatchingEngine().find_matches(
        query,
        candidates,
        min_score=_option(options, "min_score", "minScore"),
        max_matches=_option(options, "max_matches", "maxMatches"),
        weights=options.get("weights"),
    )


def _option(options: Mapping[str, Any], snake_name: str, camel_name: str) -> Any:
    if snake_name in options:
        return options[snake_name]
    return options.get(camel_name)


def _rank(matches: list[QuoteMatch], max_matches: int) -> list[QuoteMatch]:
    # sorted() is stable: equal scores keep candidate order
    ranked = sorted(matches, key=lambda match: match.similarity_score, reverse=True)
    return ranked[:max_matches]


def _iterate(candidates: Iterable[CandidateLike]) -> Iterable[CandidateLike]:
    if candidates is None or isinstance(candidates, (str, bytes, Mapping)):
        raise TypeError(
            f"candidates must be an iterable of quote records, "
            f"got {type(candidates).__name__}"
        )
    try:
        return iter(candidates)
    except TypeError as exc:
        raise TypeError(
            f"candidates must be an iterable of quote records, "
            f"got {type(candidates).__name__}"
        ) from exc


def _as_record(item: CandidateLike) -> QuoteRecord:
    if isinstance(item, QuoteRecord):
        return item
    if isinstance(item, Mapping):
        return QuoteRecord.from_row(item)
    raise TypeError(f"Expected QuoteRecord or mapping, got {type(item).__name__}")
