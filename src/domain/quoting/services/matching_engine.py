"""
QuoteMatchingEngine Protocol

Core business service protocol for matching a quote against historical quotes.

Responsibility:
    - Define the matching contract (Protocol-based interface)
    - Let Application Layer depend on the contract, not the implementation

Architecture Notes:
    - Domain Service contract
    - Protocol interface (structural typing for Dependency Injection)
    - Synchronous: matching is pure CPU-bound computation with no I/O
"""

from typing import Iterable, Mapping, Optional, Protocol

from ..entities.quote_record import QuoteRecord
from ..value_objects.quote_match import QuoteMatch


class QuoteMatchingEngineProtocol(Protocol):
    """
    Protocol defining the contract for historical quote matching.

    Contract:
        - Never returns a match for a candidate with the query's quote_id
        - Every returned score and breakdown value lies in [0, 1]
        - No returned match scores below min_score
        - At most max_matches results, sorted by score descending, ties in
          candidate order
        - Bad attribute data degrades scores, it does not raise

    Examples:
        >>> engine: QuoteMatchingEngineProtocol = QuoteMatchingEngine()
        >>> matches = engine.find_matches(query, historical_quotes, min_score=0.6)
        >>> for match in matches:
        ...     print(match.matched_quote_id, match.similarity_score)
    """

    def find_matches(
        self,
        query: QuoteRecord,
        candidates: Iterable[QuoteRecord],
        min_score: Optional[float] = None,
        max_matches: Optional[int] = None,
        weights: Optional[Mapping[str, float]] = None,
    ) -> list[QuoteMatch]:
        """
        Find historical quotes similar to `query` and suggest prices.

        Args:
            query: Newly parsed quote
            candidates: Historical quote pool
            min_score: Threshold override (default from config)
            max_matches: Result cap override (default from config)
            weights: Weight table override (default from config)

        Returns:
            Ranked list of QuoteMatch (possibly empty)

        Raises:
            TypeError: If candidates is not iterable
        """
        ...
