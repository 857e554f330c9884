"""
QuoteRepository Interface

Repository pattern interface for the historical quote store the matching
engine draws its candidate pool from.

Architecture Notes:
    - Protocol-based interface (structural typing)
    - Async methods (storage is I/O bound)
    - Implementation in Infrastructure layer (Redis)
"""

from typing import Iterable, Optional, Protocol

from ..entities.quote_record import QuoteRecord


class QuoteRepositoryProtocol(Protocol):
    """
    Protocol defining the contract for quote record persistence.

    Usage:
        >>> class QuoteMatchingUseCase:
        ...     def __init__(self, quote_repository: QuoteRepositoryProtocol, ...):
        ...         self.quote_repository = quote_repository
    """

    async def save(self, quote: QuoteRecord) -> None:
        """Store (or replace) one quote record."""
        ...

    async def save_many(self, quotes: Iterable[QuoteRecord]) -> int:
        """Store (or replace) several quote records, returning how many were written."""
        ...

    async def get_quote_for_matching(self, quote_id: int) -> Optional[QuoteRecord]:
        """Return the quote with `quote_id`, or None if it does not exist."""
        ...

    async def get_historical_quotes_for_matching(
        self,
        exclude_ids: Iterable[int],
        limit: int = 500,
        only_with_price: bool = True,
    ) -> list[QuoteRecord]:
        """
        Return the candidate pool for a matching run.

        Args:
            exclude_ids: Quotes of the current batch (never candidates)
            limit: Maximum pool size, most recent quotes first
            only_with_price: Restrict to quotes with a final or initial price
        """
        ...
