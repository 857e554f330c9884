"""
Redis Quote Repository

Concrete implementation of QuoteRepositoryProtocol from Domain Layer.
Stores historical quote records in Redis.

Responsibility:
    - Implement Domain repository interface
    - Serialize/deserialize QuoteRecord to/from JSON
    - Maintain the recency index and the "priced" set used to select the
      historical candidate pool

Architecture Notes:
    - Infrastructure Layer (implements Domain interface)
    - Dependency Inversion: Domain defines interface, Infrastructure implements
    - Shared connection pool (get_redis_client)
    - redis-py errors never leave this module, they become PersistenceError
"""

import logging
from typing import Iterable, Optional

from pydantic import ValidationError
from redis import Redis
from redis.exceptions import RedisError

from src.domain.quoting.entities.quote_record import QuoteRecord
from src.domain.shared.exceptions import PersistenceError
from src.infrastructure.persistence.redis.connection import get_redis_client

logger = logging.getLogger(__name__)

RECORD_KEY_PREFIX = "quote:record:"
INDEX_KEY = "quote:index"
PRICED_KEY = "quote:priced"

# Ids fetched from the index per round trip while building a candidate pool
INDEX_PAGE_SIZE = 500


class RedisQuoteRepository:
    """
    Redis-based implementation of QuoteRepositoryProtocol.

    Storage Strategy:
        - "quote:record:{id}": JSON serialized QuoteRecord
        - "quote:index": sorted set of all ids (score = id), so the highest
          ids are the most recent quotes
        - "quote:priced": set of ids with a final or initial price

    Examples:
        >>> repo = RedisQuoteRepository()
        >>> await repo.save(QuoteRecord(quote_id=10726, origin_city="Savannah"))
        >>> record = await repo.get_quote_for_matching(10726)
        >>> record.origin_city
        'Savannah'
    """

    def __init__(self, redis_client: Optional[Redis] = None) -> None:
        """
        Args:
            redis_client: Redis client (default: pooled client from
                get_redis_client(), created on first use)
        """
        self._redis = redis_client

    @property
    def redis(self) -> Redis:
        if self._redis is None:
            self._redis = get_redis_client()
        return self._redis

    @staticmethod
    def _get_key(quote_id: int) -> str:
        """
        Examples:
            >>> RedisQuoteRepository._get_key(10726)
            'quote:record:10726'
        """
        return f"{RECORD_KEY_PREFIX}{quote_id}"

    async def save(self, quote: QuoteRecord) -> None:
        """Store (or replace) one quote record."""
        await self.save_many([quote])

    async def save_many(self, quotes: Iterable[QuoteRecord]) -> int:
        """
        Store (or replace) several quote records in one pipeline.

        Returns:
            Number of records written

        Raises:
            PersistenceError: If Redis fails
        """
        quotes = list(quotes)
        if not quotes:
            return 0

        try:
            pipe = self.redis.pipeline()
            for quote in quotes:
                pipe.set(self._get_key(quote.quote_id), quote.model_dump_json())
                pipe.zadd(INDEX_KEY, {str(quote.quote_id): quote.quote_id})
                if quote.has_pricing:
                    pipe.sadd(PRICED_KEY, str(quote.quote_id))
                else:
                    pipe.srem(PRICED_KEY, str(quote.quote_id))
            pipe.execute()
        except RedisError as e:
            logger.error(f"Failed to save {len(quotes)} quote(s): {e}")
            raise PersistenceError(
                "Failed to save quotes", operation="save_many", original_error=e
            ) from e

        logger.debug(f"Saved {len(quotes)} quote(s)")
        return len(quotes)

    async def get_quote_for_matching(self, quote_id: int) -> Optional[QuoteRecord]:
        """
        Return the quote with `quote_id`, or None if it does not exist.

        Raises:
            PersistenceError: If Redis fails
        """
        try:
            raw = self.redis.get(self._get_key(quote_id))
        except RedisError as e:
            logger.error(f"Failed to load quote {quote_id}: {e}")
            raise PersistenceError(
                f"Failed to load quote {quote_id}",
                operation="get_quote_for_matching",
                original_error=e,
            ) from e

        if raw is None:
            return None
        return QuoteRecord.model_validate_json(raw)

    async def get_historical_quotes_for_matching(
        self,
        exclude_ids: Iterable[int],
        limit: int = 500,
        only_with_price: bool = True,
    ) -> list[QuoteRecord]:
        """
        Build the candidate pool, most recent quotes first.

        Walks the index from the highest id down, skipping excluded and (when
        only_with_price) unpriced ids until `limit` ids are collected, then
        loads the records with MGET. Index entries whose record is missing or
        unreadable are logged and skipped.

        Raises:
            PersistenceError: If Redis fails
        """
        excluded = {int(quote_id) for quote_id in exclude_ids}
        if limit <= 0:
            return []

        try:
            selected = self._select_ids(excluded, limit, only_with_price)
            raw_records = self.redis.mget([self._get_key(quote_id) for quote_id in selected])
        except RedisError as e:
            logger.error(f"Failed to load historical quotes: {e}")
            raise PersistenceError(
                "Failed to load historical quotes",
                operation="get_historical_quotes_for_matching",
                original_error=e,
            ) from e

        records: list[QuoteRecord] = []
        for quote_id, raw in zip(selected, raw_records):
            if raw is None:
                logger.warning(f"Quote {quote_id} is indexed but has no record")
                continue
            try:
                records.append(QuoteRecord.model_validate_json(raw))
            except ValidationError as e:
                logger.warning(f"Skipping unreadable quote {quote_id}: {e}")

        return records

    def _select_ids(
        self, excluded: set[int], limit: int, only_with_price: bool
    ) -> list[int]:
        selected: list[int] = []
        start = 0
        while len(selected) < limit:
            page = self.redis.zrevrange(INDEX_KEY, start, start + INDEX_PAGE_SIZE - 1)
            if not page:
                break
            start += len(page)

            candidates = [int(member) for member in page if int(member) not in excluded]
            if only_with_price and candidates:
                flags = self.redis.smismember(PRICED_KEY, [str(c) for c in candidates])
                candidates = [c for c, priced in zip(candidates, flags) if priced]

            selected.extend(candidates[: limit - len(selected)])
        return selected
