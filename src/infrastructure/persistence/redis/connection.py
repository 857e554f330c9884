"""
Redis Connection Pool Management.

Shared connection pool for the quote and match stores.

Responsibility:
    - Build RedisSettings from the environment
    - Create one ConnectionPool per process (thread-safe singleton)
    - Verify connectivity with PING, retrying with exponential backoff
    - Health check and shutdown helpers for the API lifespan

Business Rules:
    - REDIS_HOST (default "localhost"), REDIS_PORT (6379), REDIS_DB (0)
    - REDIS_MAX_CONNECTIONS (10), REDIS_TIMEOUT seconds (5)
    - REDIS_RETRY_ATTEMPTS (3), backoff 1s, 2s, 4s ...
    - decode_responses=True (repositories work with str, not bytes)

Error Handling:
    - ConnectionError / TimeoutError on PING: logged, retried
    - All retries exhausted: RedisError raised
    - health_check() never raises, returns False instead

Examples:
    >>> client = get_redis_client()
    >>> client.zrevrange("quote:index", 0, 9)
    1532
    >>> health_check()
    True
    >>> close_connections()
"""

import logging
import os
import threading
import time
from dataclasses import dataclass
from typing import Optional

from redis import ConnectionPool, Redis
from redis.exceptions import ConnectionError, RedisError, TimeoutError

logger = logging.getLogger(__name__)

_redis_pool: Optional[ConnectionPool] = None
_pool_lock = threading.Lock()

BACKOFF_BASE_SECONDS = 1


@dataclass(frozen=True)
class RedisSettings:
    """
    Redis connection settings.

    Attributes:
        host: Redis hostname
        port: Redis port
        db: Database number
        max_connections: Pool size
        timeout: Socket and connect timeout in seconds
        retry_attempts: PING attempts before giving up
    """

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    max_connections: int = 10
    timeout: int = 5
    retry_attempts: int = 3

    @classmethod
    def from_env(cls) -> "RedisSettings":
        return cls(
            host=os.getenv("REDIS_HOST", "localhost"),
            port=int(os.getenv("REDIS_PORT", "6379")),
            db=int(os.getenv("REDIS_DB", "0")),
            max_connections=int(os.getenv("REDIS_MAX_CONNECTIONS", "10")),
            timeout=int(os.getenv("REDIS_TIMEOUT", "5")),
            retry_attempts=int(os.getenv("REDIS_RETRY_ATTEMPTS", "3")),
        )


def _get_pool(settings: RedisSettings) -> ConnectionPool:
    global _redis_pool

    if _redis_pool is None:
        with _pool_lock:
            # Double-checked: another thread may have built it meanwhile
            if _redis_pool is None:
                logger.info(
                    f"Creating Redis connection pool: host={settings.host}, "
                    f"port={settings.port}, db={settings.db}, "
                    f"max_connections={settings.max_connections}, "
                    f"timeout={settings.timeout}s"
                )
                _redis_pool = ConnectionPool(
                    host=settings.host,
                    port=settings.port,
                    db=settings.db,
                    max_connections=settings.max_connections,
                    socket_timeout=settings.timeout,
                    socket_connect_timeout=settings.timeout,
                    socket_keepalive=True,
                    decode_responses=True,
                )
    return _redis_pool


def get_redis_client(settings: Optional[RedisSettings] = None) -> Redis:
    """
    Get a Redis client backed by the shared connection pool.

    The pool is created on first call; later calls reuse it, so `settings`
    only matters until the pool exists (or after close_connections()).

    Args:
        settings: Connection settings (default: RedisSettings.from_env())

    Returns:
        Connected Redis client

    Raises:
        RedisError: If PING fails on every attempt
    """
    settings = settings or RedisSettings.from_env()
    client = Redis(connection_pool=_get_pool(settings))

    last_error: Optional[Exception] = None
    for attempt in range(settings.retry_attempts):
        try:
            client.ping()
            logger.debug(f"Redis connection established (attempt {attempt + 1})")
            return client
        except (ConnectionError, TimeoutError) as e:
            last_error = e
            if attempt < settings.retry_attempts - 1:
                delay = BACKOFF_BASE_SECONDS * (2**attempt)
                logger.warning(
                    f"Redis connection failed (attempt {attempt + 1}/"
                    f"{settings.retry_attempts}): {e}. Retrying in {delay}s..."
                )
                time.sleep(delay)
            else:
                logger.error(
                    f"Redis connection failed after {settings.retry_attempts} attempts: {e}"
                )

    raise RedisError(
        f"Failed to connect to Redis after {settings.retry_attempts} attempts. "
        f"Last error: {last_error}"
    )


def health_check() -> bool:
    """Return True if Redis answers PING, False otherwise (never raises)."""
    try:
        if get_redis_client().ping():
            logger.debug("Redis health check: OK")
            return True
        logger.warning("Redis health check: PING returned False")
        return False
    except RedisError as e:
        logger.warning(f"Redis health check failed: {e}")
        return False


def close_connections() -> None:
    """Disconnect and drop the shared pool. Safe to call more than once."""
    global _redis_pool

    with _pool_lock:
        if _redis_pool is None:
            logger.debug("Redis connection pool already closed or not initialized")
            return

        logger.info("Closing Redis connection pool")
        try:
            _redis_pool.disconnect()
        finally:
            _redis_pool = None
            logger.info("Redis connection pool closed")
