"""
Persistence Infrastructure Module

Redis connection management and repository implementations.

Exports:
    From redis:
        - get_redis_client, health_check, close_connections

    From repositories:
        - RedisQuoteRepository
        - RedisQuoteMatchRepository
"""

from .redis import close_connections, get_redis_client, health_check
from .repositories import RedisQuoteMatchRepository, RedisQuoteRepository

__all__ = [
    "get_redis_client",
    "health_check",
    "close_connections",
    "RedisQuoteRepository",
    "RedisQuoteMatchRepository",
]
