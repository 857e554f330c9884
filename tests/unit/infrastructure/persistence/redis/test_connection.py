"""
Tests for Redis Connection Pool Management.

Covers:
- RedisSettings from environment
- Singleton connection pool
- Retry logic with exponential backoff
- Health check with PING
- Connection cleanup
"""

from unittest.mock import MagicMock, call, patch

import pytest
from redis import ConnectionPool, Redis
from redis.exceptions import ConnectionError, RedisError, TimeoutError

import src.infrastructure.persistence.redis.connection as conn_module
from src.infrastructure.persistence.redis.connection import (
    RedisSettings,
    close_connections,
    get_redis_client,
    health_check,
)


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture(autouse=True)
def reset_singleton():
    """Reset singleton pool before and after each test."""
    conn_module._redis_pool = None
    yield
    conn_module._redis_pool = None


@pytest.fixture
def settings():
    return RedisSettings(host="redis.test", port=6380, db=2, retry_attempts=3)


@pytest.fixture
def mock_redis_client():
    client_mock = MagicMock(spec=Redis)
    client_mock.ping.return_value = True
    return client_mock


# ============================================================================
# TESTS - RedisSettings
# ============================================================================


def test_settings_defaults(monkeypatch):
    """Test RedisSettings defaults."""
    for name in ("REDIS_HOST", "REDIS_PORT", "REDIS_DB", "REDIS_MAX_CONNECTIONS"):
        monkeypatch.delenv(name, raising=False)

    settings = RedisSettings.from_env()

    assert settings.host == "localhost"
    assert settings.port == 6379
    assert settings.db == 0
    assert settings.max_connections == 10


def test_settings_from_environment(monkeypatch):
    """Test RedisSettings read from environment variables."""
    monkeypatch.setenv("REDIS_HOST", "cache")
    monkeypatch.setenv("REDIS_PORT", "6390")
    monkeypatch.setenv("REDIS_DB", "4")
    monkeypatch.setenv("REDIS_TIMEOUT", "2")
    monkeypatch.setenv("REDIS_RETRY_ATTEMPTS", "1")

    settings = RedisSettings.from_env()

    assert settings == RedisSettings(host="cache", port=6390, db=4, timeout=2, retry_attempts=1)


# ============================================================================
# TESTS - get_redis_client
# ============================================================================


def test_pool_created_once(settings, mock_redis_client):
    """Test that the connection pool is shared between clients."""
    with patch.object(conn_module, "ConnectionPool") as pool_class, patch.object(
        conn_module, "Redis", return_value=mock_redis_client
    ):
        get_redis_client(settings)
        get_redis_client(settings)

    pool_class.assert_called_once()
    kwargs = pool_class.call_args.kwargs
    assert kwargs["host"] == "redis.test"
    assert kwargs["port"] == 6380
    assert kwargs["db"] == 2
    assert kwargs["decode_responses"] is True


def test_retries_with_exponential_backoff(settings, mock_redis_client):
    """Test connection retries with growing delays."""
    mock_redis_client.ping.side_effect = [
        ConnectionError("refused"),
        TimeoutError("slow"),
        True,
    ]

    with patch.object(conn_module, "ConnectionPool"), patch.object(
        conn_module, "Redis", return_value=mock_redis_client
    ), patch.object(conn_module.time, "sleep") as sleep:
        client = get_redis_client(settings)

    assert client is mock_redis_client
    assert sleep.call_args_list == [call(1), call(2)]


def test_raises_after_all_attempts(settings, mock_redis_client):
    """Test that the last connection error is raised after all retries."""
    mock_redis_client.ping.side_effect = ConnectionError("refused")

    with patch.object(conn_module, "ConnectionPool"), patch.object(
        conn_module, "Redis", return_value=mock_redis_client
    ), patch.object(conn_module.time, "sleep") as sleep:
        with pytest.raises(RedisError, match="after 3 attempts"):
            get_redis_client(settings)

    assert mock_redis_client.ping.call_count == 3
    assert sleep.call_count == 2


# ============================================================================
# TESTS - health_check / close_connections
# ============================================================================


def test_health_check_ok(mock_redis_client):
    """Test a healthy Redis ping."""
    with patch.object(conn_module, "get_redis_client", return_value=mock_redis_client):
        assert health_check() is True


def test_health_check_false_on_error():
    """Test that connection errors report unhealthy."""
    with patch.object(conn_module, "get_redis_client", side_effect=RedisError("down")):
        assert health_check() is False


def test_health_check_false_when_ping_fails(mock_redis_client):
    """Test that a falsy ping reports unhealthy."""
    mock_redis_client.ping.return_value = False

    with patch.object(conn_module, "get_redis_client", return_value=mock_redis_client):
        assert health_check() is False


def test_close_connections_disconnects_pool():
    """Test that closing disconnects the pool."""
    pool = MagicMock(spec=ConnectionPool)
    conn_module._redis_pool = pool

    close_connections()

    pool.disconnect.assert_called_once()
    assert conn_module._redis_pool is None


def test_close_connections_resets_pool_even_if_disconnect_fails():
    """Test that the pool is reset when disconnect fails."""
    pool = MagicMock(spec=ConnectionPool)
    pool.disconnect.side_effect = ConnectionError("gone")
    conn_module._redis_pool = pool

    with pytest.raises(ConnectionError):
        close_connections()

    assert conn_module._redis_pool is None


def test_close_connections_without_pool_is_noop():
    """Test closing before any connection was made."""
    close_connections()

    assert conn_module._redis_pool is None
