"""Pytest configuration shared by the rate limiter test suite.

This configuration provides:
1. Marker registration (unit, integration)
2. A controllable clock so refill timing is deterministic
3. Isolated fakeredis clients (one server per test)
4. Singleton and structlog resets between tests
"""

import fakeredis
import fakeredis.aioredis
import pytest
import pytest_asyncio
import structlog

from src.core.config import get_settings
from src.core.container import get_logger, get_redis_client
from src.rate_limiter.config import TokenBucketConfig
from src.rate_limiter.factory import get_rate_limiter


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests with a Redis server"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async tests."""
    for item in items:
        if "asyncio" in item.keywords:
            continue
        if hasattr(item, "function") and hasattr(item.function, "__code__"):
            if item.function.__code__.co_flags & 0x80:  # CO_COROUTINE
                item.add_marker(pytest.mark.asyncio)


class FakeClock:
    """Manually advanced clock.

    `now_ms` feeds the wall clock of the storages; `monotonic` feeds the idle
    cache. Both derive from the same counter so idle expiry and refill agree.
    """

    def __init__(self, start_ms: int = 1_700_000_000_000) -> None:
        self.current_ms = start_ms

    def now_ms(self) -> int:
        return self.current_ms

    def monotonic(self) -> float:
        return self.current_ms / 1000

    def advance(self, *, seconds: float = 0, milliseconds: int = 0) -> None:
        self.current_ms += int(seconds * 1000) + milliseconds


@pytest.fixture
def clock():
    """Deterministic clock starting at a fixed epoch millisecond."""
    return FakeClock()


@pytest.fixture
def burst_config():
    """Four-request burst, one token per second."""
    return TokenBucketConfig(max_tokens=4, refill_rate=1)


@pytest.fixture
def single_config():
    """One request, one token per second."""
    return TokenBucketConfig(max_tokens=1, refill_rate=1)


@pytest_asyncio.fixture
async def redis_client():
    """Async fakeredis client with Lua support, isolated per test.

    Each test gets its own FakeServer so keys never leak between tests.
    """
    client = fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer())
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture(autouse=True)
def reset_singletons():
    """Clear cached singletons and structlog configuration after each test."""
    yield
    get_rate_limiter.cache_clear()
    get_redis_client.cache_clear()
    get_logger.cache_clear()
    get_settings.cache_clear()
    structlog.reset_defaults()
