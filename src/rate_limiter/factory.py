"""Factory functions for rate limiter dependency injection.

Builds a RateLimiter from Settings, choosing the backend from
RATE_LIMIT_BACKEND. The Redis client and logger may be injected; when they
are not, the container singletons are used.

Usage:
    ```python
    from src.rate_limiter.factory import get_rate_limiter

    rate_limiter = get_rate_limiter()
    result = await rate_limiter.check(client_ip)
    ```
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, assert_never

from src.core.config import Settings, get_settings
from src.rate_limiter.config import RateLimitBackend
from src.rate_limiter.service import RateLimiter

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from src.domain.protocols.logger_protocol import LoggerProtocol


def build_rate_limiter(
    settings: Settings,
    *,
    redis_client: Redis | None = None,
    logger: LoggerProtocol | None = None,
) -> RateLimiter:
    """Create a rate limiter for the configured backend.

    Args:
        settings: Settings providing capacity, refill rate and backend.
        redis_client: Redis client for the redis backend. Defaults to the
            container singleton.
        logger: Structured logger. Defaults to the container singleton.

    Returns:
        RateLimiter: Ready-to-use rate limiter.
    """
    from src.core.container import get_logger, get_redis_client

    config = settings.token_bucket_config()
    logger = logger or get_logger()

    match settings.rate_limit_backend:
        case RateLimitBackend.MEMORY:
            limiter = RateLimiter.new_memory(config, logger=logger)
        case RateLimitBackend.REDIS:
            if redis_client is None:
                redis_client = get_redis_client()
            limiter = RateLimiter.new_redis(config, redis_client, logger=logger)
        case _:
            assert_never(settings.rate_limit_backend)

    logger.info(
        "Rate limiter configured",
        backend=settings.rate_limit_backend.value,
        max_tokens=config.max_tokens,
        refill_rate=config.refill_rate,
        idle_ttl_seconds=config.idle_ttl_seconds,
    )
    return limiter


@lru_cache()
def get_rate_limiter() -> RateLimiter:
    """Get rate limiter singleton (app-scoped).

    In-process buckets are only meaningful if every caller shares one
    instance, hence the cache.

    Returns:
        RateLimiter: Process-wide rate limiter built from settings.
    """
    return build_rate_limiter(get_settings())
