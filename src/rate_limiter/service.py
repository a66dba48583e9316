"""Rate limiter entry point.

`RateLimiter` is the public object callers hold. It wraps one Storage and
forwards `check(identifier)` to it without additional logic.

Usage:
    ```python
    from src.core.result import Failure, Success
    from src.rate_limiter import RateLimiter, TokenBucketConfig

    config = TokenBucketConfig(max_tokens=20, refill_rate=5)
    limiter = RateLimiter.new_redis(config, redis_client)

    match await limiter.check(api_key):
        case Success(value=True):
            ...  # admit
        case Success(value=False):
            raise HTTPException(status_code=429)
        case Failure(error=err):
            ...  # store down: caller picks fail-open or fail-closed
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.core.result import Result
from src.domain.errors import RateLimitError
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.rate_limiter.config import RateLimitBackend, TokenBucketConfig
from src.rate_limiter.storage.selector import Storage

if TYPE_CHECKING:
    from redis.asyncio import Redis


class RateLimiter:
    """Token bucket rate limiter keyed by identifier.

    Implements RateLimitProtocol structurally.

    Args:
        storage: Storage facade holding bucket state.
    """

    __slots__ = ("storage",)

    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    @classmethod
    def new_memory(
        cls,
        config: TokenBucketConfig,
        *,
        logger: LoggerProtocol | None = None,
    ) -> RateLimiter:
        """Build a rate limiter with in-process buckets."""
        return cls(Storage.new_memory(config, logger=logger))

    @classmethod
    def new_redis(
        cls,
        config: TokenBucketConfig,
        redis_client: Redis,
        *,
        logger: LoggerProtocol | None = None,
    ) -> RateLimiter:
        """Build a rate limiter with buckets shared through Redis."""
        return cls(Storage.new_redis(config, redis_client, logger=logger))

    @property
    def backend(self) -> RateLimitBackend:
        """Active storage backend."""
        return self.storage.backend

    async def check(self, identifier: str) -> Result[bool, RateLimitError]:
        """Check if a request from identifier is allowed.

        Refills the identifier's bucket for the elapsed time and consumes one
        token if available.

        Args:
            identifier: Caller-supplied key (client ID, API key, IP, ...).

        Returns:
            Result[bool, RateLimitError]:
                - Success(True) if the request is allowed
                - Success(False) if the request is rate limited
                - Failure(RateLimitError) if the shared store failed
        """
        return await self.storage.check(identifier)
