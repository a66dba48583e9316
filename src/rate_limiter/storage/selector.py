"""Storage facade selecting between the rate limiter backends.

`Storage` is a closed set of exactly two variants: in-process (MemoryStorage)
and shared Redis (RedisStorage). Both are built from the same
TokenBucketConfig and expose the same `check(identifier)` contract, so
callers never branch on the backend.

Adding a backend means adding a variant here (constructor + match arm);
nothing upstream changes.

Usage:
    ```python
    storage = Storage.new_memory(config)
    storage = Storage.new_redis(config, redis_client)

    result = await storage.check("client-42")
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

from src.core.result import Result
from src.domain.errors import RateLimitError
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.rate_limiter.config import RateLimitBackend, TokenBucketConfig
from src.rate_limiter.storage.memory_storage import MemoryStorage
from src.rate_limiter.storage.redis_storage import RedisStorage

if TYPE_CHECKING:
    from redis.asyncio import Redis

type StorageBackend = MemoryStorage | RedisStorage


class Storage:
    """Dispatcher over the two bucket storage backends.

    Args:
        backend: The concrete storage variant.
    """

    __slots__ = ("_backend",)

    def __init__(self, backend: StorageBackend) -> None:
        if not isinstance(backend, (MemoryStorage, RedisStorage)):
            raise TypeError(
                f"Unsupported storage backend: {type(backend).__name__}"
            )
        self._backend = backend

    @classmethod
    def new_memory(
        cls,
        config: TokenBucketConfig,
        *,
        logger: LoggerProtocol | None = None,
    ) -> Storage:
        """Build in-process storage.

        Args:
            config: Bucket configuration.
            logger: Optional structured logger.

        Returns:
            Storage: Facade over a MemoryStorage.
        """
        return cls(MemoryStorage(config, logger=logger))

    @classmethod
    def new_redis(
        cls,
        config: TokenBucketConfig,
        redis_client: Redis,
        *,
        logger: LoggerProtocol | None = None,
    ) -> Storage:
        """Build Redis-backed storage.

        Args:
            config: Bucket configuration.
            redis_client: Established redis.asyncio client.
            logger: Optional structured logger.

        Returns:
            Storage: Facade over a RedisStorage.
        """
        return cls(RedisStorage(config, redis_client, logger=logger))

    @property
    def backend(self) -> RateLimitBackend:
        """Which variant is active."""
        match self._backend:
            case MemoryStorage():
                return RateLimitBackend.MEMORY
            case RedisStorage():
                return RateLimitBackend.REDIS
            case _:
                assert_never(self._backend)

    @property
    def config(self) -> TokenBucketConfig:
        """Bucket configuration of the active variant."""
        return self._backend.config

    @property
    def inner(self) -> StorageBackend:
        """The concrete storage variant."""
        return self._backend

    async def check(self, identifier: str) -> Result[bool, RateLimitError]:
        """Dispatch the check to the active variant.

        Args:
            identifier: Caller-supplied key.

        Returns:
            Result[bool, RateLimitError]: The backend's result, unchanged.
        """
        match self._backend:
            case MemoryStorage() as memory:
                return await memory.check(identifier)
            case RedisStorage() as redis_storage:
                return await redis_storage.check(identifier)
            case _:
                assert_never(self._backend)
