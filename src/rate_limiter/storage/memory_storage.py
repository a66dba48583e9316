"""In-process storage backend for token bucket rate limiting.

Bucket state lives in an IdleExpiringCache keyed by identifier. Each bucket
carries its own lock, so checks for different identifiers never contend;
checks for the same identifier are serialized.

Characteristics:
    - Per-process only: several workers each enforce their own limits
    - No I/O, never fails: check() always returns Success
    - Buckets idle for ceil(max_tokens / refill_rate) + 1 seconds are evicted

Usage:
    ```python
    from src.rate_limiter.config import TokenBucketConfig
    from src.rate_limiter.storage.memory_storage import MemoryStorage

    storage = MemoryStorage(TokenBucketConfig(max_tokens=4, refill_rate=1))
    result = await storage.check("client-42")  # Success(value=True)
    ```
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from src.core.constants import MILLISECONDS_PER_SECOND
from src.core.result import Result, Success
from src.domain.errors import RateLimitError
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.rate_limiter.config import TokenBucketConfig
from src.rate_limiter.storage.idle_cache import IdleExpiringCache


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * MILLISECONDS_PER_SECOND)


@dataclass(slots=True)
class TokenBucket:
    """Mutable state of one identifier's bucket.

    Attributes:
        current_tokens: Available tokens, fractional so sub-second refills
            are never truncated away.
        last_refill_time: Milliseconds since epoch of the last refill.
        lock: Guards both fields.
    """

    current_tokens: float
    last_refill_time: int
    lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    @classmethod
    def full(cls, max_tokens: int, current_time: int) -> TokenBucket:
        """Create a bucket at full capacity observed at current_time."""
        return cls(current_tokens=float(max_tokens), last_refill_time=current_time)

    def refill(self, config: TokenBucketConfig, current_time: int) -> float:
        """Add tokens for the time elapsed since the last refill.

        The refill time only moves forward, and only when tokens are added.
        A clock step backwards leaves the bucket untouched.

        Returns:
            float: Tokens granted before capping (0.0 when no time elapsed).
        """
        elapsed = current_time - self.last_refill_time
        if elapsed <= 0:
            return 0.0

        new_tokens = (elapsed / MILLISECONDS_PER_SECOND) * config.refill_rate
        self.current_tokens = min(
            float(config.max_tokens), self.current_tokens + new_tokens
        )
        self.last_refill_time = current_time
        return new_tokens

    def try_consume(self) -> bool:
        """Debit one token if available."""
        if self.current_tokens >= 1.0:
            self.current_tokens -= 1.0
            return True
        return False


class MemoryStorage:
    """In-process token bucket storage.

    Thread Safety:
        - Key resolution goes through the cache's map lock (held briefly)
        - Refill and consume run under the bucket's own lock
        - No await inside the critical section, so the threading lock never
          blocks the event loop for longer than the arithmetic

    Args:
        config: Bucket configuration shared by all identifiers.
        logger: Structured logger (defaults to a structlog logger).
        clock: Wall clock returning milliseconds since epoch.
        monotonic: Clock in seconds for idle tracking.
    """

    def __init__(
        self,
        config: TokenBucketConfig,
        *,
        logger: LoggerProtocol | None = None,
        clock: Callable[[], int] = now_ms,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self._clock = clock
        self._logger = (logger or structlog.get_logger()).bind(backend="memory")
        self._buckets: IdleExpiringCache[TokenBucket] = IdleExpiringCache(
            time_to_idle=float(config.idle_ttl_seconds),
            monotonic=monotonic,
        )

    @property
    def buckets(self) -> IdleExpiringCache[TokenBucket]:
        """The underlying idle-expiring bucket map."""
        return self._buckets

    async def check(self, identifier: str) -> Result[bool, RateLimitError]:
        """Refill the identifier's bucket and try to consume one token.

        Args:
            identifier: Caller-supplied key.

        Returns:
            Success(True) if a token was consumed, Success(False) otherwise.
        """
        current_time = self._clock()

        bucket, created = self._buckets.get_or_insert(
            identifier,
            lambda: TokenBucket.full(self.config.max_tokens, current_time),
        )
        if created:
            self._logger.debug("Created new bucket", identifier=identifier)

        with bucket.lock:
            added = bucket.refill(self.config, current_time)
            if added > 0:
                self._logger.debug(
                    "Refilled tokens",
                    identifier=identifier,
                    added=added,
                    tokens=bucket.current_tokens,
                )

            if bucket.try_consume():
                self._logger.debug(
                    "Consumed one token",
                    identifier=identifier,
                    tokens=bucket.current_tokens,
                )
                return Success(value=True)

            self._logger.debug(
                "No tokens available",
                identifier=identifier,
                tokens=bucket.current_tokens,
            )
            return Success(value=False)

    def evict_expired(self) -> int:
        """Drop buckets idle longer than the configured window.

        Returns:
            int: Number of buckets evicted.
        """
        evicted = self._buckets.evict_expired()
        if evicted:
            self._logger.debug("Evicted idle buckets", count=evicted)
        return evicted
