"""Rate Limiter configuration models.

This module provides the immutable bucket configuration shared by every key
of a rate limiter, and the enum selecting the storage backend.

Key Design Decisions:
    1. Immutable configuration (frozen dataclass)
       - Shared by reference across all buckets and concurrent checks
       - Read without synchronization

    2. Integer counts
       - max_tokens is the bucket capacity
       - refill_rate is tokens granted per elapsed second (not per minute)

    3. One expiry formula for both backends
       - idle_ttl_seconds = ceil(max_tokens / refill_rate) + 1
       - After that long without checks a bucket would be full again,
         so dropping its state is indistinguishable from keeping it

Usage:
    ```python
    from src.rate_limiter.config import TokenBucketConfig

    config = TokenBucketConfig(max_tokens=20, refill_rate=5)
    config.idle_ttl_seconds  # 5
    ```
"""

import math
from dataclasses import dataclass
from enum import Enum


class RateLimitBackend(str, Enum):
    """Storage backend for bucket state.

    Attributes:
        MEMORY: In-process cache with idle expiry (single process only).
        REDIS: Shared Redis store with atomic Lua script execution.
    """

    MEMORY = "memory"
    REDIS = "redis"


@dataclass(frozen=True, slots=True, kw_only=True)
class TokenBucketConfig:
    """Token bucket configuration (value object).

    Attributes:
        max_tokens: Maximum tokens in a bucket (burst capacity).
        refill_rate: Tokens added per elapsed second.

    Example:
        # 4 requests burst, then 1 request per second
        config = TokenBucketConfig(max_tokens=4, refill_rate=1)

    Raises:
        ValueError: If max_tokens or refill_rate is not a positive integer.
    """

    max_tokens: int
    refill_rate: int

    def __post_init__(self) -> None:
        """Validate configuration after initialization.

        Raises:
            ValueError: If any count is invalid.
        """
        for name in ("max_tokens", "refill_rate"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

    @property
    def time_to_fill_seconds(self) -> int:
        """Whole seconds for an empty bucket to refill completely.

        Returns:
            int: ceil(max_tokens / refill_rate).
        """
        return math.ceil(self.max_tokens / self.refill_rate)

    @property
    def idle_ttl_seconds(self) -> int:
        """Seconds of inactivity after which a bucket's state may be dropped.

        Used as the in-process idle window and as the Redis key TTL.

        Returns:
            int: ceil(max_tokens / refill_rate) + 1.
        """
        return self.time_to_fill_seconds + 1
