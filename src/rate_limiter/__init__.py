"""Token bucket rate limiter package.

Admission control keyed by an arbitrary identifier. Each identifier owns a
bucket of `max_tokens` tokens refilled at `refill_rate` tokens per second;
every allowed request consumes one token.

Architecture:
    - config.py: TokenBucketConfig (immutable) and RateLimitBackend enum
    - storage/: In-process and Redis backends behind the Storage facade
    - service.py: RateLimiter, the public entry point
    - factory.py: Builds a RateLimiter from Settings

Quick Start:
    ```python
    from src.core.result import Failure, Success
    from src.rate_limiter import RateLimiter, TokenBucketConfig

    limiter = RateLimiter.new_memory(TokenBucketConfig(max_tokens=4, refill_rate=1))

    match await limiter.check("client-42"):
        case Success(value=allowed):
            ...
        case Failure(error=err):
            ...
    ```
"""

# Configuration
from src.rate_limiter.config import RateLimitBackend, TokenBucketConfig

# Storage
from src.rate_limiter.storage import MemoryStorage, RedisStorage, Storage

# Service
from src.rate_limiter.service import RateLimiter

__all__ = [
    # Configuration
    "RateLimitBackend",
    "TokenBucketConfig",
    # Storage
    "MemoryStorage",
    "RedisStorage",
    "Storage",
    # Service
    "RateLimiter",
]
