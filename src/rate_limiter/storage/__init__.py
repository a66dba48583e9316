"""Bucket storage backends for the rate limiter.

Exports:
    Storage: Closed two-variant facade (memory, redis).
    MemoryStorage: In-process buckets with idle expiry and per-key locks.
    RedisStorage: Shared buckets mutated by an atomic Lua script.
    IdleExpiringCache: Time-to-idle map backing MemoryStorage.
"""

from src.rate_limiter.storage.idle_cache import IdleExpiringCache
from src.rate_limiter.storage.memory_storage import MemoryStorage, TokenBucket
from src.rate_limiter.storage.redis_storage import RedisStorage, TOKEN_BUCKET_LUA
from src.rate_limiter.storage.selector import Storage

__all__ = [
    "IdleExpiringCache",
    "MemoryStorage",
    "RedisStorage",
    "Storage",
    "TOKEN_BUCKET_LUA",
    "TokenBucket",
]
