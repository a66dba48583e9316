"""Redis storage backend for token bucket rate limiting with Lua script atomicity.

The whole read-refill-debit-write sequence runs inside Redis as one Lua
script, so concurrent checks for the same identifier (from any number of
processes) can never interleave. The client holds no bucket state and no lock.

Key Features:
    - Atomic operations via a Lua script (runs inside Redis)
    - Script registered once per storage, executed with EVALSHA
      (redis-py reloads it transparently after SCRIPT FLUSH / restart)
    - Keys namespaced as "rate_limit:{identifier}"
    - Key TTL refreshed to ceil(max_tokens / refill_rate) + 1 on every check
    - Store failures returned as Failure(RateLimitError), never swallowed

Usage:
    ```python
    from redis.asyncio import Redis
    from src.rate_limiter.storage.redis_storage import RedisStorage

    redis_client = Redis.from_url("redis://localhost:6379/0")
    storage = RedisStorage(config, redis_client)

    result = await storage.check("client-42")
    ```
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import structlog
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError, ResponseError
from redis.exceptions import TimeoutError as RedisTimeoutError

from src.core.constants import RATE_LIMIT_KEY_PREFIX
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import RateLimitError
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.rate_limiter.config import TokenBucketConfig
from src.rate_limiter.storage.memory_storage import now_ms

if TYPE_CHECKING:
    from redis.asyncio import Redis


# ============================================================================
# Lua Script for Atomic Token Bucket Operations
# ============================================================================
# KEYS[1]: namespaced bucket key (hash with current_tokens, last_refill_time)
# ARGV[1]: max_tokens (bucket capacity)
# ARGV[2]: refill_rate (tokens per second)
# ARGV[3]: current_time (milliseconds since epoch)
#
# Returns: 1 if a token was consumed, 0 otherwise.
#
# State is written back even on denial so partial refill progress is kept.
TOKEN_BUCKET_LUA = """
local key = KEYS[1]
local max_tokens = tonumber(ARGV[1])
local refill_rate = tonumber(ARGV[2])
local current_time = tonumber(ARGV[3])

local bucket = redis.call('HMGET', key, 'current_tokens', 'last_refill_time')
local current_tokens = tonumber(bucket[1])
local last_refill_time = tonumber(bucket[2])

if current_tokens == nil or last_refill_time == nil then
    current_tokens = max_tokens
    last_refill_time = current_time
end

local elapsed = math.max(0, current_time - last_refill_time)
if elapsed > 0 then
    local new_tokens = (elapsed / 1000) * refill_rate
    current_tokens = math.min(max_tokens, current_tokens + new_tokens)
    last_refill_time = current_time
end

local allowed = 0
if current_tokens >= 1 then
    current_tokens = current_tokens - 1
    allowed = 1
end

redis.call('HSET', key, 'current_tokens', current_tokens, 'last_refill_time', last_refill_time)
redis.call('EXPIRE', key, math.ceil(max_tokens / refill_rate) + 1)

return allowed
"""


def build_key(identifier: str) -> str:
    """Namespace an identifier for storage in a shared Redis.

    Args:
        identifier: Caller-supplied key.

    Returns:
        str: "rate_limit:{identifier}".
    """
    return f"{RATE_LIMIT_KEY_PREFIX}:{identifier}"


class RedisStorage:
    """Redis token bucket storage.

    Thread Safety:
        - Safe for unlimited concurrent use across tasks and processes
        - Redis executes the Lua script atomically
        - No shared mutable state in this class besides the registered script

    Args:
        config: Bucket configuration shared by all identifiers.
        redis_client: Established redis.asyncio client. Pooling, retries and
            timeouts are the caller's responsibility.
        logger: Structured logger (defaults to a structlog logger).
        clock: Wall clock returning milliseconds since epoch.
    """

    def __init__(
        self,
        config: TokenBucketConfig,
        redis_client: Redis,
        *,
        logger: LoggerProtocol | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.config = config
        self.redis = redis_client
        self._clock = clock
        self._logger = (logger or structlog.get_logger()).bind(backend="redis")
        self._script = redis_client.register_script(TOKEN_BUCKET_LUA)

    async def check(self, identifier: str) -> Result[bool, RateLimitError]:
        """Atomically refill the identifier's bucket and try to consume a token.

        Args:
            identifier: Caller-supplied key.

        Returns:
            Result[bool, RateLimitError]:
                - Success(True) if a token was consumed
                - Success(False) if the bucket is empty
                - Failure(RateLimitError) if Redis or the script failed
        """
        key = build_key(identifier)
        current_time = self._clock()

        try:
            result = await self._script(
                keys=[key],
                args=[self.config.max_tokens, self.config.refill_rate, current_time],
            )
        except (RedisConnectionError, RedisTimeoutError) as exc:
            return self._failure(
                ErrorCode.RATE_LIMIT_STORE_UNAVAILABLE,
                "Rate limit store unavailable",
                identifier,
                exc,
            )
        except ResponseError as exc:
            return self._failure(
                ErrorCode.RATE_LIMIT_SCRIPT_FAILED,
                "Rate limit script failed",
                identifier,
                exc,
            )
        except RedisError as exc:
            return self._failure(
                ErrorCode.RATE_LIMIT_CHECK_FAILED,
                "Rate limit check failed",
                identifier,
                exc,
            )

        allowed = int(result) == 1
        self._logger.debug(
            "Checked bucket",
            identifier=identifier,
            key=key,
            allowed=allowed,
        )
        return Success(value=allowed)

    def _failure(
        self,
        code: ErrorCode,
        message: str,
        identifier: str,
        exc: RedisError,
    ) -> Failure[RateLimitError]:
        self._logger.error(message, error=exc, identifier=identifier)
        return Failure(
            error=RateLimitError(
                code=code,
                message=f"{message}: {exc}",
                details={
                    "identifier": identifier,
                    "key": build_key(identifier),
                    "error_type": type(exc).__name__,
                },
            )
        )
