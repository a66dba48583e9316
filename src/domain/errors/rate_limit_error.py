"""Rate Limit error types.

Used when a rate limit store operation fails (Redis connection loss, Lua
script failure, etc.).

Usage:
    from src.domain.errors import RateLimitError
    from src.core.enums import ErrorCode
    from src.core.result import Failure

    return Failure(error=RateLimitError(
        code=ErrorCode.RATE_LIMIT_STORE_UNAVAILABLE,
        message="Rate limit store unavailable: Connection refused",
    ))
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitError(DomainError):
    """Rate limit store failure.

    A rate limit DENIAL is NOT an error - it is a successful check that
    returns False. This error class is for actual store failures.

    Attributes:
        code: ErrorCode enum (RATE_LIMIT_STORE_UNAVAILABLE, etc.).
        message: Human-readable message.
        details: Additional context (identifier, key, error_type).

    Design:
        Errors are surfaced unchanged to the caller and never converted to
        an allow or deny decision. The caller chooses fail-open or
        fail-closed behavior.
    """

    pass  # Inherits all fields from DomainError
