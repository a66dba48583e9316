"""Rate Limit protocol (port) for token bucket admission control.

Following hexagonal architecture:
- Domain defines the PORT (this protocol)
- The rate_limiter bounded context provides the implementation (RateLimiter)
- Callers depend on the protocol, not on a specific backend

Usage:
    from src.domain.protocols import RateLimitProtocol

    rate_limit: RateLimitProtocol = get_rate_limiter()

    match await rate_limit.check(client_id):
        case Success(value=True):
            ...
        case Success(value=False):
            raise HTTPException(429)
        case Failure(error=err):
            ...  # caller decides fail-open or fail-closed
"""

from typing import Protocol

from src.core.result import Result
from src.domain.errors import RateLimitError


class RateLimitProtocol(Protocol):
    """Protocol for token bucket rate limiters.

    Error Handling:
        Returns Success(True) to admit, Success(False) to deny.
        Failure(RateLimitError) is a store failure, never a decision. It is
        NOT converted to allow/deny by the implementation.
    """

    async def check(self, identifier: str) -> Result[bool, RateLimitError]:
        """Refill the identifier's bucket and try to consume one token.

        Args:
            identifier: Caller-supplied key (client ID, API key, IP, ...).

        Returns:
            Result[bool, RateLimitError]:
                - Success(True) if a token was consumed
                - Success(False) if the bucket is empty
                - Failure(RateLimitError) if the store could not be reached
        """
        ...
