"""Result types for railway-oriented programming.

Rate limit checks against a shared store can fail for reasons the caller must
handle explicitly (fail-open or fail-closed). Instead of raising, backends
return a Result so the decision stays visible in the call signature.

Usage:
    result = await limiter.check("client-42")

    match result:
        case Success(value=True):
            ...  # admit
        case Success(value=False):
            ...  # deny (HTTP 429)
        case Failure(error=err):
            ...  # store unavailable - caller decides
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


# Type alias for Result union
type Result[T, E] = Success[T] | Failure[E]
