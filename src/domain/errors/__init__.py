"""Domain errors package.

Usage:
    from src.domain.errors import RateLimitError
"""

from src.domain.errors.rate_limit_error import RateLimitError

__all__ = ["RateLimitError"]
