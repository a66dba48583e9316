"""Container module - Centralized dependency injection.

Application-scoped singletons for infrastructure used by the rate limiter.

    from src.core.container import get_logger, get_redis_client
"""

from src.core.container.infrastructure import get_logger, get_redis_client

__all__ = [
    "get_logger",
    "get_redis_client",
]
