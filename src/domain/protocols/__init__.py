"""Domain protocols (ports) package.

Infrastructure adapters implement these protocols without inheritance
(PEP 544 structural subtyping).

Usage:
    from src.domain.protocols import LoggerProtocol, RateLimitProtocol
"""

from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.rate_limit_protocol import RateLimitProtocol

__all__ = [
    "LoggerProtocol",
    "RateLimitProtocol",
]
