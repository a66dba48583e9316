"""Centralized constants for internal implementation details.

These are NOT environment-specific configuration. For environment-specific
settings, use `src/core/config.py` instead.

Example:
    >>> from src.core.constants import RATE_LIMIT_KEY_PREFIX
    >>> f"{RATE_LIMIT_KEY_PREFIX}:client-42"
    'rate_limit:client-42'
"""

# =============================================================================
# Rate Limiting
# =============================================================================

RATE_LIMIT_KEY_PREFIX: str = "rate_limit"
"""Namespace prefix for bucket keys in a shared Redis instance.

Part of the wire contract with the store: changing it orphans existing buckets.
"""

MILLISECONDS_PER_SECOND: int = 1000
"""Conversion factor between bucket timestamps (ms) and refill rate (per second)."""
