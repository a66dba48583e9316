"""Machine-readable error codes.

Error codes follow ENTITY_ACTION_REASON naming convention.
Used with Result types for railway-oriented programming.
"""

from enum import Enum


class ErrorCode(Enum):
    """Machine-readable error codes."""

    # Rate limit store errors
    RATE_LIMIT_CHECK_FAILED = "rate_limit_check_failed"
    RATE_LIMIT_STORE_UNAVAILABLE = "rate_limit_store_unavailable"
    RATE_LIMIT_SCRIPT_FAILED = "rate_limit_script_failed"
