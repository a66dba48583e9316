"""Unit tests for Result types and domain errors.

Tests cover:
- Success/Failure construction, immutability and pattern matching
- DomainError/RateLimitError data and string form
"""

from dataclasses import FrozenInstanceError

import pytest

from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.core.result import Failure, Success
from src.domain.errors import RateLimitError


def describe(result) -> str:
    match result:
        case Success(value=True):
            return "allowed"
        case Success(value=False):
            return "denied"
        case Failure(error=RateLimitError(code=code)):
            return f"failed:{code.value}"
    return "unknown"


@pytest.mark.unit
class TestResult:
    """Test Success and Failure."""

    def test_success_holds_value(self):
        """Test Success stores its value."""
        assert Success(value=True).value is True

    def test_results_are_immutable(self):
        """Test results cannot be mutated."""
        result = Success(value=True)

        with pytest.raises(FrozenInstanceError):
            result.value = False  # type: ignore[misc]

    def test_pattern_matching(self):
        """Test the three outcomes of a rate limit check are distinguishable."""
        error = RateLimitError(
            code=ErrorCode.RATE_LIMIT_STORE_UNAVAILABLE,
            message="Rate limit store unavailable",
        )

        assert describe(Success(value=True)) == "allowed"
        assert describe(Success(value=False)) == "denied"
        assert describe(Failure(error=error)) == "failed:rate_limit_store_unavailable"


@pytest.mark.unit
class TestRateLimitError:
    """Test RateLimitError."""

    def test_is_domain_error_not_exception(self):
        """Test errors flow as data, not as raised exceptions."""
        error = RateLimitError(
            code=ErrorCode.RATE_LIMIT_SCRIPT_FAILED, message="Rate limit script failed"
        )

        assert isinstance(error, DomainError)
        assert not isinstance(error, Exception)
        assert error.details is None

    def test_str(self):
        """Test string form is 'code: message'."""
        error = RateLimitError(
            code=ErrorCode.RATE_LIMIT_CHECK_FAILED,
            message="Rate limit check failed",
            details={"identifier": "k"},
        )

        assert str(error) == "rate_limit_check_failed: Rate limit check failed"
