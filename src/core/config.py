"""
Configuration management using Pydantic Settings.

This module provides type-safe, validated configuration loading from environment
variables. Nothing here is required for using the rate limiter as a library:
callers may build a TokenBucketConfig directly. Settings exist for the
composition root (`src/rate_limiter/factory.py`).

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic

Usage:
    from src.core.config import get_settings

    settings = get_settings()
    config = settings.token_bucket_config()

Environment variables:
    ENVIRONMENT=development|testing|ci|production
    LOG_LEVEL=INFO
    REDIS_URL=redis://localhost:6379/0
    RATE_LIMIT_BACKEND=memory|redis
    RATE_LIMIT_MAX_TOKENS=60
    RATE_LIMIT_REFILL_RATE=1
"""

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.enums import Environment
from src.rate_limiter.config import RateLimitBackend, TokenBucketConfig


class Settings(BaseSettings):
    """
    Rate limiter settings (flat structure).

    Configuration precedence:
        1. Environment variables
        2. Default values (only for non-sensitive config)

    Returns:
        Settings: Configuration loaded from environment.
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Runtime environment (development, testing, ci, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Cache configuration (Redis)
    redis_url: str | None = Field(
        default=None,
        description="Redis connection URL (e.g., redis://host:port/db). "
        "Required when rate_limit_backend is 'redis'.",
    )

    # Rate limit configuration
    rate_limit_backend: RateLimitBackend = Field(
        default=RateLimitBackend.MEMORY,
        description="Bucket storage backend (memory, redis)",
    )
    rate_limit_max_tokens: int = Field(
        default=60,
        gt=0,
        description="Bucket capacity (burst size)",
    )
    rate_limit_refill_rate: int = Field(
        default=1,
        gt=0,
        description="Tokens granted per elapsed second",
    )

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """
        Normalize and validate the log level name.

        Args:
            v: Log level name in any case.

        Returns:
            str: Upper-cased log level name.

        Raises:
            ValueError: If the level is not a standard logging level.
        """
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log_level: {v}")
        return level

    @model_validator(mode="after")
    def require_redis_url_for_redis_backend(self) -> "Settings":
        """
        Ensure a Redis URL is present when the Redis backend is selected.

        Returns:
            Settings: The validated settings.

        Raises:
            ValueError: If rate_limit_backend is redis and redis_url is unset.
        """
        if self.rate_limit_backend == RateLimitBackend.REDIS and not self.redis_url:
            raise ValueError("redis_url is required when rate_limit_backend is 'redis'")
        return self

    def token_bucket_config(self) -> TokenBucketConfig:
        """
        Build the immutable bucket configuration from these settings.

        Returns:
            TokenBucketConfig: Capacity and refill rate for every bucket.
        """
        return TokenBucketConfig(
            max_tokens=self.rate_limit_max_tokens,
            refill_rate=self.rate_limit_refill_rate,
        )

    # Convenience property for environment checks
    @property
    def is_development(self) -> bool:
        """
        Check if running in development environment.

        Returns:
            bool: True if environment is DEVELOPMENT, False otherwise.
        """
        return self.environment == Environment.DEVELOPMENT


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Process-wide settings loaded from the environment.
    """
    return Settings()
