"""Environment-based configuration using pydantic-settings.

Example:
    >>> from errchain.config import get_settings
    >>> get_settings().capture_stack
    True

    # Or with environment variables:
    # ERRCHAIN_CAPTURE_STACK=false
    # ERRCHAIN_STACK_LIMIT=20
    # ERRCHAIN_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, PositiveInt, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ERRCHAIN_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class ErrchainSettings(BaseSettings):
    """Root settings for errchain.

    Example environment variables:
        ERRCHAIN_CAPTURE_STACK=false
        ERRCHAIN_STACK_LIMIT=10
        ERRCHAIN_LOG_DEBUG_FAILURES=false
        ERRCHAIN_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="ERRCHAIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    capture_stack: bool = Field(default=True, description="Record a creation-site stack on new errors")
    stack_limit: PositiveInt | None = Field(default=None, description="Max frames kept in a captured stack")
    log_debug_failures: bool = Field(default=True, description="Emit a debug log when try_sync/try_async capture a failure")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> ErrchainSettings:
    """Get the global settings instance (cached)."""
    return ErrchainSettings()


def settings_or_none() -> ErrchainSettings | None:
    """Settings for library hot paths: None when the environment holds invalid values."""
    try:
        return get_settings()
    except ValidationError:
        return None


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
