"""
Configuration management for ff-querybuilder.

Settings are read from ``FF_QB_*`` environment variables and an optional
``.env`` file, with explicit keyword arguments taking precedence.
"""

from functools import lru_cache

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("console", "json", "null")


class QueryBuilderSettings(BaseSettings):
    """Query builder configuration using Pydantic Settings."""

    model_config = SettingsConfigDict(
        env_prefix="FF_QB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "console"  # console, json or null
    log_colors: bool = True

    # Builder behaviour
    warn_unknown_select_mode: bool = False

    # MySQL sql_mode NO_BACKSLASH_ESCAPES for connection-less escaping
    no_backslash_escapes: bool = False

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return value

    @field_validator("log_format")
    @classmethod
    def _validate_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")
        return value


def load_settings(**overrides) -> QueryBuilderSettings:
    """
    Build a settings object, raising ConfigurationError on invalid values.

    Args:
        **overrides: Explicit values taking precedence over the environment

    Returns:
        Validated QueryBuilderSettings
    """
    try:
        return QueryBuilderSettings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid query builder settings: {e}") from e


@lru_cache
def get_settings() -> QueryBuilderSettings:
    """Get the process-wide settings (cached, use get_settings.cache_clear() to reload)."""
    return load_settings()
