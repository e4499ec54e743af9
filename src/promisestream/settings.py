"""Environment-based configuration using pydantic-settings.

Example:
    >>> from promisestream.settings import get_settings
    >>> settings = get_settings()
    >>> settings.output.encoding
    'utf-8'

    # Or with environment variables:
    # PROMISESTREAM_LOG_LEVEL=DEBUG
    # PROMISESTREAM_OUTPUT_MEDIA_TYPE="text/plain; charset=utf-8"
"""

from __future__ import annotations

import codecs
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PROMISESTREAM_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["json", "text"] = "text"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class OutputSettings(BaseSettings):
    """Defaults used when output streams are encoded or sent over HTTP."""

    model_config = SettingsConfigDict(
        env_prefix="PROMISESTREAM_OUTPUT_",
        extra="ignore",
    )

    encoding: str = Field(default="utf-8", description="Codec for str <-> bytes chunk conversion")
    media_type: str = Field(default="text/html; charset=utf-8", description="Content type for HTTP responses")

    @field_validator("encoding")
    @classmethod
    def _known_codec(cls, v: str) -> str:
        """Reject codecs Python does not know about."""
        try:
            return codecs.lookup(v).name
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {v}") from e


class PromiseStreamSettings(BaseSettings):
    """Root settings, loaded from PROMISESTREAM_* variables and an optional .env file.

    Example environment variables:
        PROMISESTREAM_DEBUG=true
        PROMISESTREAM_LOG_FORMAT=json
        PROMISESTREAM_OUTPUT_ENCODING=latin-1
    """

    model_config = SettingsConfigDict(
        env_prefix="PROMISESTREAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Force DEBUG logging")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)

    @property
    def log_level(self) -> str:
        """Effective log level, DEBUG when debug mode is on."""
        return "DEBUG" if self.debug else self.logging.level


@lru_cache(maxsize=1)
def get_settings() -> PromiseStreamSettings:
    """Get the global settings instance (cached)."""
    return PromiseStreamSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
