"""Exporter configuration with environment-aware defaults.

This module implements the configuration layer using Pydantic Settings,
providing type-safe configuration with validation and environment variable
support for the Cloud Trace exporter.

Features:
- **Type safety**: All configuration values are validated and typed
- **Environment variables**: ``OTEL_EXPORTER_CLOUD_TRACE_*`` and .env files
- **Nested configuration**: Uses __ delimiter for the logging block
- **Auto-detection**: Detects Cloud Run for the log formatter and falls back
  to ``GOOGLE_CLOUD_PROJECT`` for the project id
- **Caching**: Configuration is cached for performance

Configuration sources (in order of precedence):
1. Environment variables
2. .env file in the working directory
3. Default values in model definitions
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from otel_cloud_trace.core.constants import (
    DEFAULT_EXPORT_TIMEOUT_SECONDS,
    ENV_PREFIX,
    GOOGLE_CLOUD_PROJECT_ENV,
)


class LogConfig(BaseModel):
    """Logging configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_formatter_type: Literal["console", "json", "gcp"] | None = Field(
        default=None,
        description="Log output formatter. Auto-detected if not specified.",
    )
    debug: bool = Field(
        default=False,
        description="Show variable values and full backtraces in console logs",
    )


class Settings(BaseSettings):
    """Settings for the Cloud Trace span exporter."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        env_nested_delimiter="__",
        extra="ignore",
    )

    timeout: int = Field(
        default=DEFAULT_EXPORT_TIMEOUT_SECONDS,
        gt=0,
        description="Request timeout in seconds for the Cloud Trace client",
    )
    project_id: str | None = Field(
        default=None,
        description="GCP project receiving the spans",
    )
    service_name: str = Field(
        default="unknown_service",
        description="service.name resource attribute used by setup_tracing",
    )
    service_version: str | None = Field(
        default=None,
        description="service.version resource attribute used by setup_tracing",
    )

    log_config: LogConfig = Field(
        default_factory=LogConfig, description="Logging configuration"
    )

    def model_post_init(self, __context: object) -> None:
        """Fill environment-derived defaults."""
        super().model_post_init(__context)

        if self.project_id is None:
            self.project_id = os.getenv(GOOGLE_CLOUD_PROJECT_ENV) or None

        if self.log_config.log_formatter_type is None:
            self.log_config.log_formatter_type = self._detect_formatter()

    @staticmethod
    def _detect_formatter() -> Literal["console", "json", "gcp"]:
        """Auto-detect log formatter based on environment."""
        if os.getenv("K_SERVICE"):  # Cloud Run
            return "gcp"
        return "console"

    @field_validator("project_id", "service_version", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for nullable fields."""
        _ = cls
        if v == "":
            return None
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
