"""Core package constants."""

from typing import Final

# Environment
ENV_PREFIX: Final[str] = "OTEL_EXPORTER_CLOUD_TRACE_"
GOOGLE_CLOUD_PROJECT_ENV: Final[str] = "GOOGLE_CLOUD_PROJECT"

DEFAULT_EXPORT_TIMEOUT_SECONDS: Final[int] = 30

# Time constants
NANOS_PER_SECOND: Final[int] = 1_000_000_000
NANOS_PER_MICROSECOND: Final[int] = 1_000
