"""Structured exception hierarchy for the Cloud Trace exporter.

Key components:
- **ErrorCode enum**: Standardized error identifiers for programmatic handling
- **Severity enum**: Error classification for monitoring and alerting
- **CloudTraceExporterError**: Base exception with context and chaining
- **Specialized exceptions**: Contract violations and configuration problems

Ingestion failures are not exceptions: the ingestion client reports them as
a ``False`` result which the exporter passes through unchanged.
"""

from enum import Enum

from otel_cloud_trace.core.types import ErrorContext


class ErrorCode(Enum):
    """Standardized error codes for the exporter."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""

    INVALID_STATUS_CODE = "INVALID_STATUS_CODE"
    """A span carried a status code outside the mapped set."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """The exporter could not be built from the current configuration."""


class Severity(Enum):
    """Severity levels for exporter errors."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class CloudTraceExporterError(Exception):
    """Base exception class for all exporter exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    @property
    def should_alert(self) -> bool:
        """Whether the error indicates a problem that needs attention."""
        return self.severity in (Severity.HIGH, Severity.CRITICAL)

    def __str__(self) -> str:
        """Return a string representation of the exception."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return a detailed representation of the exception."""
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class InvalidStatusCodeError(CloudTraceExporterError):
    """Raised when a span status code has no Cloud Trace equivalent.

    The OpenTelemetry status code enumeration is closed, so reaching this
    error means the caller handed over a span that breaks that contract.
    Conversion of the offending span is aborted.

    Args:
        status_code: The unmapped status code
        context: Additional context information about the error
    """

    def __init__(
        self,
        status_code: object,
        context: ErrorContext | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(
            ErrorCode.INVALID_STATUS_CODE,
            f"invalid status code: {status_code!r}",
            Severity.HIGH,
            context,
        )


class ConfigurationError(CloudTraceExporterError):
    """Raised when the exporter cannot be built from configuration.

    Args:
        message: Description of the configuration problem
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            ErrorCode.CONFIGURATION_ERROR, message, Severity.HIGH, context, cause
        )
