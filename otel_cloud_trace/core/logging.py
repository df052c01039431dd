"""Structured logging for the exporter, built on Loguru.

Library modules log through ``from loguru import logger``. Applications that
want the exporter's output formatted consistently call ``setup_logging`` once;
it installs one of the registered formatters and routes standard library
logging (used by the Google client libraries) into Loguru.

Formatter types:
- **console**: Human-readable with inline context (development)
- **json**: Generic structured format
- **gcp**: Google Cloud Logging structured format
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from typing import Any, Final, Protocol, cast

from loguru import logger


class _LoggingState:
    """Simple state holder to track if logging has been configured."""

    def __init__(self) -> None:
        self.configured = False


_state = _LoggingState()


class LogConfigProtocol(Protocol):
    """Protocol for log configuration objects."""

    @property
    def log_level(self) -> str:
        """Logging level."""
        ...

    @property
    def log_formatter_type(self) -> str | None:
        """Log formatter type."""
        ...

    @property
    def debug(self) -> bool:
        """Verbose tracebacks flag."""
        ...


class SettingsProtocol(Protocol):
    """Protocol for settings objects that setup_logging can accept."""

    @property
    def service_name(self) -> str:
        """Service name reported in structured logs."""
        ...

    @property
    def log_config(self) -> LogConfigProtocol:
        """Log configuration."""
        ...


DEFAULT_LOG_FORMAT: Final[str] = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{message}"
)
MAX_FIELD_VALUE_LENGTH: Final[int] = 100

# Loguru level name -> Cloud Logging severity
GCP_SEVERITY: Final[dict[str, str]] = {
    "TRACE": "DEBUG",
    "DEBUG": "DEBUG",
    "INFO": "INFO",
    "SUCCESS": "INFO",
    "WARNING": "WARNING",
    "ERROR": "ERROR",
    "CRITICAL": "CRITICAL",
}


def _escape(value: object) -> str:
    return str(value).replace("{", "{{").replace("}", "}}")


def _format_extra_field(key: str, value: object) -> str:
    """Format an extra field as ``key=value`` for console display."""
    str_value = str(value)
    if len(str_value) > MAX_FIELD_VALUE_LENGTH:
        str_value = str_value[: MAX_FIELD_VALUE_LENGTH - 3] + "..."
    return f"{_escape(key)}={_escape(str_value)}"


def format_console_with_context(record: dict[str, Any]) -> str:
    """Format log record for console with all context fields visible.

    Args:
        record: Loguru record to format.

    Returns:
        str: Loguru format string for the record.
    """
    try:
        parts = [
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green>",
            "<level>{level: <8}</level>",
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>",
        ]

        extra = record.get("extra", {})
        context_parts = [
            f"<dim>{_format_extra_field(key, value)}</dim>"
            for key, value in extra.items()
            if not key.startswith("_") and value is not None
        ]
        if context_parts:
            parts.append(" ".join(f"[{part}]" for part in context_parts))

        parts.append(_escape(record.get("message", "")))

        line = " | ".join(parts)
        if record.get("exception"):
            line += "\n{exception}"
        return line + "\n"
    except (AttributeError, TypeError, ValueError, KeyError) as e:
        logger.trace(f"Failed to format log record: {e}")
        return DEFAULT_LOG_FORMAT + "\n"


class InterceptHandler(logging.Handler):
    """Intercept standard logging and redirect to Loguru.

    The Google client libraries and the OpenTelemetry SDK log through the
    standard library; this handler forwards those records to Loguru.
    """

    def emit(self, record: logging.LogRecord) -> None:
        """Forward log record to Loguru.

        Args:
            record: Standard library LogRecord to forward.
        """
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        try:
            frame = sys._getframe(6)
            depth = 6
            while frame and frame.f_code.co_filename == logging.__file__:
                if frame.f_back is None:
                    break
                frame = frame.f_back
                depth += 1
        except ValueError:
            depth = 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def serialize_for_json(record: dict[str, Any]) -> str:
    """Format log record as generic JSON.

    Args:
        record: Loguru record to format.

    Returns:
        str: JSON-formatted log entry with newline.
    """
    log_entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["name"],
        "function": record["function"],
        "line": record["line"],
    }

    if extra := record.get("extra", {}):
        log_entry.update({k: v for k, v in extra.items() if not k.startswith("_")})

    if exc := record.get("exception"):
        log_entry["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value else None,
        }

    return json.dumps(log_entry, default=str) + "\n"


def make_gcp_serializer(service_name: str) -> Callable[[dict[str, Any]], str]:
    """Build a formatter for GCP Cloud Logging.

    Follows https://cloud.google.com/logging/docs/structured-logging

    Args:
        service_name: Service reported in ``serviceContext``.

    Returns:
        Callable[[dict[str, Any]], str]: The record formatter.
    """

    def serialize_for_gcp(record: dict[str, Any]) -> str:
        log_entry: dict[str, Any] = {
            "severity": GCP_SEVERITY.get(record["level"].name, "INFO"),
            "message": record["message"],
            "timestamp": record["time"].isoformat(),
            "serviceContext": {"service": service_name},
            "logging.googleapis.com/labels": {
                "function": record["function"],
                "module": record["module"],
                "line": str(record["line"]),
            },
        }

        if extra := record.get("extra", {}):
            json_payload = {k: v for k, v in extra.items() if not k.startswith("_")}
            if json_payload:
                log_entry["jsonPayload"] = json_payload

        if record.get("exception") or record["level"].name in ("ERROR", "CRITICAL"):
            log_entry["logging.googleapis.com/sourceLocation"] = {
                "file": record["file"].path,
                "line": str(record["line"]),
                "function": record["function"],
            }

        return json.dumps(log_entry, default=str) + "\n"

    return serialize_for_gcp


def setup_logging(settings: SettingsProtocol) -> None:
    """Configure Loguru with the selected formatter.

    Safe to call more than once; only the first call takes effect.

    Args:
        settings: Settings containing the log configuration.
    """
    if _state.configured:
        return

    logger.remove()

    formatter_type = settings.log_config.log_formatter_type

    formatter: Callable[[dict[str, Any]], str] | None = None
    if formatter_type == "json":
        formatter = serialize_for_json
    elif formatter_type == "gcp":
        formatter = make_gcp_serializer(settings.service_name)

    if formatter is None:
        logger.add(
            sys.stdout,
            format=cast("Any", format_console_with_context),
            level=settings.log_config.log_level,
            colorize=True,
            diagnose=settings.log_config.debug,
            backtrace=settings.log_config.debug,
        )
    else:
        structured = formatter

        def structured_sink(message: object) -> None:
            """Write the structured rendering of a message to stdout."""
            if hasattr(message, "record"):
                sys.stdout.write(structured(message.record))
                sys.stdout.flush()

        logger.add(
            structured_sink,
            level=settings.log_config.log_level,
            diagnose=False,
            backtrace=False,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    logger.info(
        "Logging configured with {} formatter",
        formatter_type,
        log_level=settings.log_config.log_level,
    )

    _state.configured = True
