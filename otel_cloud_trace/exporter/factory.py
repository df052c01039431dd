"""Build a Cloud Trace exporter from configuration."""

from __future__ import annotations

from loguru import logger

from otel_cloud_trace.core.config import Settings, get_settings
from otel_cloud_trace.core.constants import GOOGLE_CLOUD_PROJECT_ENV
from otel_cloud_trace.core.exceptions import ConfigurationError
from otel_cloud_trace.exporter.client import CloudTraceClient
from otel_cloud_trace.exporter.exporter import CloudTraceSpanExporter


def create_span_exporter(settings: Settings | None = None) -> CloudTraceSpanExporter:
    """Create an exporter wired to a Cloud Trace client.

    The client timeout comes from ``OTEL_EXPORTER_CLOUD_TRACE_TIMEOUT``
    (30 seconds by default).

    Args:
        settings: Exporter settings, the cached settings when omitted.

    Returns:
        CloudTraceSpanExporter: The configured exporter.

    Raises:
        ConfigurationError: If no GCP project id is configured.
    """
    settings = settings or get_settings()

    if not settings.project_id:
        msg = (
            "GCP project ID not configured, set OTEL_EXPORTER_CLOUD_TRACE_PROJECT_ID "
            f"or {GOOGLE_CLOUD_PROJECT_ENV}"
        )
        raise ConfigurationError(msg)

    logger.info(
        "Using Cloud Trace exporter for project {}",
        settings.project_id,
        timeout=settings.timeout,
    )
    client = CloudTraceClient(project_id=settings.project_id, timeout=settings.timeout)
    return CloudTraceSpanExporter(client)
