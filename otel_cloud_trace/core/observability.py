"""TracerProvider wiring for the Cloud Trace exporter.

The exporter keeps spans until it is shut down, so it is attached through a
``SimpleSpanProcessor``: every finished span reaches the buffer immediately
and ``TracerProvider.shutdown`` triggers the single submission.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from loguru import logger
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor

from otel_cloud_trace.core.config import get_settings
from otel_cloud_trace.exporter.factory import create_span_exporter

if TYPE_CHECKING:
    from opentelemetry.sdk.trace.export import SpanExporter

    from otel_cloud_trace.core.config import Settings

SERVICE_NAME_KEY: Final[str] = "service.name"
SERVICE_VERSION_KEY: Final[str] = "service.version"


def setup_tracing(
    settings: Settings | None = None,
    exporter: SpanExporter | None = None,
    *,
    set_global: bool = True,
) -> TracerProvider:
    """Create a TracerProvider exporting to Cloud Trace.

    Args:
        settings: Exporter settings, the cached settings when omitted.
        exporter: Exporter to attach, built by ``create_span_exporter`` when
            omitted.
        set_global: Install the provider as the global tracer provider.

    Returns:
        TracerProvider: The configured provider.
    """
    settings = settings or get_settings()

    attributes: dict[str, str] = {SERVICE_NAME_KEY: settings.service_name}
    if settings.service_version:
        attributes[SERVICE_VERSION_KEY] = settings.service_version

    tracer_provider = TracerProvider(resource=Resource.create(attributes))
    tracer_provider.add_span_processor(
        SimpleSpanProcessor(exporter or create_span_exporter(settings))
    )

    if set_global:
        trace.set_tracer_provider(tracer_provider)

    logger.info(
        "Tracing configured",
        service_name=settings.service_name,
        project_id=settings.project_id,
    )
    return tracer_provider
