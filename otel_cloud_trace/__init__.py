"""Export OpenTelemetry spans to Google Cloud Trace."""

from otel_cloud_trace.core.observability import setup_tracing
from otel_cloud_trace.exporter import (
    CloudTraceClient,
    CloudTraceSpanExporter,
    SpanConverter,
    TraceIngestionClient,
    create_span_exporter,
)

__all__ = [
    "CloudTraceClient",
    "CloudTraceSpanExporter",
    "SpanConverter",
    "TraceIngestionClient",
    "create_span_exporter",
    "setup_tracing",
]
