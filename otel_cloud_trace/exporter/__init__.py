"""Cloud Trace span export.

- **converter**: ``ReadableSpan`` to ``DestinationSpan`` mapping
- **exporter**: Buffering ``SpanExporter`` submitting on shutdown
- **client**: Ingestion client protocol and the Cloud Trace v2 adapter
- **factory**: Exporter construction from settings
- **models**: Cloud Trace span models
- **tables**: Status and attribute key lookup tables
"""

from otel_cloud_trace.exporter.client import CloudTraceClient, TraceIngestionClient
from otel_cloud_trace.exporter.converter import SpanConverter
from otel_cloud_trace.exporter.exporter import CloudTraceSpanExporter
from otel_cloud_trace.exporter.factory import create_span_exporter

__all__ = [
    "CloudTraceClient",
    "CloudTraceSpanExporter",
    "SpanConverter",
    "TraceIngestionClient",
    "create_span_exporter",
]
