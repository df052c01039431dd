"""Shared infrastructure for the Cloud Trace exporter.

- **config**: Settings loaded from ``OTEL_EXPORTER_CLOUD_TRACE_*`` variables
- **constants**: Environment names, defaults and time units
- **exceptions**: Structured exception hierarchy with error codes
- **logging**: Loguru setup with console, JSON and GCP formatters
- **observability**: TracerProvider wiring around the exporter
- **types**: Type aliases for attribute values
"""
