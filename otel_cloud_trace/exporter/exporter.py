"""OpenTelemetry span exporter that writes to Google Cloud Trace.

The exporter buffers every span it is given and only converts and submits
them when it is shut down, in a single all-or-nothing call to the ingestion
client. There is no retry: the client's boolean result is returned as is.

``force_flush`` reports success without submitting anything. Spans stay
buffered until ``shutdown``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult

from otel_cloud_trace.exporter.converter import SpanConverter
from otel_cloud_trace.exporter.models import PLACEHOLDER_ID, TraceEnvelope

if TYPE_CHECKING:
    from collections.abc import Sequence

    from opentelemetry.sdk.trace import ReadableSpan

    from otel_cloud_trace.exporter.client import TraceIngestionClient


class CloudTraceSpanExporter(SpanExporter):
    """Buffering span exporter for Cloud Trace.

    Args:
        client: Ingestion client receiving the envelope on shutdown.
        converter: Span converter, a fresh ``SpanConverter`` by default.
    """

    def __init__(
        self,
        client: TraceIngestionClient,
        converter: SpanConverter | None = None,
    ) -> None:
        self._client = client
        self._converter = converter or SpanConverter()
        self._batch: list[ReadableSpan] = []
        self._shutdown = False

    @property
    def buffered_spans(self) -> tuple[ReadableSpan, ...]:
        """Spans received by ``export`` and not yet submitted."""
        return tuple(self._batch)

    @property
    def is_shutdown(self) -> bool:
        """Whether ``shutdown`` already ran."""
        return self._shutdown

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        """Buffer spans for submission at shutdown.

        Args:
            spans: Finished spans from the SDK pipeline.

        Returns:
            SpanExportResult: SUCCESS while open, FAILURE after shutdown.
        """
        if self._shutdown:
            logger.warning("Exporter already shut down, dropping {} spans", len(spans))
            return SpanExportResult.FAILURE

        self._batch.extend(spans)
        return SpanExportResult.SUCCESS

    def shutdown(self) -> bool:
        """Convert all buffered spans and submit them in one envelope.

        An empty buffer still submits an envelope with no spans.
        The buffer is emptied even when conversion fails.

        Returns:
            bool: The ingestion client's result; False if already shut down.

        Raises:
            InvalidStatusCodeError: If a buffered span has an unmapped status.
        """
        if self._shutdown:
            logger.warning("Exporter shutdown called more than once")
            return False

        self._shutdown = True

        try:
            envelope = TraceEnvelope(
                project_id=PLACEHOLDER_ID,
                trace_id=PLACEHOLDER_ID,
                spans=[self._converter.convert(span) for span in self._batch],
            )
        finally:
            self._batch = []

        logger.debug(
            "Trace export",
            export=envelope.model_dump(by_alias=True, exclude_none=True),
        )

        result = self._client.insert(envelope)

        logger.info(
            "Submitted {} spans to Cloud Trace",
            len(envelope.spans),
            success=result,
        )
        return result

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """Report success without submitting; spans are sent on shutdown."""
        _ = timeout_millis
        return True
