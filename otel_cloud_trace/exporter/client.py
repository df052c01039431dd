"""Trace ingestion clients.

The exporter only depends on the ``TraceIngestionClient`` protocol: one
``insert`` call per envelope, reporting success as a boolean. The transport
itself belongs to ``google-cloud-trace``; ``CloudTraceClient`` adapts the
converted spans to ``trace_v2.Span`` messages and hands them to
``TraceServiceClient.batch_write_spans``.
"""

from __future__ import annotations

import calendar
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

from google.api_core import exceptions as core_exceptions
from google.cloud import trace_v2
from google.protobuf import timestamp_pb2
from google.rpc import status_pb2
from loguru import logger

from otel_cloud_trace.core.constants import NANOS_PER_MICROSECOND
from otel_cloud_trace.exporter.models import PLACEHOLDER_ID

if TYPE_CHECKING:
    from otel_cloud_trace.core.types import FlatAttributes
    from otel_cloud_trace.exporter.models import (
        Annotation,
        DestinationSpan,
        SpanLink,
        TraceEnvelope,
    )


class TraceIngestionClient(Protocol):
    """Anything that can submit an envelope of converted spans."""

    def insert(self, envelope: TraceEnvelope) -> bool:
        """Submit all spans of the envelope, returning True on success."""
        ...


def _timestamp(zulu: str) -> timestamp_pb2.Timestamp:
    # Fraction is six microsecond digits followed by an unpadded nanosecond remainder
    whole, _, fraction = zulu.removesuffix("Z").partition(".")
    stamp = datetime.strptime(whole, "%Y-%m-%dT%H:%M:%S")
    micros, remainder = fraction[:6], fraction[6:]
    return timestamp_pb2.Timestamp(
        seconds=calendar.timegm(stamp.timetuple()),
        nanos=int(micros.ljust(6, "0")) * NANOS_PER_MICROSECOND + int(remainder or 0),
    )


def _truncatable(value: str) -> trace_v2.TruncatableString:
    return trace_v2.TruncatableString(value=value)


def _attributes(attributes: FlatAttributes) -> trace_v2.Span.Attributes:
    return trace_v2.Span.Attributes(
        attribute_map={
            key: trace_v2.AttributeValue(string_value=_truncatable(value))
            for key, value in attributes.items()
        }
    )


def _time_event(annotation: Annotation) -> trace_v2.Span.TimeEvent:
    return trace_v2.Span.TimeEvent(
        time=_timestamp(annotation.time),
        annotation=trace_v2.Span.TimeEvent.Annotation(
            description=_truncatable(annotation.description),
            attributes=_attributes(annotation.attributes),
        ),
    )


def _link(link: SpanLink) -> trace_v2.Span.Link:
    return trace_v2.Span.Link(
        trace_id=link.trace_id,
        span_id=link.span_id,
        attributes=_attributes(link.attributes),
    )


def to_proto_span(project_id: str, span: DestinationSpan) -> trace_v2.Span:
    """Render a converted span as a Cloud Trace v2 message.

    Args:
        project_id: Project the span is written to.
        span: The converted span.

    Returns:
        trace_v2.Span: The message for ``batch_write_spans``.
    """
    fields: dict[str, Any] = {
        "name": f"projects/{project_id}/traces/{span.trace_id}/spans/{span.span_id}",
        "span_id": span.span_id,
        "display_name": _truncatable(span.name),
        "start_time": _timestamp(span.start_time),
        "end_time": _timestamp(span.end_time),
        "attributes": _attributes(span.attributes),
        "time_events": trace_v2.Span.TimeEvents(
            time_event=[_time_event(event) for event in span.time_events]
        ),
        "links": trace_v2.Span.Links(link=[_link(link) for link in span.links]),
    }
    if span.parent_span_id is not None:
        fields["parent_span_id"] = span.parent_span_id
    if span.status is not None:
        fields["status"] = status_pb2.Status(
            code=span.status.code, message=span.status.message
        )
    return trace_v2.Span(**fields)


class CloudTraceClient:
    """Ingestion client backed by the Cloud Trace v2 API.

    Args:
        project_id: Project used when the envelope carries the placeholder id.
        timeout: Request timeout in seconds.
        client: Pre-built ``TraceServiceClient``; one is created from
            application default credentials when omitted.
    """

    def __init__(
        self,
        project_id: str,
        timeout: float,
        client: trace_v2.TraceServiceClient | None = None,
    ) -> None:
        self.project_id = project_id
        self.timeout = timeout
        self._client = client if client is not None else trace_v2.TraceServiceClient()

    def insert(self, envelope: TraceEnvelope) -> bool:
        """Write every span of the envelope in one ``batch_write_spans`` call.

        Args:
            envelope: Converted spans to submit.

        Returns:
            bool: True if Cloud Trace accepted the batch, False otherwise.
        """
        project_id = (
            self.project_id
            if envelope.project_id == PLACEHOLDER_ID
            else envelope.project_id
        )
        spans = [to_proto_span(project_id, span) for span in envelope.spans]

        try:
            self._client.batch_write_spans(
                name=f"projects/{project_id}",
                spans=spans,
                timeout=self.timeout,
            )
        except core_exceptions.GoogleAPIError:
            logger.exception(
                "Cloud Trace rejected span batch",
                project_id=project_id,
                span_count=len(spans),
            )
            return False

        logger.debug(
            "Wrote {} spans to Cloud Trace",
            len(spans),
            project_id=project_id,
        )
        return True
