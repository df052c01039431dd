"""Conversion of OpenTelemetry SDK spans into the Cloud Trace span model.

The conversion is a pure function of the input span. It never drops a span:
whatever the SDK discarded upstream because of limits is only recorded as
``otel.dropped_*_count`` attributes.

Attribute merge order is span, then resource, then instrumentation scope;
on key collision the later source wins. Well-known HTTP keys are renamed
through ``ATTRIBUTE_MAP`` as the very last step, after the synthetic agent
and drop-count attributes were added.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from opentelemetry.trace import StatusCode, format_span_id, format_trace_id

from otel_cloud_trace.core.constants import NANOS_PER_MICROSECOND, NANOS_PER_SECOND
from otel_cloud_trace.core.exceptions import InvalidStatusCodeError
from otel_cloud_trace.exporter.models import (
    Annotation,
    DestinationSpan,
    SpanLink,
    SpanStatus,
)
from otel_cloud_trace.exporter.tables import (
    ATTRIBUTE_MAP,
    KEY_AGENT,
    KEY_DROPPED_ATTRIBUTES_COUNT,
    KEY_DROPPED_EVENTS_COUNT,
    KEY_DROPPED_LINKS_COUNT,
    STATUS_MAP,
    UNKNOWN_VERSION,
)

if TYPE_CHECKING:
    from opentelemetry.sdk.trace import Event, ReadableSpan
    from opentelemetry.trace import Link

    from otel_cloud_trace.core.types import (
        AttributeValue,
        FlatAttributes,
        SourceAttributes,
    )


def sanitise_attribute_value(value: AttributeValue) -> str:
    """Flatten an attribute value into the string Cloud Trace expects.

    Booleans become ``"true"``/``"false"``, bytes are decoded as UTF-8,
    sequences are flattened element-wise and joined with commas, and every
    other scalar goes through ``str``. Floats use Python's shortest
    round-trip repr.

    Args:
        value: Attribute value as set on the OpenTelemetry span.

    Returns:
        str: The flattened value.
    """
    match value:
        case bool():
            return "true" if value else "false"
        case str():
            return value
        case bytes() | bytearray():
            return value.decode(errors="replace")
        case Sequence():
            return ",".join(sanitise_attribute_value(item) for item in value)
        case _:
            return str(value)


def sanitise_attributes(attributes: SourceAttributes | None) -> FlatAttributes:
    """Flatten every value of an attribute mapping."""
    if not attributes:
        return {}
    return {key: sanitise_attribute_value(value) for key, value in attributes.items()}


def nano_epoch_to_zulu(nanos: int) -> str:
    """Render nanoseconds since the epoch as a Cloud Trace timestamp.

    The result is ``YYYY-MM-DDTHH:MM:SS.ffffff`` in UTC with the sub-microsecond
    remainder appended verbatim before the ``Z``, e.g. ``1700000000123456789``
    gives ``2023-11-14T22:13:20.123456789Z``. The remainder is not zero-padded.

    Args:
        nanos: Nanoseconds since the Unix epoch.

    Returns:
        str: The Zulu timestamp.
    """
    seconds, rem = divmod(nanos, NANOS_PER_SECOND)
    micros, nrem = divmod(rem, NANOS_PER_MICROSECOND)

    stamp = datetime.fromtimestamp(seconds, tz=UTC).replace(microsecond=micros)

    return f"{stamp.strftime('%Y-%m-%dT%H:%M:%S.%f')}{nrem}Z"


def convert_status_code(status_code: StatusCode) -> int:
    """Map an OpenTelemetry status code to a ``google.rpc.Code`` value.

    Raises:
        InvalidStatusCodeError: If the code is not OK or ERROR.
    """
    try:
        return STATUS_MAP[status_code]
    except (KeyError, TypeError) as e:
        raise InvalidStatusCodeError(status_code) from e


def rename_attributes(attributes: FlatAttributes) -> FlatAttributes:
    """Rename well-known keys to their Cloud Trace path form."""
    return {ATTRIBUTE_MAP.get(key, key): value for key, value in attributes.items()}


def _dropped_count(attributes: object) -> int:
    # BoundedAttributes tracks its own drops, plain mappings never drop
    return int(getattr(attributes, "dropped", 0) or 0)


class SpanConverter:
    """Stateless converter from ``ReadableSpan`` to ``DestinationSpan``."""

    def convert(self, span: ReadableSpan) -> DestinationSpan:
        """Convert one finished span.

        Args:
            span: Span handed over by the SDK export pipeline.

        Returns:
            DestinationSpan: The Cloud Trace representation.

        Raises:
            InvalidStatusCodeError: If the span status is neither UNSET, OK
                nor ERROR.
        """
        context = span.context
        scope = span.instrumentation_scope
        resource_attributes: Mapping[str, AttributeValue] = (
            span.resource.attributes if span.resource is not None else {}
        )
        scope_attributes = scope.attributes if scope is not None else None

        parent_span_id = None
        if span.parent is not None and span.parent.is_valid:
            parent_span_id = format_span_id(span.parent.span_id)

        status = None
        if span.status.status_code is not StatusCode.UNSET:
            status = SpanStatus(
                code=convert_status_code(span.status.status_code),
                message=span.status.description or "",
            )

        attributes: FlatAttributes = {}

        if scope is not None and scope.name:
            attributes[KEY_AGENT] = f"{scope.name}[{scope.version or UNKNOWN_VERSION}]"

        attributes.update(sanitise_attributes(span.attributes))
        attributes.update(sanitise_attributes(resource_attributes))
        attributes.update(sanitise_attributes(scope_attributes))

        if span.dropped_events > 0:
            attributes[KEY_DROPPED_EVENTS_COUNT] = str(span.dropped_events)

        if span.dropped_links > 0:
            attributes[KEY_DROPPED_LINKS_COUNT] = str(span.dropped_links)

        dropped_attributes = (
            span.dropped_attributes
            + _dropped_count(scope_attributes)
            + _dropped_count(resource_attributes)
        )
        if dropped_attributes > 0:
            attributes[KEY_DROPPED_ATTRIBUTES_COUNT] = str(dropped_attributes)

        return DestinationSpan(
            trace_id=format_trace_id(context.trace_id),
            span_id=format_span_id(context.span_id),
            name=span.name,
            start_time=nano_epoch_to_zulu(span.start_time or 0),
            end_time=nano_epoch_to_zulu(span.end_time or 0),
            parent_span_id=parent_span_id,
            status=status,
            attributes=rename_attributes(attributes),
            time_events=[self.to_annotation(event) for event in span.events],
            links=[self.to_link(link) for link in span.links],
        )

    @staticmethod
    def to_annotation(event: Event) -> Annotation:
        """Convert a span event; its attributes are not merged with the span's."""
        return Annotation(
            description=event.name,
            time=nano_epoch_to_zulu(event.timestamp),
            attributes=sanitise_attributes(event.attributes),
        )

    @staticmethod
    def to_link(link: Link) -> SpanLink:
        """Convert a span link."""
        return SpanLink(
            trace_id=format_trace_id(link.context.trace_id),
            span_id=format_span_id(link.context.span_id),
            attributes=sanitise_attributes(link.attributes),
        )
