"""Cloud Trace side of the span mapping.

These Pydantic models hold converted spans between the converter and the
ingestion client. Every attribute value is already a string and every
timestamp is already rendered in Zulu form. Optional parts of a span
(parent, status) are ``None`` when absent.

Models dump with camelCase aliases, the spelling used by the Cloud Trace
REST API, which keeps debug output recognisable next to API documentation.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from otel_cloud_trace.core.types import FlatAttributes

PLACEHOLDER_ID = "-"


class _CloudTraceModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class SpanStatus(_CloudTraceModel):
    """Span outcome as a ``google.rpc.Code`` plus message."""

    code: int = Field(..., description="google.rpc.Code value")
    message: str = Field(default="", description="Status description")


class Annotation(_CloudTraceModel):
    """A timestamped annotation, converted from a span event."""

    description: str = Field(..., description="Event name")
    time: str = Field(..., description="Event time in Zulu form")
    attributes: FlatAttributes = Field(default_factory=dict)


class SpanLink(_CloudTraceModel):
    """A pointer from one span to another."""

    trace_id: str = Field(..., description="Linked trace id, 32 hex digits")
    span_id: str = Field(..., description="Linked span id, 16 hex digits")
    attributes: FlatAttributes = Field(default_factory=dict)


class DestinationSpan(_CloudTraceModel):
    """A span in the Cloud Trace model."""

    trace_id: str = Field(..., description="Trace id, 32 hex digits")
    span_id: str = Field(..., description="Span id, 16 hex digits")
    name: str = Field(..., description="Span display name")
    start_time: str = Field(..., description="Start time in Zulu form")
    end_time: str = Field(..., description="End time in Zulu form")
    parent_span_id: str | None = Field(
        default=None, description="Parent span id, only for valid parents"
    )
    status: SpanStatus | None = Field(
        default=None, description="Only set when the source status is not UNSET"
    )
    attributes: FlatAttributes = Field(default_factory=dict)
    time_events: list[Annotation] = Field(default_factory=list)
    links: list[SpanLink] = Field(default_factory=list)


class TraceEnvelope(_CloudTraceModel):
    """Submission envelope handed to the ingestion client.

    Project and trace ids are placeholders: the project comes from the
    client's own configuration and every span carries its real trace id.
    """

    project_id: str = Field(default=PLACEHOLDER_ID)
    trace_id: str = Field(default=PLACEHOLDER_ID)
    spans: list[DestinationSpan] = Field(default_factory=list)
