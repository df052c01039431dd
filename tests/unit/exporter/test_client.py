"""Unit tests for the Cloud Trace ingestion client adapter."""

import pytest
from google.api_core import exceptions as core_exceptions
from google.cloud import trace_v2
from google.rpc import code_pb2
from pytest_mock import MockerFixture, MockType

from otel_cloud_trace.core.constants import NANOS_PER_SECOND
from otel_cloud_trace.exporter.client import CloudTraceClient, to_proto_span
from otel_cloud_trace.exporter.converter import nano_epoch_to_zulu
from otel_cloud_trace.exporter.models import (
    Annotation,
    DestinationSpan,
    SpanLink,
    SpanStatus,
    TraceEnvelope,
)

TRACE_ID = "0123456789abcdef0123456789abcdef"
SPAN_ID = "0123456789abcdef"


@pytest.fixture
def destination_span() -> DestinationSpan:
    """Provide a fully populated converted span."""
    return DestinationSpan(
        trace_id=TRACE_ID,
        span_id=SPAN_ID,
        name="GET /users",
        start_time="2023-11-14T22:13:20.123456789Z",
        end_time="2023-11-14T22:13:21.000000500Z",
        parent_span_id="fedcba9876543210",
        status=SpanStatus(code=code_pb2.UNKNOWN, message="boom"),
        attributes={"/http/method": "GET", "g.co/agent": "lib[1.0]"},
        time_events=[
            Annotation(
                description="cache.miss",
                time="2023-11-14T22:13:20.500000123Z",
                attributes={"cache.hit": "false"},
            )
        ],
        links=[
            SpanLink(
                trace_id="00000000000000000000000000abcdef",
                span_id="0000000000001234",
                attributes={"link.reason": "retry"},
            )
        ],
    )


@pytest.fixture
def mock_service(mocker: MockerFixture) -> MockType:
    """Provide a TraceServiceClient double."""
    return mocker.Mock(spec=trace_v2.TraceServiceClient)


@pytest.mark.unit
class TestToProtoSpan:
    """Test rendering of converted spans as Cloud Trace v2 messages."""

    def test_sets_resource_name_and_ids(
        self, destination_span: DestinationSpan
    ) -> None:
        """Test the span resource name embeds project, trace and span ids."""
        span = to_proto_span("my-project", destination_span)

        assert span.name == (
            f"projects/my-project/traces/{TRACE_ID}/spans/{SPAN_ID}"
        )
        assert span.span_id == SPAN_ID
        assert span.parent_span_id == "fedcba9876543210"
        assert span.display_name.value == "GET /users"

    def test_keeps_nanosecond_timestamps(
        self, destination_span: DestinationSpan
    ) -> None:
        """Test Zulu strings are parsed down to the nanosecond."""
        span = to_proto_span("my-project", destination_span)
        start = trace_v2.Span.pb(span).start_time

        assert start.seconds == 1_700_000_000
        assert start.nanos == 123_456_789

    @pytest.mark.parametrize(
        "nanos",
        [
            1_700_000_000_000_001_005,
            1_700_000_000_000_000_001,
            1_700_000_000_000_001_099,
            1_700_000_000_999_999_999,
            1_700_000_000_000_000_000,
        ],
    )
    def test_short_nanosecond_remainder_is_not_scaled(
        self, destination_span: DestinationSpan, nanos: int
    ) -> None:
        """Test converter timestamps map back to the exact epoch nanoseconds."""
        span = destination_span.model_copy(
            update={"start_time": nano_epoch_to_zulu(nanos)}
        )

        start = trace_v2.Span.pb(to_proto_span("my-project", span)).start_time

        assert start.seconds * NANOS_PER_SECOND + start.nanos == nanos

    def test_short_remainder_keeps_start_before_end(
        self, destination_span: DestinationSpan
    ) -> None:
        """Test a remainder below 100 ns does not reorder start and end."""
        span = destination_span.model_copy(
            update={
                "start_time": nano_epoch_to_zulu(1_700_000_000_000_001_005),
                "end_time": nano_epoch_to_zulu(1_700_000_000_000_001_200),
            }
        )

        message = trace_v2.Span.pb(to_proto_span("my-project", span))

        assert message.start_time.nanos == 1_005
        assert message.end_time.nanos == 1_200

    def test_copies_attributes_status_events_and_links(
        self, destination_span: DestinationSpan
    ) -> None:
        """Test nested parts are rendered as string attribute values."""
        span = to_proto_span("my-project", destination_span)

        attribute_map = span.attributes.attribute_map
        assert attribute_map["/http/method"].string_value.value == "GET"
        assert span.status.code == code_pb2.UNKNOWN
        assert span.status.message == "boom"

        annotation = span.time_events.time_event[0].annotation
        assert annotation.description.value == "cache.miss"
        assert annotation.attributes.attribute_map["cache.hit"].string_value.value == (
            "false"
        )

        link = span.links.link[0]
        assert link.trace_id == "00000000000000000000000000abcdef"
        assert link.span_id == "0000000000001234"

    def test_omits_optional_parts(self, destination_span: DestinationSpan) -> None:
        """Test a span without parent and status leaves both unset."""
        bare = destination_span.model_copy(
            update={"parent_span_id": None, "status": None}
        )

        pb = trace_v2.Span.pb(to_proto_span("my-project", bare))

        assert pb.parent_span_id == ""
        assert not pb.HasField("status")


@pytest.mark.unit
class TestCloudTraceClient:
    """Test batch submission through TraceServiceClient."""

    def test_insert_writes_batch(
        self, mock_service: MockType, destination_span: DestinationSpan
    ) -> None:
        """Test one batch_write_spans call with the configured project."""
        client = CloudTraceClient("my-project", timeout=30, client=mock_service)

        result = client.insert(TraceEnvelope(spans=[destination_span]))

        assert result is True
        mock_service.batch_write_spans.assert_called_once()
        kwargs = mock_service.batch_write_spans.call_args.kwargs
        assert kwargs["name"] == "projects/my-project"
        assert kwargs["timeout"] == 30
        assert len(kwargs["spans"]) == 1
        assert kwargs["spans"][0].name.startswith("projects/my-project/traces/")

    def test_insert_empty_envelope(self, mock_service: MockType) -> None:
        """Test an empty envelope is still written."""
        client = CloudTraceClient("my-project", timeout=5, client=mock_service)

        assert client.insert(TraceEnvelope()) is True

        assert mock_service.batch_write_spans.call_args.kwargs["spans"] == []

    def test_explicit_envelope_project_wins(
        self, mock_service: MockType, destination_span: DestinationSpan
    ) -> None:
        """Test a non-placeholder project id on the envelope is honored."""
        client = CloudTraceClient("my-project", timeout=30, client=mock_service)

        client.insert(TraceEnvelope(project_id="other", spans=[destination_span]))

        kwargs = mock_service.batch_write_spans.call_args.kwargs
        assert kwargs["name"] == "projects/other"

    @pytest.mark.parametrize(
        "error",
        [
            core_exceptions.PermissionDenied("denied"),
            core_exceptions.ServiceUnavailable("down"),
            core_exceptions.RetryError("gave up", cause=None),
        ],
    )
    def test_insert_reports_api_errors_as_false(
        self,
        mocker: MockerFixture,
        mock_service: MockType,
        destination_span: DestinationSpan,
        error: Exception,
    ) -> None:
        """Test API failures become a False result and are logged."""
        mock_logger = mocker.patch("otel_cloud_trace.exporter.client.logger")
        mock_service.batch_write_spans.side_effect = error
        client = CloudTraceClient("my-project", timeout=30, client=mock_service)

        assert client.insert(TraceEnvelope(spans=[destination_span])) is False

        mock_logger.exception.assert_called_once()
        assert mock_logger.exception.call_args.kwargs["span_count"] == 1

    def test_other_errors_propagate(self, mock_service: MockType) -> None:
        """Test non-API errors are not swallowed."""
        mock_service.batch_write_spans.side_effect = RuntimeError("bug")
        client = CloudTraceClient("my-project", timeout=30, client=mock_service)

        with pytest.raises(RuntimeError, match="bug"):
            client.insert(TraceEnvelope())

    def test_builds_default_service_client(self, mocker: MockerFixture) -> None:
        """Test a TraceServiceClient is created when none is injected."""
        mock_cls = mocker.patch(
            "otel_cloud_trace.exporter.client.trace_v2.TraceServiceClient"
        )

        client = CloudTraceClient("my-project", timeout=30)
        client.insert(TraceEnvelope())

        mock_cls.assert_called_once_with()
        mock_cls.return_value.batch_write_spans.assert_called_once()
