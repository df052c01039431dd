"""Shared fixtures for unit tests."""

from collections.abc import Callable
from typing import Any

import pytest
from opentelemetry.sdk.trace import Event
from opentelemetry.sdk.util.instrumentation import InstrumentationScope
from opentelemetry.trace import Link, SpanContext, Status, StatusCode, TraceFlags
from pytest_mock import MockerFixture, MockType

TRACE_ID = 0x0123456789ABCDEF0123456789ABCDEF
SPAN_ID = 0x0123456789ABCDEF
PARENT_SPAN_ID = 0xFEDCBA9876543210
START_TIME = 1_700_000_000_123_456_789
END_TIME = 1_700_000_001_000_000_500


def make_context(
    trace_id: int = TRACE_ID, span_id: int = SPAN_ID, *, remote: bool = False
) -> SpanContext:
    """Build a sampled span context."""
    return SpanContext(
        trace_id=trace_id,
        span_id=span_id,
        is_remote=remote,
        trace_flags=TraceFlags(TraceFlags.SAMPLED),
    )


@pytest.fixture
def make_span(mocker: MockerFixture) -> Callable[..., MockType]:
    """Provide a factory for ReadableSpan doubles.

    Every property the converter reads is set explicitly; keyword arguments
    override the defaults.

    Args:
        mocker: Pytest mocker fixture.

    Returns:
        Callable[..., MockType]: Span factory.
    """

    def factory(**overrides: Any) -> MockType:
        resource = mocker.Mock()
        resource.attributes = overrides.pop("resource_attributes", {})

        span = mocker.Mock()
        span.name = "GET /users"
        span.context = make_context()
        span.parent = make_context(span_id=PARENT_SPAN_ID, remote=True)
        span.start_time = START_TIME
        span.end_time = END_TIME
        span.status = Status(StatusCode.UNSET)
        span.attributes = {}
        span.resource = resource
        span.instrumentation_scope = InstrumentationScope("test.library", "1.2.3")
        span.events = ()
        span.links = ()
        span.dropped_attributes = 0
        span.dropped_events = 0
        span.dropped_links = 0

        for key, value in overrides.items():
            setattr(span, key, value)
        return span

    return factory


@pytest.fixture
def sample_event() -> Event:
    """Provide a span event with attributes."""
    return Event(
        name="cache.miss",
        attributes={"cache.key": "user:42", "cache.hit": False},
        timestamp=1_700_000_000_500_000_123,
    )


@pytest.fixture
def sample_link() -> Link:
    """Provide a link to another trace."""
    return Link(
        make_context(trace_id=0xABCDEF, span_id=0x1234),
        attributes={"link.reason": "retry", "attempt": 2},
    )
