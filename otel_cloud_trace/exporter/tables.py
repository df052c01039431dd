"""Static lookup tables shared by the span converter.

The tables are data only and read-only, so they can be versioned
independently of the conversion logic. ``ATTRIBUTE_MAP`` targets the HTTP
semantic conventions; changing it changes the keys Cloud Trace receives.
"""

from types import MappingProxyType
from typing import Final

from google.rpc import code_pb2
from opentelemetry.trace import StatusCode

KEY_DROPPED_ATTRIBUTES_COUNT: Final[str] = "otel.dropped_attributes_count"
KEY_DROPPED_EVENTS_COUNT: Final[str] = "otel.dropped_events_count"
KEY_DROPPED_LINKS_COUNT: Final[str] = "otel.dropped_links_count"
KEY_AGENT: Final[str] = "g.co/agent"

UNKNOWN_VERSION: Final[str] = "UNKNOWN"

STATUS_MAP: Final[MappingProxyType[StatusCode, int]] = MappingProxyType(
    {
        StatusCode.OK: code_pb2.OK,
        StatusCode.ERROR: code_pb2.UNKNOWN,
    }
)

ATTRIBUTE_MAP: Final[MappingProxyType[str, str]] = MappingProxyType(
    {
        "http.scheme": "/http/client_protocol",
        "http.method": "/http/method",
        "http.request_content_length": "/http/request/size",
        "http.response_content_length": "/http/response/size",
        "http.route": "/http/route",
        "http.response.status_code": "/http/status_code",
        "http.url": "/http/url",
        "http.user_agent": "/http/user_agent",
        "http.host": "/http/host",
    }
)
