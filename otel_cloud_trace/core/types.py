"""Type aliases for the dynamic data handled by the exporter.

OpenTelemetry attribute values are loosely typed at runtime. These aliases
name the closed set of shapes the converter accepts so that static type
checkers can catch misuse.
"""

from collections.abc import Mapping, Sequence
from typing import Any, TypeAlias

# Scalar attribute value accepted by the OpenTelemetry API
AttributeScalar: TypeAlias = str | bool | int | float

# Attribute value: a scalar or a homogeneous sequence of scalars
AttributeValue: TypeAlias = AttributeScalar | Sequence[AttributeScalar]

# Read-only attribute mapping as exposed by the SDK (BoundedAttributes, dict)
SourceAttributes: TypeAlias = Mapping[str, AttributeValue]

# Flattened Cloud Trace attributes, all values are strings
FlatAttributes: TypeAlias = dict[str, str]

# Context dictionary for error details and debugging information
ErrorContext: TypeAlias = dict[str, Any]
