"""Type aliases for dynamic data structures.

Request bodies arrive as untyped JSON and are inspected field by field by the
validators before anything is converted to a domain value; these aliases give
that untyped data a name.
"""

from typing import Any

# Any valid JSON value, as decoded from a request body
type JsonValue = (
    dict[str, "JsonValue"] | list["JsonValue"] | str | int | float | bool | None
)

# Decoded JSON object body of a request
type JsonObject = dict[str, JsonValue]

# Context dictionary for logging additional information
type LogContext = dict[str, Any]
