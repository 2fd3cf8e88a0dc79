"""Error response schemas.

Three shapes reach clients:

- **ValidationErrorResponse** (400): ``{"errors": [violation, ...]}``
- **NotFoundResponse** (404): ``{"error": "Producto no econtrado."}``
- **ServerErrorResponse** (500 and other unexpected failures)

They are used both to build the responses and to document them in the
OpenAPI schema.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


class ViolationSchema(BaseModel):
    """A field-level validation failure."""

    type: Literal["field"] = Field(default="field", description="Kind of violation")
    value: Any = Field(
        default=None,
        description="The rejected value (absent when the field was missing)",
        examples=["hola"],
    )
    msg: str = Field(
        ...,
        description="Human-readable message",
        examples=["El precio debe ser mayor a 0"],
    )
    path: str = Field(..., description="Name of the field", examples=["price"])
    location: Literal["params", "body"] = Field(
        ..., description="Where the field was read from", examples=["body"]
    )


class ValidationErrorResponse(BaseModel):
    """Every violation found in a request."""

    errors: list[ViolationSchema] = Field(..., description="Violations, in order")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "errors": [
                        {
                            "type": "field",
                            "value": "not-valid-url",
                            "msg": "El ID no es válido",
                            "path": "id",
                            "location": "params",
                        }
                    ]
                }
            ]
        }
    }


class NotFoundResponse(BaseModel):
    """The requested product does not exist."""

    error: str = Field(..., examples=["Producto no econtrado."])


class ServerErrorResponse(BaseModel):
    """Unexpected failure while serving the request."""

    error: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Error interno del servidor."],
    )
    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for tracing and debugging",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )
    detail: dict[str, Any] | None = Field(
        default=None,
        description="Exception type and message (omitted in production)",
        examples=[{"type": "OperationalError", "message": "connection refused"}],
    )
