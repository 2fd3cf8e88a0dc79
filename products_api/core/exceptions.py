"""Exception hierarchy for the Products API.

Every error the application raises on purpose derives from
``ProductsAPIError``, which carries a stable error code and a severity. The
API layer maps each concrete type to its HTTP response:

- **RequestValidationFailed**: one or more field violations, HTTP 400
- **NotFoundError**: the requested product does not exist, HTTP 404
- **StoreConnectionError**: the relational store could not be reached. It is
  raised by the store client and absorbed by the startup bootstrap, so it
  never reaches a client.

Anything else escaping a handler is an unexpected failure and becomes a
generic HTTP 500.
"""

from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from products_api.api.validation import Violation


NOT_FOUND_MESSAGE = "Producto no econtrado."


class ErrorCode(Enum):
    """Standardized error codes for the Products API."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Input validation failed due to invalid or malformed data."""

    NOT_FOUND = "NOT_FOUND"
    """The requested resource could not be found."""

    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    """The relational store could not be reached."""


class Severity(Enum):
    """Severity levels used to pick the log level of an error."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ProductsAPIError(Exception):
    """Base exception class for all application exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    @property
    def is_expected(self) -> bool:
        """Whether the error is part of normal operation (LOW or MEDIUM severity)."""
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    def __str__(self) -> str:
        """Return the error code and message."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return a detailed representation of the exception."""
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class RequestValidationFailed(ProductsAPIError):
    """Raised when one or more field validators reject a request.

    Args:
        violations: Every violation collected for the request, in the order
            the route declares its validators.
    """

    def __init__(self, violations: Sequence["Violation"]) -> None:
        self.violations = list(violations)
        super().__init__(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            Severity.LOW,
            {"violations": len(self.violations)},
        )


class NotFoundError(ProductsAPIError):
    """Raised when a product with the requested id does not exist.

    Args:
        message: Message returned to the client
        context: Additional context information about the error
    """

    def __init__(
        self,
        message: str = NOT_FOUND_MESSAGE,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(ErrorCode.NOT_FOUND, message, Severity.LOW, context)


class StoreConnectionError(ProductsAPIError):
    """Raised when the relational store cannot be reached or verified.

    Args:
        message: Description of the failure
        cause: The driver or SQLAlchemy exception behind the failure
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(
            ErrorCode.STORE_UNAVAILABLE, message, Severity.HIGH, cause=cause
        )
