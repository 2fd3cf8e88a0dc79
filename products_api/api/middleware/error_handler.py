"""Global exception handlers for the FastAPI application.

Maps every error category to its response shape:

- ``RequestValidationFailed``: 400 ``{"errors": [...]}``
- ``NotFoundError``: 404 ``{"error": message}``
- ``HTTPException`` (unknown route, wrong method): its status with
  ``{"error": detail}``
- anything else: 500 ``ServerErrorResponse``, logged with its traceback
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from products_api.api.schemas.errors import ServerErrorResponse
from products_api.api.utils.responses import ORJSONResponse
from products_api.core.config import Settings
from products_api.core.context import RequestContext
from products_api.core.exceptions import (
    NotFoundError,
    ProductsAPIError,
    RequestValidationFailed,
)

SERVER_ERROR_MESSAGE = "Error interno del servidor."


def _server_error(request: Request, exc: Exception) -> Response:
    """Build the generic 500 response for an unexpected exception.

    The exception is only described outside production, judged by the
    settings of the application serving the request.
    """
    settings: Settings = request.app.state.settings
    detail = None
    if settings.environment != "production":
        detail = {"type": type(exc).__name__, "message": str(exc)}

    error_response = ServerErrorResponse(
        error=SERVER_ERROR_MESSAGE,
        correlation_id=RequestContext.get_correlation_id(),
        detail=detail,
    )
    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(mode="json", exclude_none=True),
    )


async def products_api_error_handler(request: Request, exc: Exception) -> Response:
    """Handle ProductsAPIError exceptions.

    Args:
        request: The FastAPI request that caused the exception
        exc: The ProductsAPIError exception to handle

    Returns:
        Response: ORJSONResponse with the body for the error category

    Raises:
        TypeError: If exc is not a ProductsAPIError instance
    """
    if not isinstance(exc, ProductsAPIError):
        raise TypeError(f"Expected ProductsAPIError, got {type(exc).__name__}")

    if isinstance(exc, RequestValidationFailed):
        logger.info(
            "Request validation failed with {} violation(s)",
            len(exc.violations),
            method=request.method,
            path=request.url.path,
            fields=[v.path for v in exc.violations],
        )
        return ORJSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"errors": [v.to_dict() for v in exc.violations]},
        )

    if isinstance(exc, NotFoundError):
        logger.info(
            "Resource not found",
            method=request.method,
            path=request.url.path,
            **exc.context,
        )
        return ORJSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": exc.message},
        )

    logger.opt(exception=exc).error(
        "Handling {}: {}",
        type(exc).__name__,
        exc.message,
        error_code=exc.error_code,
        severity=exc.severity.value,
    )
    return _server_error(request, exc)


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle Starlette HTTPException.

    Args:
        request: The FastAPI request that caused the exception
        exc: The HTTPException to handle

    Returns:
        Response: ORJSONResponse with the exception's status and detail

    Raises:
        TypeError: If exc is not an HTTPException instance
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    logger.info(
        "HTTP exception",
        status=exc.status_code,
        method=request.method,
        path=request.url.path,
    )

    return ORJSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=exc.headers,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle any exception no other handler claimed.

    Args:
        request: The FastAPI request that caused the exception
        exc: The unhandled exception

    Returns:
        Response: ORJSONResponse with a 500 status and generic message
    """
    logger.opt(exception=exc).error(
        "Unhandled exception: {}",
        type(exc).__name__,
        method=request.method,
        path=request.url.path,
    )
    return _server_error(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(ProductsAPIError, products_api_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
