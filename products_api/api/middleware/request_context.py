"""Correlation id middleware.

Every request gets a correlation id, taken from the ``X-Correlation-ID``
request header when the caller sends one. The id is stored in the request
context, bound to every log line written while the request is served, and
echoed back in the response headers.
"""

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from products_api.api.constants import CORRELATION_ID_HEADER
from products_api.core.context import RequestContext, generate_correlation_id


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Attach a correlation id to the request, its logs and its response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process the request with context management.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint.

        Returns:
            Response: Response with correlation ID header.
        """
        correlation_id = (
            request.headers.get(CORRELATION_ID_HEADER) or generate_correlation_id()
        )

        RequestContext.set_correlation_id(correlation_id)

        # contextualize scopes the binding to this request only
        with logger.contextualize(correlation_id=correlation_id):
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            return response
