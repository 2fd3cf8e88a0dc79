"""Single-origin gate for cross-origin requests.

Browsers attach an ``Origin`` header to cross-origin requests. Only the
configured frontend origin may make such requests; any other origin is
refused with a bare 403 before the request reaches routing. Requests with no
``Origin`` header (server-to-server calls, health probes, curl) are not
cross-origin and pass through.

CORS response headers for the allowed origin are added by Starlette's
``CORSMiddleware``, installed inside this gate.
"""

from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp

ORIGIN_REJECTED_MESSAGE = "CORS Error"


def is_origin_allowed(origin: str, allowed_origin: str | None) -> bool:
    """Decide whether a cross-origin request may proceed.

    Args:
        origin: Value of the request's ``Origin`` header.
        allowed_origin: The configured frontend origin, if any.

    Returns:
        bool: True only when an origin is configured and matches exactly.
    """
    return allowed_origin is not None and origin == allowed_origin


class OriginGateMiddleware(BaseHTTPMiddleware):
    """Reject cross-origin requests from any origin but the allowed one.

    Args:
        app: The ASGI application to wrap.
        allowed_origin: The only origin allowed to make cross-origin requests.
    """

    def __init__(self, app: ASGIApp, *, allowed_origin: str | None) -> None:
        super().__init__(app)
        self.allowed_origin = allowed_origin

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Refuse the request if its origin is not allowed.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or route handler.

        Returns:
            Response: A plain-text 403 for refused origins, otherwise the
                downstream response.
        """
        origin = request.headers.get("origin")
        if origin is not None and not is_origin_allowed(origin, self.allowed_origin):
            logger.warning(
                "Rejected cross-origin request",
                origin=origin,
                method=request.method,
                path=request.url.path,
            )
            return PlainTextResponse(ORIGIN_REJECTED_MESSAGE, status_code=403)

        return await call_next(request)
