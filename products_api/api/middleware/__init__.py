"""Middleware for cross-cutting request/response concerns.

- **OriginGateMiddleware**: refuses cross-origin requests from foreign origins
- **RequestContextMiddleware**: manages correlation IDs and request context
- **RequestLoggingMiddleware**: request logging with timing
- **error_handler**: maps exceptions to JSON error responses

The origin gate runs first, then request context, then request logging.
"""
