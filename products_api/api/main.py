"""FastAPI application initialization and configuration module.

This module builds the Products REST API. It handles:
- Application lifecycle (store bootstrap on startup, engine disposal on shutdown)
- Middleware registration in the correct order
- Exception handler registration
- Product routes, API documentation and the health endpoint

Middleware are executed in reverse order of registration, so the origin gate,
registered last, is the first to see every request.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from products_api.api.constants import PRODUCTS_TAG
from products_api.api.middleware.error_handler import register_exception_handlers
from products_api.api.middleware.origin_gate import OriginGateMiddleware
from products_api.api.middleware.request_context import RequestContextMiddleware
from products_api.api.middleware.request_logging import RequestLoggingMiddleware
from products_api.api.routers.products import router as products_router
from products_api.api.utils.responses import ORJSONResponse
from products_api.core.config import Settings, get_settings
from products_api.core.logging import setup_logging
from products_api.infrastructure.database import Database, bootstrap_database

OPENAPI_TAGS = [
    {"name": PRODUCTS_TAG, "description": "API operations related to products."},
]


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    The store bootstrap never raises, so the application starts even when the
    database is unreachable.

    Args:
        app_instance: The FastAPI application instance.

    Yields:
        None: Nothing is yielded, this is just a lifespan context.
    """
    database: Database = app_instance.state.database
    app_instance.state.database_status = await bootstrap_database(database)

    logger.info(
        "Application startup complete - {} v{}",
        app_instance.title,
        app_instance.version,
    )

    yield

    logger.info("Application shutdown initiated")
    await database.close()
    logger.info("Application shutdown complete")


def create_app(
    settings: Settings | None = None, database: Database | None = None
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().
        database: Optional store client. If not provided, one is built from
            ``settings.database_config``.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    # Setup logging first
    setup_logging(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=settings.docs_url,
        redoc_url=None,
        openapi_url=settings.openapi_url,
        openapi_tags=OPENAPI_TAGS,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.state.database = database or Database(settings.database_config)
    application.state.database_status = None

    # Register exception handlers BEFORE middleware
    register_exception_handlers(application)

    # 4. CORS headers for the allowed frontend
    allowed_origins = [settings.frontend_url] if settings.frontend_url else []
    application.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 3. Request logging middleware (logs requests/responses)
    application.add_middleware(RequestLoggingMiddleware, log_config=settings.log_config)

    # 2. Request context middleware (creates correlation ID)
    application.add_middleware(RequestContextMiddleware)

    # 1. Origin gate (rejects foreign origins before anything else runs)
    application.add_middleware(
        OriginGateMiddleware, allowed_origin=settings.frontend_url
    )

    application.include_router(products_router)

    @application.get("/health", include_in_schema=False)
    async def health() -> dict[str, object]:
        """Health check endpoint for monitoring and container orchestration.

        Returns:
            dict[str, object]: A dictionary with status and database connectivity.
        """
        is_healthy, error_msg = await application.state.database.ping()

        if not is_healthy:
            # Report degraded rather than failing the probe
            logger.warning("Database health check failed: {}", error_msg)
            return {"status": "degraded", "database": False}

        return {"status": "healthy", "database": True}

    return application


app = create_app()
