"""Main entry point for running the Products REST API."""

import uvicorn
from loguru import logger

from products_api.api.main import app
from products_api.core.config import get_settings
from products_api.core.logging import setup_logging

# Route uvicorn's own loggers through loguru
UVICORN_LOG_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "default": {
            "class": "products_api.core.logging.InterceptHandler",
        },
    },
    "loggers": {
        "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
        "uvicorn.error": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "uvicorn.access": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
    },
}


def main() -> None:
    """Start the HTTP listener on the configured port."""
    settings = get_settings()
    setup_logging(settings)

    logger.info("REST API en el puerto {}", settings.port)

    # Reload needs the app as an import string
    if settings.debug:
        uvicorn.run(
            "products_api.api.main:app",
            host=settings.api_host,
            port=settings.port,
            reload=True,
            log_config=UVICORN_LOG_CONFIG,
        )
    else:
        uvicorn.run(
            app,
            host=settings.api_host,
            port=settings.port,
            reload=False,
            log_config=UVICORN_LOG_CONFIG,
        )


if __name__ == "__main__":
    main()
