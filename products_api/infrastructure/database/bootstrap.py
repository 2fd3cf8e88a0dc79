"""Startup connection to the relational store.

The bootstrap fails open: when the store cannot be reached it logs a
diagnostic and reports the failure as a ``ConnectionStatus`` instead of
raising, so the HTTP listener still starts. Health probes and requests that
are rejected by validation keep working; requests that need the store fail
when they reach it.
"""

from dataclasses import dataclass

from loguru import logger

from products_api.core.exceptions import StoreConnectionError
from products_api.infrastructure.database.session import Database

CONNECTION_FAILED_MESSAGE = "Hubo un error al conectar la Base de Datos."


@dataclass(frozen=True)
class ConnectionStatus:
    """Outcome of the startup connection attempt."""

    connected: bool
    error: str | None = None


async def bootstrap_database(database: Database) -> ConnectionStatus:
    """Connect to the store and synchronize the schema without ever raising.

    Args:
        database: The store client to connect.

    Returns:
        ConnectionStatus: ``connected=True`` on success, otherwise the error
            that prevented the connection.
    """
    try:
        await database.connect()
    except StoreConnectionError as e:
        logger.error("{} {}", CONNECTION_FAILED_MESSAGE, e.message)
        return ConnectionStatus(connected=False, error=e.message)

    logger.info("Database connection successful")
    return ConnectionStatus(connected=True)
