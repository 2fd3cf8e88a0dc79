"""Async store client: engine, session lifecycle and connection checks.

``Database`` owns one async engine and its session factory. The application
factory creates exactly one instance and keeps it on ``app.state``; request
handlers get sessions from it through dependency injection, so no engine
lives at module level.

The engine is created lazily on first use. Creating a client therefore never
touches the network, which lets the application start even when the store is
down.
"""

import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from products_api.core.config import DatabaseConfig
from products_api.core.exceptions import StoreConnectionError
from products_api.infrastructure.database.base import Base

POOL_RECYCLE_SECONDS = 3600  # 1 hour
COMMAND_TIMEOUT_SECONDS = 60


def create_database_engine(config: DatabaseConfig) -> AsyncEngine:
    """Create an async SQLAlchemy engine for the configured store.

    Args:
        config: Database configuration.

    Returns:
        AsyncEngine: Configured async engine instance.
    """
    if config.is_sqlite:
        # SQLite picks its own pool; sizing options do not apply
        engine = create_async_engine(config.database_url, echo=config.echo)
    else:
        engine = create_async_engine(
            config.database_url,
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
            pool_pre_ping=config.pool_pre_ping,
            echo=config.echo,
            pool_recycle=POOL_RECYCLE_SECONDS,
            connect_args={"command_timeout": COMMAND_TIMEOUT_SECONDS},
        )

    logger.info(
        "Created database engine - dialect: {}, pool_size: {}",
        engine.dialect.name,
        None if config.is_sqlite else config.pool_size,
    )

    return engine


class Database:
    """Store client owning the async engine and session factory.

    Args:
        config: Database configuration used to build the engine.
    """

    def __init__(self, config: DatabaseConfig) -> None:
        self.config = config
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._lock = threading.Lock()

    @property
    def engine(self) -> AsyncEngine:
        """The async engine, created on first access."""
        if self._engine is None:
            with self._lock:
                if self._engine is None:
                    self._engine = create_database_engine(self.config)
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """The async session factory, created on first access."""
        if self._session_factory is None:
            with self._lock:
                if self._session_factory is None:
                    self._session_factory = async_sessionmaker(
                        self.engine,
                        class_=AsyncSession,
                        expire_on_commit=False,
                    )
                    logger.debug("Created async session factory")
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """Open a session that commits on success and rolls back on error.

        Yields:
            AsyncGenerator[AsyncSession]: Database session for performing operations.

        Example:
            async with database.session() as session:
                result = await session.execute(select(Product))
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                logger.debug("Database session rolled back due to error")
                raise

    async def connect(self) -> None:
        """Verify the store answers and create any missing tables.

        Raises:
            StoreConnectionError: If the store cannot be reached or the schema
                cannot be synchronized.
        """
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            raise StoreConnectionError(str(e), cause=e) from e

    async def ping(self) -> tuple[bool, str | None]:
        """Check if the store is reachable.

        Returns:
            tuple[bool, str | None]: Whether the store answered, and the error
                message when it did not.
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            return False, str(e)
        else:
            return True, None

    async def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
            self._engine = None
            self._session_factory = None
