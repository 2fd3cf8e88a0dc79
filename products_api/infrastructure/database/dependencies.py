"""FastAPI dependency injection for database sessions.

Sessions come from the ``Database`` store client kept on ``app.state`` by the
application factory, so every request uses the client its application owns.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from products_api.infrastructure.database.session import Database


def get_database(request: Request) -> Database:
    """Return the store client owned by the application serving the request."""
    database: Database = request.app.state.database
    return database


async def get_db(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncGenerator[AsyncSession]:
    """Provide a database session for the duration of a request.

    Anything still pending is committed when the handler succeeds and rolled
    back when it raises. Catalog writes commit themselves before the response
    is built, since this teardown may run after the response is sent.

    Yields:
        AsyncGenerator[AsyncSession]: An async SQLAlchemy session.
    """
    async with database.session() as session:
        yield session


# Type alias for cleaner dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
