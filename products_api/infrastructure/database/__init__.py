"""Database access with async SQLAlchemy and the repository pattern.

Core components:
- **base**: Declarative base and common model fields
- **models**: The ``Product`` table
- **session**: The ``Database`` store client (engine, sessions, checks)
- **bootstrap**: Fail-open startup connection and schema sync
- **repository**: Generic and product repositories
- **dependencies**: FastAPI dependency injection helpers
"""

from products_api.infrastructure.database.base import Base, BaseModel
from products_api.infrastructure.database.bootstrap import (
    ConnectionStatus,
    bootstrap_database,
)
from products_api.infrastructure.database.dependencies import (
    DatabaseSession,
    get_database,
    get_db,
)
from products_api.infrastructure.database.models import Product
from products_api.infrastructure.database.repository import (
    BaseRepository,
    ProductRepository,
)
from products_api.infrastructure.database.session import (
    Database,
    create_database_engine,
)

__all__ = [
    "Base",
    "BaseModel",
    "BaseRepository",
    "ConnectionStatus",
    "Database",
    "DatabaseSession",
    "Product",
    "ProductRepository",
    "bootstrap_database",
    "create_database_engine",
    "get_database",
    "get_db",
]
