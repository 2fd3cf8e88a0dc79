"""Repositories: the only code that issues queries against the store.

``BaseRepository`` holds the id-based primitives every table needs.
``ProductRepository`` adds the catalog operations the product handlers
perform, so handlers never touch column names directly.

The base primitives only flush. The catalog operations commit before they
return, so a write is durable before the handler builds its response.
"""

from collections.abc import Mapping

from loguru import logger
from sqlalchemy import delete as sql_delete
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from products_api.infrastructure.database.base import BaseModel
from products_api.infrastructure.database.models import Product

# Primary keys are signed 64-bit integers on every supported store
ID_MIN = -(2**63)
ID_MAX = 2**63 - 1


class BaseRepository[T: BaseModel]:
    """Id-based access to one mapped table.

    Args:
        session: The request's async session.
        model_class: The mapped class whose table is queried.
    """

    def __init__(self, session: AsyncSession, model_class: type[T]) -> None:
        self.session = session
        self.model_class = model_class

    @property
    def _name(self) -> str:
        return self.model_class.__name__

    async def get_by_id(self, entity_id: int) -> T | None:
        """Look up a row by primary key.

        Args:
            entity_id: Primary key to look for.

        Returns:
            T | None: The row, or None when no row has that id.
        """
        if not ID_MIN <= entity_id <= ID_MAX:
            logger.debug("{} id {} is out of range", self._name, entity_id)
            return None

        stmt = select(self.model_class).where(self.model_class.id == entity_id)
        instance = (await self.session.execute(stmt)).scalar_one_or_none()

        logger.debug(
            "{} {} {}", self._name, entity_id, "found" if instance else "not found"
        )
        return instance

    async def get_all(self) -> list[T]:
        """Every row of the table, lowest id first."""
        stmt = select(self.model_class).order_by(self.model_class.id)
        instances = list((await self.session.execute(stmt)).scalars().all())

        logger.debug("Loaded {} {} rows", len(instances), self._name)
        return instances

    async def create(self, obj: T) -> T:
        """Insert a new row and load its store-generated columns.

        Args:
            obj: Transient instance to insert.

        Returns:
            T: The same instance, now carrying its id and timestamps.
        """
        self.session.add(obj)
        await self.session.flush()
        await self.session.refresh(obj)

        logger.info("Inserted {} {}", self._name, obj.id)
        return obj

    async def update(self, instance: T, data: Mapping[str, object]) -> T:
        """Write new column values to a loaded row.

        Keys that are not attributes of the model are skipped with a warning.

        Args:
            instance: Row previously loaded through this session.
            data: Column names mapped to their new values.

        Returns:
            T: The row reloaded after the write, so ``updated_at`` is current.
        """
        for key, value in data.items():
            if not hasattr(instance, key):
                logger.warning("{} has no column '{}', skipping", self._name, key)
                continue
            setattr(instance, key, value)

        await self.session.flush()
        await self.session.refresh(instance)

        logger.info("Updated {} {} ({})", self._name, instance.id, ", ".join(data))
        return instance

    async def delete(self, entity_id: int) -> bool:
        """Delete a row by primary key.

        Returns:
            bool: Whether a row was removed.
        """
        if not ID_MIN <= entity_id <= ID_MAX:
            return False

        stmt = sql_delete(self.model_class).where(self.model_class.id == entity_id)
        deleted = bool((await self.session.execute(stmt)).rowcount)

        if deleted:
            logger.info("Deleted {} {}", self._name, entity_id)
        return deleted

    async def commit(self) -> None:
        """Make the pending writes of the session durable."""
        await self.session.commit()


class ProductRepository(BaseRepository[Product]):
    """Catalog operations on the products table."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Product)

    async def add(self, name: str, price: float) -> Product:
        """Insert a product; new products are always available."""
        product = await self.create(
            Product(name=name, price=price, availability=True)
        )
        await self.commit()
        return product

    async def replace(
        self, product: Product, *, name: str, price: float, availability: bool
    ) -> Product:
        """Overwrite every client-writable field of a product."""
        product = await self.update(
            product, {"name": name, "price": price, "availability": availability}
        )
        await self.commit()
        return product

    async def set_availability(
        self, product: Product, availability: bool | None = None
    ) -> Product:
        """Set availability, or flip it when no value is given."""
        if availability is None:
            availability = not product.availability
        product = await self.update(product, {"availability": availability})
        await self.commit()
        return product

    async def remove(self, product: Product) -> None:
        """Delete a product."""
        await self.delete(product.id)
        await self.commit()
