"""Database models."""

from sqlalchemy import Boolean, CheckConstraint, Float, String, true
from sqlalchemy.orm import Mapped, mapped_column

from products_api.infrastructure.database.base import BaseModel

PRODUCT_NAME_MAX_LENGTH = 100


class Product(BaseModel):
    """A product offered in the catalog.

    ``price`` must stay strictly positive and ``name`` non-empty; both are
    enforced by the request validators and backed by table constraints.
    """

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price > 0", name="price_positive"),
        CheckConstraint("length(name) > 0", name="name_not_empty"),
        {"sqlite_autoincrement": True},
    )

    name: Mapped[str] = mapped_column(String(PRODUCT_NAME_MAX_LENGTH), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    availability: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
