# woodshop/models/product.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class Product(SQLModel, table=True):
    """
    Catalog entry (a piece of furniture, a cutting board...).

    Only the columns the cart reads are required; the catalog itself is
    maintained from the back-office.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    worker_id: uuid.UUID | None = Field(default=None, index=True)
    category_id: uuid.UUID | None = Field(default=None, index=True)

    name: str = Field(index=True)
    description: str | None = None

    price: Decimal = Field(
        max_digits=10,
        decimal_places=2,
        description="List price",
    )
    sale_price: Decimal | None = Field(
        default=None,
        max_digits=10,
        decimal_places=2,
        description="Discounted price; only applies when lower than price",
    )

    images: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    in_stock: bool = Field(default=True)
    stock_quantity: int = Field(default=0, ge=0)
    dimensions: str | None = None
    material: str | None = None
    is_featured: bool = Field(default=False)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
