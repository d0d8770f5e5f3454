# woodshop/schemas/product.py
import uuid
from decimal import Decimal

from pydantic import field_validator
from sqlmodel import SQLModel


class ProductRead(SQLModel):
    """
    The slice of a catalog row the cart needs.

    Nullable catalog columns (in_stock, stock_quantity) fall back to
    sensible defaults so a half-filled product can still be sold.
    """

    id: uuid.UUID
    name: str
    price: Decimal
    sale_price: Decimal | None = None
    in_stock: bool = True
    stock_quantity: int = 0
    images: list[str] = []

    @field_validator("in_stock", mode="before")
    @classmethod
    def default_in_stock(cls, v):
        return True if v is None else v

    @field_validator("stock_quantity", mode="before")
    @classmethod
    def default_stock(cls, v):
        return 0 if v is None else v

    @field_validator("images", mode="before")
    @classmethod
    def default_images(cls, v):
        return [] if v is None else v
