# woodshop/schemas/cart.py
import uuid
from decimal import Decimal

from sqlmodel import Field, SQLModel


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.
    """

    product_id: uuid.UUID
    quantity: int = Field(default=1, gt=0)


class CartItemUpdate(SQLModel):
    """
    Payload for replacing the quantity of a cart line.
    Zero or negative removes the line.
    """

    quantity: int


class CartLineRead(SQLModel):
    product_id: uuid.UUID
    product_name: str
    price: Decimal
    sale_price: Decimal | None
    unit_price: Decimal
    quantity: int
    line_total: Decimal


class CartSummary(SQLModel):
    """
    Full cart response model with totals (rounded to cents).
    """

    items: list[CartLineRead]
    total_items: int
    total_amount: Decimal
