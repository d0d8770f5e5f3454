# woodshop/models/order.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import Field, SQLModel


class Order(SQLModel, table=True):
    """
    Order header, written once per successful checkout.

    Columns mirror the storefront's `orders` table:
      - id, user_id, customer_name, customer_email, customer_phone,
        shipping_address, total_amount, status, created_at, updated_at
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    # NULL for guest checkout
    user_id: uuid.UUID | None = Field(default=None, index=True)

    customer_name: str
    customer_email: str
    customer_phone: str | None = None
    shipping_address: str | None = None

    total_amount: Decimal = Field(max_digits=10, decimal_places=2)

    # pending | processing | shipped | delivered | cancelled
    status: str = Field(
        default="pending",
        index=True,
        description="Order status lifecycle",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order.

    product_name and price are copies taken at checkout, so later catalog
    edits never change a historical order.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    # Kept nullable so deleting a product does not cascade into history
    product_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="products.id",
        index=True,
    )

    product_name: str

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    price: Decimal = Field(
        max_digits=10,
        decimal_places=2,
        description="Unit price at time of order",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
