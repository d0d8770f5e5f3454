# woodshop/schemas/order.py
import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class CustomerInfo(SQLModel):
    """
    Checkout form submitted with the cart.

    User provides:
      - name, email (required)
      - phone, shipping_address (optional)

    Backend derives:
      - user_id from token (None for guests)
      - status = 'pending'
      - total_amount and items from the session cart
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    email: str
    phone: str | None = None
    shipping_address: str | None = None

    @field_validator("name", "email")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("phone", "shipping_address")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderItemRead(SQLModel):
    """
    Representation of a single order line item.
    """

    id: uuid.UUID
    order_id: uuid.UUID
    product_id: uuid.UUID | None
    product_name: str
    quantity: int
    price: Decimal
    created_at: datetime | None = None


class OrderRead(SQLModel):
    """
    Lightweight representation of an order (without items).
    """

    id: uuid.UUID
    user_id: uuid.UUID | None = None
    customer_name: str
    customer_email: str
    customer_phone: str | None = None
    shipping_address: str | None = None
    total_amount: Decimal
    status: OrderStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v):
        return OrderStatus.PENDING if v is None else v


class OrderWithItemsRead(OrderRead):
    """
    Full order view including items.
    """

    items: list[OrderItemRead] = []


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
