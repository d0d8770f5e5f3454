# woodshop/services/order_composer.py
import logging
import uuid
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from woodshop.core.errors import (
    EmptyCartError,
    PartialOrderError,
    TransientStoreError,
    ValidationError,
)
from woodshop.schemas.order import CustomerInfo, OrderStatus, OrderWithItemsRead
from woodshop.services.cart_store import CartSnapshot, to_cents
from woodshop.store.base import ObjectStore

logger = logging.getLogger(__name__)


class OrderComposer:
    """
    Turns a cart snapshot plus the checkout form into durable records.

    Steps (strictly sequential, no transaction spans them):
      1. Insert one `orders` header row, status 'pending'.
      2. Insert every `order_items` row in a single batch.

    If step 2 fails the orphaned header is deleted again when possible and
    PartialOrderError is raised either way. The composer never touches the
    cart: clearing it after success is the caller's job.
    """

    def __init__(self, store: ObjectStore):
        self.store = store

    def _customer(self, customer_info: CustomerInfo | dict[str, Any]) -> CustomerInfo:
        if isinstance(customer_info, CustomerInfo):
            return customer_info
        try:
            return CustomerInfo.model_validate(customer_info)
        except PydanticValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            raise ValidationError(f"Invalid customer details: {fields}") from e

    def submit_order(
        self,
        customer_info: CustomerInfo | dict[str, Any],
        snapshot: CartSnapshot,
        user_id: uuid.UUID | None = None,
    ) -> OrderWithItemsRead:
        """
        Persist an order for `snapshot`.

        Returns:
            The created order, including its generated id and items.

        Raises:
            EmptyCartError: snapshot has no lines (nothing is sent).
            ValidationError: customer name/email missing.
            TransientStoreError: the header insert failed or returned no row.
                No line items were written. A header may still exist when
                the store accepted the insert but did not return the row
                (e.g. an RLS policy allowing insert but not select); that
                case is logged at ERROR with the customer email.
            PartialOrderError: header written, items insert failed.
        """
        if snapshot.is_empty:
            raise EmptyCartError()
        customer = self._customer(customer_info)

        header = {
            "user_id": str(user_id) if user_id else None,
            "customer_name": customer.name,
            "customer_email": customer.email,
            "customer_phone": customer.phone,
            "shipping_address": customer.shipping_address,
            "total_amount": str(to_cents(snapshot.total_amount)),
            "status": OrderStatus.PENDING.value,
        }

        # 1) Order header
        created = self.store.insert("orders", header)
        if not created:
            logger.error(
                "Order header insert for %s returned no row; "
                "a header may exist without items",
                customer.email,
            )
            raise TransientStoreError("Data store returned no order row")
        order_row = created[0]
        order_id = order_row["id"]

        # 2) Line items, one batch, priced from the snapshot (not the live catalog)
        item_rows = [
            {
                "order_id": order_id,
                "product_id": str(line.product_id),
                "product_name": line.product_name,
                "quantity": line.quantity,
                "price": str(to_cents(line.unit_price)),
            }
            for line in snapshot.lines
        ]
        try:
            created_items = self.store.insert("order_items", item_rows)
        except TransientStoreError as e:
            compensated = self._remove_orphan(order_id)
            logger.error(
                "Order %s: items insert failed, header %s",
                order_id,
                "removed" if compensated else "left orphaned",
            )
            raise PartialOrderError(order_id, compensated=compensated) from e

        logger.info(
            "Order %s placed: %d line(s), total %s",
            order_id,
            len(created_items),
            order_row.get("total_amount"),
        )
        return OrderWithItemsRead.model_validate(
            {
                **order_row,
                "items": created_items,
            }
        )

    def _remove_orphan(self, order_id: str) -> bool:
        """Compensating delete of a header whose items never landed."""
        try:
            self.store.delete("orders", {"id": order_id})
        except TransientStoreError:
            logger.warning("Order %s: compensating delete failed", order_id)
            return False
        return True
