# woodshop/services/order_service.py
import logging
import uuid

from woodshop.core.errors import InvalidStatusTransitionError, NotFoundError
from woodshop.repositories.order_repo import OrderRepository
from woodshop.schemas.order import (
    OrderRead,
    OrderStatus,
    OrderStatusUpdate,
    OrderWithItemsRead,
)

logger = logging.getLogger(__name__)

# pending -> processing -> shipped -> delivered, cancel before shipping
ALLOWED_TRANSITIONS: dict[OrderStatus, set[OrderStatus]] = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


class OrderService:
    """
    Order reads and the admin status workflow.

    Checkout itself lives in OrderComposer.
    """

    def __init__(self, order_repo: OrderRepository):
        self.order_repo = order_repo

    # -------- User-facing operations --------

    def list_user_orders(
        self,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderRead]:
        """
        List orders for the given user (without items), newest first.
        """
        rows = self.order_repo.list_for_user(user_id, skip, limit)
        return [OrderRead.model_validate(row) for row in rows]

    def get_user_order(
        self,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> OrderWithItemsRead:
        """
        Get a single order for the user, including items.

        - NotFoundError if the order is missing or belongs to someone else.
        """
        order = self.order_repo.get_by_id(order_id)
        if not order or order.get("user_id") != str(user_id):
            raise NotFoundError("Order not found")
        return self._with_items(order, self.order_repo.list_items_for_order(order_id))

    # -------- Admin operations --------

    def list_all_orders(self, skip: int = 0, limit: int = 50) -> list[OrderWithItemsRead]:
        """
        List all orders with their items (admin only), newest first.
        """
        orders = self.order_repo.list_all(skip, limit)
        items = self.order_repo.items_by_order(orders)
        return [self._with_items(order, items[str(order["id"])]) for order in orders]

    def get_order_admin(self, order_id: uuid.UUID) -> OrderWithItemsRead:
        order = self.order_repo.get_by_id(order_id)
        if not order:
            raise NotFoundError("Order not found")
        return self._with_items(order, self.order_repo.list_items_for_order(order_id))

    def update_status(
        self,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> OrderRead:
        """
        Admin-only status update, checked against ALLOWED_TRANSITIONS.

        Setting the current status again is a no-op.
        delivered and cancelled are terminal.
        """
        order = self.order_repo.get_by_id(order_id)
        if not order:
            raise NotFoundError("Order not found")

        current = OrderStatus(order["status"] or OrderStatus.PENDING.value)
        new = payload.status

        if current == new:
            return OrderRead.model_validate(order)

        if not can_transition(current, new):
            raise InvalidStatusTransitionError(current.value, new.value)

        updated = self.order_repo.update_status(order_id, new.value)
        if updated is None:
            raise NotFoundError("Order not found")
        logger.info("Order %s: %s -> %s", order_id, current.value, new.value)
        return OrderRead.model_validate(updated)

    # -------- Helper DTO builder --------

    def _with_items(self, order: dict, items: list[dict]) -> OrderWithItemsRead:
        return OrderWithItemsRead.model_validate({**order, "items": items})
