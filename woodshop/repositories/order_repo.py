# woodshop/repositories/order_repo.py
import uuid
from datetime import datetime, timezone

from woodshop.store.base import ObjectStore, Row


class OrderRepository:
    """
    Data access layer for orders and order_items.

    NOTE:
      - Inserts are not here; checkout goes through OrderComposer, which
        owns the header-then-items sequence.
    """

    def __init__(self, store: ObjectStore):
        self.store = store

    # ---- Orders ----

    def list_for_user(
        self,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Row]:
        return self.store.select(
            "orders",
            {"user_id": str(user_id)},
            order_by="created_at",
            descending=True,
            limit=limit,
            offset=skip,
        )

    def list_all(self, skip: int = 0, limit: int = 50) -> list[Row]:
        return self.store.select(
            "orders",
            order_by="created_at",
            descending=True,
            limit=limit,
            offset=skip,
        )

    def get_by_id(self, order_id: uuid.UUID) -> Row | None:
        rows = self.store.select("orders", {"id": str(order_id)}, limit=1)
        return rows[0] if rows else None

    def update_status(self, order_id: uuid.UUID, status: str) -> Row | None:
        rows = self.store.update(
            "orders",
            {"status": status, "updated_at": datetime.now(timezone.utc).isoformat()},
            {"id": str(order_id)},
        )
        return rows[0] if rows else None

    # ---- Order items ----

    def list_items_for_order(self, order_id: uuid.UUID | str) -> list[Row]:
        return self.store.select(
            "order_items",
            {"order_id": str(order_id)},
            order_by="created_at",
        )

    def items_by_order(self, orders: list[Row]) -> dict[str, list[Row]]:
        """
        Items for several orders, grouped by order id, in one select.
        """
        grouped: dict[str, list[Row]] = {str(order["id"]): [] for order in orders}
        if not grouped:
            return grouped
        rows = self.store.select(
            "order_items",
            {"order_id": list(grouped)},
            order_by="created_at",
        )
        for row in rows:
            grouped[str(row["order_id"])].append(row)
        return grouped
