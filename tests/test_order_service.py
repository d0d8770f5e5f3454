import uuid

import pytest

from woodshop.core.errors import InvalidStatusTransitionError, NotFoundError
from woodshop.repositories.order_repo import OrderRepository
from woodshop.schemas.order import OrderStatus, OrderStatusUpdate
from woodshop.services.order_service import ALLOWED_TRANSITIONS, OrderService, can_transition

S = OrderStatus


@pytest.fixture()
def service(store):
    return OrderService(OrderRepository(store))


def seed_order(store, status="pending", user_id=None, created_at="2026-03-01T10:00:00+00:00"):
    order_id = str(uuid.uuid4())
    store.seed(
        "orders",
        {
            "id": order_id,
            "user_id": str(user_id) if user_id else None,
            "customer_name": "John Doe",
            "customer_email": "john@example.com",
            "customer_phone": None,
            "shipping_address": "1 Oak Lane",
            "total_amount": "2400.00",
            "status": status,
            "created_at": created_at,
            "updated_at": created_at,
        },
    )
    store.seed(
        "order_items",
        {
            "id": str(uuid.uuid4()),
            "order_id": order_id,
            "product_id": str(uuid.uuid4()),
            "product_name": "Oak Dining Table",
            "quantity": 1,
            "price": "2400.00",
            "created_at": created_at,
        },
    )
    return order_id


class TestTransitionTable:
    @pytest.mark.parametrize(
        "current,new",
        [
            (S.PENDING, S.PROCESSING),
            (S.PROCESSING, S.SHIPPED),
            (S.SHIPPED, S.DELIVERED),
            (S.PENDING, S.CANCELLED),
            (S.PROCESSING, S.CANCELLED),
        ],
    )
    def test_allowed(self, current, new):
        assert can_transition(current, new)

    @pytest.mark.parametrize(
        "current,new",
        [
            (S.PENDING, S.SHIPPED),
            (S.PENDING, S.DELIVERED),
            (S.SHIPPED, S.CANCELLED),
            (S.PROCESSING, S.PENDING),
        ],
    )
    def test_rejected(self, current, new):
        assert not can_transition(current, new)

    def test_terminal_states(self):
        assert ALLOWED_TRANSITIONS[S.DELIVERED] == set()
        assert ALLOWED_TRANSITIONS[S.CANCELLED] == set()


class TestUpdateStatus:
    def test_walks_the_happy_path(self, service, store):
        order_id = seed_order(store)
        for status in (S.PROCESSING, S.SHIPPED, S.DELIVERED):
            order = service.update_status(uuid.UUID(order_id), OrderStatusUpdate(status=status))
            assert order.status == status
        assert store.tables["orders"][0]["status"] == "delivered"

    def test_illegal_transition_leaves_status(self, service, store):
        order_id = seed_order(store, status="delivered")
        with pytest.raises(InvalidStatusTransitionError):
            service.update_status(uuid.UUID(order_id), OrderStatusUpdate(status=S.CANCELLED))
        assert store.tables["orders"][0]["status"] == "delivered"

    def test_same_status_is_a_no_op(self, service, store):
        order_id = seed_order(store, status="processing")
        order = service.update_status(uuid.UUID(order_id), OrderStatusUpdate(status=S.PROCESSING))
        assert order.status == S.PROCESSING
        assert ("update", "orders") not in store.calls

    def test_null_status_counts_as_pending(self, service, store):
        order_id = seed_order(store, status=None)
        order = service.update_status(uuid.UUID(order_id), OrderStatusUpdate(status=S.PROCESSING))
        assert order.status == S.PROCESSING

    def test_unknown_order(self, service):
        with pytest.raises(NotFoundError):
            service.update_status(uuid.uuid4(), OrderStatusUpdate(status=S.PROCESSING))


class TestReads:
    def test_admin_list_is_newest_first_with_items(self, service, store):
        old = seed_order(store, created_at="2026-03-01T10:00:00+00:00")
        new = seed_order(store, created_at="2026-03-02T10:00:00+00:00")

        orders = service.list_all_orders()
        assert [str(o.id) for o in orders] == [new, old]
        assert all(len(o.items) == 1 for o in orders)

    def test_admin_list_loads_items_in_one_select(self, service, store):
        first, second = seed_order(store), seed_order(store)
        store.calls.clear()

        orders = service.list_all_orders()

        assert store.calls.count(("select", "order_items")) == 1
        assert {str(o.id): len(o.items) for o in orders} == {first: 1, second: 1}

    def test_admin_list_without_orders_skips_items(self, service, store):
        assert service.list_all_orders() == []
        assert ("select", "order_items") not in store.calls

    def test_user_sees_only_own_orders(self, service, store):
        me, other = uuid.uuid4(), uuid.uuid4()
        mine = seed_order(store, user_id=me)
        theirs = seed_order(store, user_id=other)

        assert [str(o.id) for o in service.list_user_orders(me)] == [mine]
        assert service.get_user_order(me, uuid.UUID(mine)).items[0].product_name == "Oak Dining Table"
        with pytest.raises(NotFoundError):
            service.get_user_order(me, uuid.UUID(theirs))
