# woodshop/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, status

from woodshop.core.auth import CurrentUser, get_current_user, require_admin, require_auth
from woodshop.dependencies import get_order_composer, get_order_service, peek_cart
from woodshop.schemas.order import (
    CustomerInfo,
    OrderRead,
    OrderStatusUpdate,
    OrderWithItemsRead,
)
from woodshop.services.cart_store import CartStore
from woodshop.services.order_composer import OrderComposer
from woodshop.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])


# -------- Customer endpoints --------


@router.post(
    "/checkout",
    response_model=OrderWithItemsRead,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: CustomerInfo,
    cart: CartStore = Depends(peek_cart),
    composer: OrderComposer = Depends(get_order_composer),
    current_user: CurrentUser | None = Depends(get_current_user),
):
    """
    Place an order from the session cart.

    Guests may check out (user_id stays null). The ordered lines leave the
    cart only after both the order and its items were saved; on any error
    the cart is kept so the customer can retry. Items added while the order
    is being saved stay in the cart. A second checkout of the same cart
    while one is running gets 409.
    """
    with cart.checking_out():
        snapshot = cart.get_snapshot()
        order = composer.submit_order(
            payload,
            snapshot,
            user_id=current_user.id if current_user else None,
        )
        cart.discard(snapshot)
    return order


@router.get(
    "/me",
    response_model=list[OrderRead],
)
def list_my_orders(
    current_user: CurrentUser = Depends(require_auth),
    service: OrderService = Depends(get_order_service),
    skip: int = 0,
    limit: int = 50,
):
    """
    List the authenticated user's orders (without items).
    """
    return service.list_user_orders(current_user.id, skip, limit)


@router.get(
    "/me/{order_id}",
    response_model=OrderWithItemsRead,
)
def get_my_order(
    order_id: uuid.UUID,
    current_user: CurrentUser = Depends(require_auth),
    service: OrderService = Depends(get_order_service),
):
    """
    Get a single order (with items) belonging to the current user.
    """
    return service.get_user_order(current_user.id, order_id)


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[OrderWithItemsRead],
    dependencies=[Depends(require_admin)],
)
def list_all_orders(
    service: OrderService = Depends(get_order_service),
    skip: int = 0,
    limit: int = 50,
):
    """
    List all orders with their items (admin only).
    """
    return service.list_all_orders(skip, limit)


@router.get(
    "/{order_id}",
    response_model=OrderWithItemsRead,
    dependencies=[Depends(require_admin)],
)
def get_order_admin(
    order_id: uuid.UUID,
    service: OrderService = Depends(get_order_service),
):
    return service.get_order_admin(order_id)


@router.patch(
    "/{order_id}/status",
    response_model=OrderRead,
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service),
):
    """
    Update order status (admin only).

      pending    -> processing, cancelled

      processing -> shipped, cancelled

      shipped    -> delivered

      delivered, cancelled -> (terminal)
    """
    return service.update_status(order_id, payload)
