# woodshop/dependencies.py
from fastapi import Depends, Request, Response

from woodshop.core.config import Settings
from woodshop.repositories.order_repo import OrderRepository
from woodshop.repositories.product_repo import ProductRepository
from woodshop.services.cart_service import CartService
from woodshop.services.cart_store import CartSessions, CartStore
from woodshop.services.order_composer import OrderComposer
from woodshop.services.order_service import OrderService
from woodshop.store.base import ObjectStore

# Longer ids are treated as garbage and replaced
MAX_SESSION_ID_LENGTH = 128


def get_object_store(request: Request) -> ObjectStore:
    """The ObjectStore built at startup (see woodshop.main.lifespan)."""
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with (see woodshop.main.create_app)."""
    return request.app.state.settings


def get_cart_sessions(request: Request) -> CartSessions:
    return request.app.state.cart_sessions


def _session_id(request: Request, response: Response, settings: Settings) -> str:
    header = settings.CART_SESSION_HEADER
    session_id = request.headers.get(header)
    if not session_id or len(session_id) > MAX_SESSION_ID_LENGTH:
        session_id = CartSessions.new_session_id()
    response.headers[header] = session_id
    return session_id


def get_cart(
    request: Request,
    response: Response,
    sessions: CartSessions = Depends(get_cart_sessions),
    settings: Settings = Depends(get_app_settings),
) -> CartStore:
    """
    Resolve (registering if needed) the caller's CartStore from the
    cart-session header. Used by the endpoint that adds to the cart.

    A missing (or oversized) header starts a new session; its id is sent
    back in the same header so the client can keep using it.
    """
    return sessions.get_or_create(_session_id(request, response, settings))


def peek_cart(
    request: Request,
    response: Response,
    sessions: CartSessions = Depends(get_cart_sessions),
    settings: Settings = Depends(get_app_settings),
) -> CartStore:
    """
    The caller's registered CartStore, or a throwaway empty one.

    Reads, removals and checkout never register a session, so requests
    without a cart cannot fill the registry.
    """
    session_id = _session_id(request, response, settings)
    cart = sessions.get(session_id)
    return cart if cart is not None else CartStore()


def get_cart_service(store: ObjectStore = Depends(get_object_store)) -> CartService:
    return CartService(ProductRepository(store))


def get_order_composer(store: ObjectStore = Depends(get_object_store)) -> OrderComposer:
    return OrderComposer(store)


def get_order_service(store: ObjectStore = Depends(get_object_store)) -> OrderService:
    return OrderService(OrderRepository(store))
