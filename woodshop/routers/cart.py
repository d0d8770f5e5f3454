# woodshop/routers/cart.py
import uuid

from fastapi import APIRouter, Depends

from woodshop.dependencies import get_cart, get_cart_service, peek_cart
from woodshop.schemas.cart import CartItemCreate, CartItemUpdate, CartSummary
from woodshop.services.cart_service import CartService
from woodshop.services.cart_store import CartStore

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", response_model=CartSummary)
def get_my_cart(
    cart: CartStore = Depends(peek_cart),
    service: CartService = Depends(get_cart_service),
):
    """
    Get the current session's cart summary.

    Guests and signed-in customers alike; the cart is keyed by the
    cart-session header, not by the user.
    """
    return service.get_cart_summary(cart)


@router.post("", response_model=CartSummary)
def add_to_cart(
    payload: CartItemCreate,
    cart: CartStore = Depends(get_cart),
    service: CartService = Depends(get_cart_service),
):
    """
    Add product to the cart. Adding a product twice increments its line.
    """
    return service.add_to_cart(cart, payload)


@router.patch("/{product_id}", response_model=CartSummary)
def update_cart_item(
    product_id: uuid.UUID,
    payload: CartItemUpdate,
    cart: CartStore = Depends(peek_cart),
    service: CartService = Depends(get_cart_service),
):
    """
    Set the quantity of a product in the cart (0 or less removes it).
    """
    return service.update_quantity(cart, product_id, payload)


@router.delete("/{product_id}", response_model=CartSummary)
def remove_cart_item(
    product_id: uuid.UUID,
    cart: CartStore = Depends(peek_cart),
    service: CartService = Depends(get_cart_service),
):
    return service.remove_item(cart, product_id)


@router.delete("", response_model=CartSummary)
def clear_cart(
    cart: CartStore = Depends(peek_cart),
    service: CartService = Depends(get_cart_service),
):
    return service.clear_cart(cart)
