# woodshop/services/cart_service.py
import uuid

from woodshop.core.errors import NotFoundError, ValidationError
from woodshop.repositories.product_repo import ProductRepository
from woodshop.schemas.cart import CartItemCreate, CartItemUpdate, CartSummary
from woodshop.schemas.product import ProductRead
from woodshop.services.cart_store import CartStore


class CartService:
    """
    Storefront rules around a session's CartStore.

    Responsibilities:
      - resolve product ids through the catalog
      - refuse out-of-stock products
      - keep quantity <= stock_quantity (the store itself has no upper bound)
    """

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_valid_product(self, product_id: uuid.UUID) -> ProductRead:
        product = self.product_repo.get_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found")
        if not product.in_stock:
            raise ValidationError("Product is out of stock")
        return product

    def _check_stock(self, product: ProductRead, quantity: int) -> None:
        if quantity > product.stock_quantity:
            raise ValidationError(
                f"Not enough stock available (have {product.stock_quantity})"
            )

    # ---- public operations ----

    def get_cart_summary(self, cart: CartStore) -> CartSummary:
        return cart.get_snapshot().to_summary()

    def add_to_cart(self, cart: CartStore, payload: CartItemCreate) -> CartSummary:
        """
        Add a product to the session cart.

        Rules:
          - product must exist and be in stock
          - quantity + existing_quantity <= stock_quantity
        """
        product = self._get_valid_product(payload.product_id)
        existing = cart.get_line(product.id)
        already = existing.quantity if existing else 0
        self._check_stock(product, already + payload.quantity)

        return cart.add_to_cart(product, payload.quantity).to_summary()

    def update_quantity(
        self,
        cart: CartStore,
        product_id: uuid.UUID,
        payload: CartItemUpdate,
    ) -> CartSummary:
        """
        Replace the quantity of a line; <= 0 removes it.

        Lines that are not in the cart are left alone. Increases are checked
        against stock; decreases and removals never hit the catalog.
        """
        line = cart.get_line(product_id)
        if line is not None and payload.quantity > line.quantity:
            product = self._get_valid_product(product_id)
            self._check_stock(product, payload.quantity)

        return cart.update_quantity(product_id, payload.quantity).to_summary()

    def remove_item(self, cart: CartStore, product_id: uuid.UUID) -> CartSummary:
        return cart.remove_from_cart(product_id).to_summary()

    def clear_cart(self, cart: CartStore) -> CartSummary:
        return cart.clear_cart().to_summary()
