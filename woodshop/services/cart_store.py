# woodshop/services/cart_store.py
"""
In-memory shopping cart.

A CartStore belongs to exactly one cart session and is mutated only by that
session's requests. Totals are never cached: every snapshot is recomputed
from the current lines.
"""

import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal

from woodshop.core.errors import CheckoutInProgressError, ValidationError
from woodshop.schemas.cart import CartLineRead, CartSummary
from woodshop.schemas.product import ProductRead

CENT = Decimal("0.01")


def effective_price(price: Decimal, sale_price: Decimal | None) -> Decimal:
    """Sale price when present and lower than the list price, else list price."""
    if sale_price is not None and sale_price < price:
        return sale_price
    return price


def to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class CartLine:
    product_id: uuid.UUID
    product_name: str
    price: Decimal
    sale_price: Decimal | None
    quantity: int

    @property
    def unit_price(self) -> Decimal:
        return effective_price(self.price, self.sale_price)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class CartSnapshot:
    lines: tuple[CartLine, ...]
    total_items: int
    total_amount: Decimal

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def to_summary(self) -> CartSummary:
        """Presentation view; amounts rounded to cents here and only here."""
        return CartSummary(
            items=[
                CartLineRead(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    price=line.price,
                    sale_price=line.sale_price,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                    line_total=to_cents(line.line_total),
                )
                for line in self.lines
            ],
            total_items=self.total_items,
            total_amount=to_cents(self.total_amount),
        )


def _check_quantity(quantity) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("Quantity must be an integer")


class CartStore:
    """
    Cart lines of a single session, keyed by product id.

    Invariants:
      - at most one line per product
      - every line has quantity >= 1

    Requests of one session may run concurrently in the server's thread
    pool, so every read and mutation of the lines holds `_lock`. A second,
    separate lock marks a checkout in flight for this cart.
    """

    def __init__(self):
        # dicts keep insertion order, which is the display order of the cart
        self._lines: dict[uuid.UUID, CartLine] = {}
        self._lock = threading.RLock()
        self._checkout_lock = threading.Lock()

    def add_to_cart(self, product: ProductRead, quantity: int = 1) -> CartSnapshot:
        """
        Add `quantity` units of `product`.

        An existing line is incremented and its captured name/prices are
        refreshed from `product`. Stock limits are not enforced here.

        Raises:
            ValidationError: quantity is not a positive integer, or the
                product has no positive price.
        """
        _check_quantity(quantity)
        if quantity <= 0:
            raise ValidationError("Quantity must be a positive integer")
        if product.price is None or product.price <= 0:
            raise ValidationError(f"Product {product.id} has no valid price")

        with self._lock:
            line = self._lines.get(product.id)
            if line is None:
                self._lines[product.id] = CartLine(
                    product_id=product.id,
                    product_name=product.name,
                    price=product.price,
                    sale_price=product.sale_price,
                    quantity=quantity,
                )
            else:
                line.quantity += quantity
                line.product_name = product.name
                line.price = product.price
                line.sale_price = product.sale_price
            return self.get_snapshot()

    def update_quantity(self, product_id: uuid.UUID, new_quantity: int) -> CartSnapshot:
        """
        Replace a line's quantity; <= 0 removes the line.
        Unknown product ids are ignored.

        Raises:
            ValidationError: new_quantity is not an integer.
        """
        _check_quantity(new_quantity)
        if new_quantity <= 0:
            return self.remove_from_cart(product_id)
        with self._lock:
            line = self._lines.get(product_id)
            if line is not None:
                line.quantity = new_quantity
            return self.get_snapshot()

    def remove_from_cart(self, product_id: uuid.UUID) -> CartSnapshot:
        with self._lock:
            self._lines.pop(product_id, None)
            return self.get_snapshot()

    def clear_cart(self) -> CartSnapshot:
        with self._lock:
            self._lines.clear()
            return self.get_snapshot()

    def discard(self, snapshot: CartSnapshot) -> CartSnapshot:
        """
        Take the lines of an ordered `snapshot` out of the cart.

        Units added since the snapshot was taken stay in the cart; lines
        the snapshot never saw are untouched.
        """
        with self._lock:
            for ordered in snapshot.lines:
                line = self._lines.get(ordered.product_id)
                if line is None:
                    continue
                if line.quantity > ordered.quantity:
                    line.quantity -= ordered.quantity
                else:
                    del self._lines[ordered.product_id]
            return self.get_snapshot()

    @contextmanager
    def checking_out(self):
        """
        Mark a checkout in flight for this cart.

        Raises:
            CheckoutInProgressError: another checkout of this cart is running.
        """
        if not self._checkout_lock.acquire(blocking=False):
            raise CheckoutInProgressError()
        try:
            yield self
        finally:
            self._checkout_lock.release()

    def get_line(self, product_id: uuid.UUID) -> CartLine | None:
        with self._lock:
            return self._lines.get(product_id)

    def get_snapshot(self) -> CartSnapshot:
        # Copies, so a snapshot held during checkout cannot drift
        with self._lock:
            lines = tuple(
                CartLine(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    price=line.price,
                    sale_price=line.sale_price,
                    quantity=line.quantity,
                )
                for line in self._lines.values()
            )
        return CartSnapshot(
            lines=lines,
            total_items=sum(line.quantity for line in lines),
            total_amount=sum((line.line_total for line in lines), Decimal("0")),
        )


class CartSessions:
    """
    Registry of CartStores keyed by cart-session id.

    Carts never leave process memory. A session untouched for `idle_minutes`
    is dropped the next time the registry is accessed. When `max_sessions`
    carts are held, registering a new one evicts the least recently used.
    Only a cart that something was added to gets registered; read-only
    requests of unknown sessions see a throwaway empty cart.
    """

    def __init__(self, idle_minutes: int = 120, max_sessions: int = 10_000):
        self.idle_after = timedelta(minutes=idle_minutes)
        self.max_sessions = max_sessions
        self._carts: dict[str, CartStore] = {}
        self._last_seen: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def _prune(self, now: datetime) -> None:
        expired = [sid for sid, seen in self._last_seen.items() if now - seen > self.idle_after]
        for sid in expired:
            del self._carts[sid]
            del self._last_seen[sid]

    def _evict_oldest(self) -> None:
        oldest = min(self._last_seen, key=self._last_seen.__getitem__)
        del self._carts[oldest]
        del self._last_seen[oldest]

    def get(self, session_id: str) -> CartStore | None:
        """The registered cart of `session_id`, refreshing its idle clock."""
        now = datetime.now(timezone.utc)
        with self._lock:
            self._prune(now)
            cart = self._carts.get(session_id)
            if cart is not None:
                self._last_seen[session_id] = now
            return cart

    def get_or_create(self, session_id: str) -> CartStore:
        now = datetime.now(timezone.utc)
        with self._lock:
            self._prune(now)
            cart = self._carts.get(session_id)
            if cart is None:
                while self._carts and len(self._carts) >= self.max_sessions:
                    self._evict_oldest()
                cart = self._carts[session_id] = CartStore()
            self._last_seen[session_id] = now
            return cart

    def __len__(self) -> int:
        with self._lock:
            return len(self._carts)

    @staticmethod
    def new_session_id() -> str:
        return uuid.uuid4().hex
