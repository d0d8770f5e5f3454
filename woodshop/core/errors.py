# woodshop/core/errors.py
"""
Domain errors for the cart / checkout core.

Services raise these; ``woodshop.main`` maps them to HTTP responses so the
core stays free of FastAPI.
"""

import uuid


class ShopError(Exception):
    """Base class for every error raised by the storefront core."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ShopError):
    """
    Input rejected locally, before any network call.

    Examples: non-positive quantity, product without a valid price,
    blank customer name on checkout.
    """

    status_code = 400


class EmptyCartError(ValidationError):
    def __init__(self, message: str = "Your cart is empty"):
        super().__init__(message)


class NotFoundError(ShopError):
    status_code = 404


class InvalidStatusTransitionError(ShopError):
    status_code = 409

    def __init__(self, current: str, new: str):
        super().__init__(f"Invalid status transition: {current} -> {new}")
        self.current = current
        self.new = new


class CheckoutInProgressError(ShopError):
    status_code = 409

    def __init__(self, message: str = "A checkout for this cart is already in progress"):
        super().__init__(message)


class TransientStoreError(ShopError):
    """
    The object store failed (network error, 5xx, constraint failure).

    Nothing is retried automatically; the caller resubmits.
    """

    status_code = 503


class PartialOrderError(ShopError):
    """
    The order header was written but its line items were not.

    ``compensated`` tells whether the orphaned header was deleted again.
    When it is False an operator has to reconcile ``order_id`` by hand.
    """

    status_code = 502

    def __init__(self, order_id: uuid.UUID | str, compensated: bool):
        state = "removed" if compensated else "left without items"
        super().__init__(
            f"Order {order_id} was created but its items could not be saved "
            f"(header {state}). Your cart has been kept; please try again."
        )
        self.order_id = str(order_id)
        self.compensated = compensated
