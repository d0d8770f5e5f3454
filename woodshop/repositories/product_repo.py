# woodshop/repositories/product_repo.py
import uuid

from woodshop.schemas.product import ProductRead
from woodshop.store.base import ObjectStore


class ProductRepository:
    """
    Read access to the catalog (`products` table).

    - Pure data access, no FastAPI, no business logic.
    - The catalog is written by the back-office, never by the cart.
    """

    def __init__(self, store: ObjectStore):
        self.store = store

    def get_by_id(self, product_id: uuid.UUID) -> ProductRead | None:
        rows = self.store.select("products", {"id": str(product_id)}, limit=1)
        if not rows:
            return None
        return ProductRead.model_validate(rows[0])
