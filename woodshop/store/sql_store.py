# woodshop/store/sql_store.py
import logging
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from woodshop.core.errors import TransientStoreError
from woodshop.models.order import Order, OrderItem
from woodshop.models.product import Product
from woodshop.models.user import UserRole
from woodshop.store.base import Filters, Row

logger = logging.getLogger(__name__)

TABLES: dict[str, type[SQLModel]] = {
    "products": Product,
    "orders": Order,
    "order_items": OrderItem,
    "user_roles": UserRole,
}


class SqlObjectStore:
    """
    ObjectStore over a SQLModel engine (Supabase Postgres or SQLite).

    Each call runs in its own session and commits before returning, the
    same granularity PostgREST gives the supabase backend.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    # ---- internal helpers ----

    def _model(self, table: str) -> type[SQLModel]:
        try:
            return TABLES[table]
        except KeyError:
            raise ValueError(f"Unknown table: {table}") from None

    def _coerce(self, model: type[SQLModel], column: str, value: Any) -> Any:
        # Filters arrive JSON-shaped ("uuid-as-string"); bind them as column types
        annotation = model.model_fields[column].annotation
        return TypeAdapter(annotation).validate_python(value)

    def _where(self, model: type[SQLModel], stmt, filters: Filters | None):
        for column, value in (filters or {}).items():
            attr = getattr(model, column)
            if value is None:
                stmt = stmt.where(attr.is_(None))
            elif isinstance(value, list):
                stmt = stmt.where(attr.in_([self._coerce(model, column, v) for v in value]))
            else:
                stmt = stmt.where(attr == self._coerce(model, column, value))
        return stmt

    def _fail(self, action: str, table: str, e: Exception):
        logger.error("SQL %s on %s failed: %s", action, table, e)
        return TransientStoreError(f"Data store {action} on {table} failed")

    # ---- CRUD ----

    def select(
        self,
        table: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Row]:
        model = self._model(table)
        try:
            stmt = self._where(model, select(model), filters)
            if order_by:
                column = getattr(model, order_by)
                stmt = stmt.order_by(column.desc() if descending else column)
            if offset:
                stmt = stmt.offset(offset)
            if limit is not None:
                stmt = stmt.limit(limit)
            with Session(self.engine) as session:
                return [row.model_dump(mode="json") for row in session.exec(stmt).all()]
        except (SQLAlchemyError, PydanticValidationError) as e:
            raise self._fail("select", table, e) from e

    def insert(self, table: str, rows: Row | list[Row]) -> list[Row]:
        model = self._model(table)
        payload = rows if isinstance(rows, list) else [rows]
        try:
            objs = [model.model_validate(row) for row in payload]
            with Session(self.engine) as session:
                session.add_all(objs)
                session.commit()
                for obj in objs:
                    session.refresh(obj)
                return [obj.model_dump(mode="json") for obj in objs]
        except (SQLAlchemyError, PydanticValidationError) as e:
            raise self._fail("insert", table, e) from e

    def update(self, table: str, patch: Row, filters: Filters) -> list[Row]:
        model = self._model(table)
        try:
            stmt = self._where(model, select(model), filters)
            values = {k: self._coerce(model, k, v) for k, v in patch.items()}
            with Session(self.engine) as session:
                objs = session.exec(stmt).all()
                for obj in objs:
                    for key, value in values.items():
                        setattr(obj, key, value)
                    session.add(obj)
                session.commit()
                for obj in objs:
                    session.refresh(obj)
                return [obj.model_dump(mode="json") for obj in objs]
        except (SQLAlchemyError, PydanticValidationError) as e:
            raise self._fail("update", table, e) from e

    def delete(self, table: str, filters: Filters) -> None:
        model = self._model(table)
        try:
            stmt = self._where(model, select(model), filters)
            with Session(self.engine) as session:
                for obj in session.exec(stmt).all():
                    session.delete(obj)
                session.commit()
        except (SQLAlchemyError, PydanticValidationError) as e:
            raise self._fail("delete", table, e) from e
