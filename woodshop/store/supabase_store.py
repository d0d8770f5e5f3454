# woodshop/store/supabase_store.py
import logging

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from woodshop.core.errors import TransientStoreError
from woodshop.store.base import Filters, Row

logger = logging.getLogger(__name__)


class SupabaseObjectStore:
    """
    ObjectStore backed by Supabase PostgREST tables.

    Every call is a single request/response round trip; the client's own
    HTTP timeout applies.
    """

    def __init__(self, client: Client):
        self.client = client

    def _filtered(self, query, filters: Filters | None):
        for column, value in (filters or {}).items():
            if value is None:
                query = query.is_(column, "null")
            elif isinstance(value, list):
                query = query.in_(column, [str(v) for v in value])
            elif isinstance(value, bool):
                query = query.eq(column, "true" if value else "false")
            else:
                query = query.eq(column, str(value))
        return query

    def _run(self, table: str, action: str, query) -> list[Row]:
        try:
            response = query.execute()
        except (APIError, httpx.HTTPError) as e:
            logger.error("Supabase %s on %s failed: %s", action, table, e)
            raise TransientStoreError(f"Data store {action} on {table} failed") from e
        return response.data or []

    def select(
        self,
        table: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Row]:
        query = self._filtered(self.client.table(table).select("*"), filters)
        if order_by:
            query = query.order(order_by, desc=descending)
        if limit is not None:
            query = query.range(offset, offset + limit - 1)
        return self._run(table, "select", query)

    def insert(self, table: str, rows: Row | list[Row]) -> list[Row]:
        return self._run(table, "insert", self.client.table(table).insert(rows))

    def update(self, table: str, patch: Row, filters: Filters) -> list[Row]:
        query = self._filtered(self.client.table(table).update(patch), filters)
        return self._run(table, "update", query)

    def delete(self, table: str, filters: Filters) -> None:
        query = self._filtered(self.client.table(table).delete(), filters)
        self._run(table, "delete", query)
