# woodshop/store/base.py
"""
Generic CRUD contract over the storefront tables.

Rows travel as JSON-compatible dicts (UUIDs, decimals and datetimes as
strings), which is what PostgREST returns and accepts. Every backend wraps
its own failures in ``TransientStoreError``.

Filters are column equality; a ``None`` value matches NULL and a list value
matches any of its members (SQL ``IN``).
"""

from typing import Any, Protocol

Row = dict[str, Any]
Filters = dict[str, Any]


class ObjectStore(Protocol):
    def select(
        self,
        table: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Row]: ...

    def insert(self, table: str, rows: Row | list[Row]) -> list[Row]: ...

    def update(self, table: str, patch: Row, filters: Filters) -> list[Row]: ...

    def delete(self, table: str, filters: Filters) -> None: ...
