import copy
import itertools
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from woodshop.core.config import Settings
from woodshop.core.errors import TransientStoreError
from woodshop.main import create_app

JWT_SECRET = "test-secret"
_EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)


class FakeObjectStore:
    """
    In-memory ObjectStore with failure injection.

    `fail_on` holds (action, table) pairs that raise TransientStoreError.
    `calls` records every (action, table) in order.
    `hooks` maps (action, table) to a callable run before that call.
    """

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.fail_on: set[tuple[str, str]] = set()
        self.calls: list[tuple[str, str]] = []
        self.hooks: dict[tuple[str, str], Callable[[], None]] = {}
        self._clock = itertools.count()

    def _check(self, action, table):
        self.calls.append((action, table))
        if (action, table) in self.fail_on:
            raise TransientStoreError(f"{action} on {table} failed")
        hook = self.hooks.get((action, table))
        if hook is not None:
            hook()

    @staticmethod
    def _matches(row, filters):
        for key, value in (filters or {}).items():
            if value is None:
                if row.get(key) is not None:
                    return False
            elif isinstance(value, list):
                if str(row.get(key)) not in {str(v) for v in value}:
                    return False
            elif str(row.get(key)) != str(value):
                return False
        return True

    def seed(self, table, row):
        """Insert without recording a call."""
        self.tables.setdefault(table, []).append(dict(row))
        return row

    def select(self, table, filters=None, order_by=None, descending=False, limit=None, offset=0):
        self._check("select", table)
        rows = [r for r in self.tables.get(table, []) if self._matches(r, filters)]
        if order_by:
            rows.sort(key=lambda r: r.get(order_by) or "", reverse=descending)
        rows = rows[offset:]
        if limit is not None:
            rows = rows[:limit]
        return copy.deepcopy(rows)

    def insert(self, table, rows):
        self._check("insert", table)
        payload = rows if isinstance(rows, list) else [rows]
        created = []
        for row in payload:
            stamp = (_EPOCH + timedelta(seconds=next(self._clock))).isoformat()
            new = {"id": str(uuid.uuid4()), "created_at": stamp, **row}
            if table == "orders":
                new.setdefault("updated_at", stamp)
            created.append(new)
        self.tables.setdefault(table, []).extend(created)
        return copy.deepcopy(created)

    def update(self, table, patch, filters):
        self._check("update", table)
        updated = []
        for row in self.tables.get(table, []):
            if self._matches(row, filters):
                row.update(patch)
                updated.append(copy.deepcopy(row))
        return updated

    def delete(self, table, filters):
        self._check("delete", table)
        self.tables[table] = [
            r for r in self.tables.get(table, []) if not self._matches(r, filters)
        ]


def product_row(name="Oak Dining Table", price="10.00", sale_price=None, stock=10, **extra):
    return {
        "id": str(uuid.uuid4()),
        "name": name,
        "price": price,
        "sale_price": sale_price,
        "in_stock": True,
        "stock_quantity": stock,
        "images": [],
        **extra,
    }


def make_token(user_id, email="buyer@example.com", secret=JWT_SECRET):
    claims = {
        "sub": str(user_id),
        "email": email,
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    return jwt.encode(claims, secret, algorithm="HS256")


def auth_header(user_id, **kwargs):
    return {"Authorization": f"Bearer {make_token(user_id, **kwargs)}"}


@pytest.fixture()
def store():
    return FakeObjectStore()


@pytest.fixture()
def settings():
    return Settings(_env_file=None, SUPABASE_JWT_SECRET=JWT_SECRET)


@pytest.fixture()
def client(settings, store):
    app = create_app(settings=settings, store=store)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def cart_client(client):
    """Client that keeps one cart session across requests."""
    response = client.get("/api/v1/cart")
    client.headers["X-Cart-Session"] = response.headers["X-Cart-Session"]
    return client
