"""Pytest fixtures: fake Supabase client, frozen clock and a TestClient."""
import os
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("APP_ENV", "test")

FROZEN_NOW = datetime(2024, 3, 15, 9, 30, 0, tzinfo=timezone.utc)


class FakeQuery:
    """
    Just enough of the postgrest builder for our queries. Filters are applied
    to the in-memory rows so tests exercise real selection logic.
    """

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.filters = []
        self.negate = False
        self.order_by = None
        self.max_rows = None
        self.columns = None

    def _add(self, predicate):
        if self.negate:
            self.negate = False
            self.filters.append(lambda row: not predicate(row))
        else:
            self.filters.append(predicate)
        return self

    def select(self, columns):
        self.columns = [c.strip() for c in columns.split(",")]
        return self

    def eq(self, column, value):
        return self._add(lambda row: str(row.get(column)) == str(value))

    def is_(self, column, value):
        assert value == "null"
        return self._add(lambda row: row.get(column) is None)

    def like(self, column, pattern):
        prefix = pattern.rstrip("%")
        return self._add(lambda row: str(row.get(column) or "").startswith(prefix))

    def or_(self, expression):
        clauses = [part.split(".", 2) for part in expression.split(",")]
        return self._add(lambda row: any(str(row.get(col)) == val for col, _op, val in clauses))

    @property
    def not_(self):
        self.negate = True
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, count):
        self.max_rows = count
        return self

    def execute(self):
        self.db.queries.append(self)
        if self.db.fail:
            raise RuntimeError("connection refused")
        if self.db.error:
            return SimpleNamespace(data=None, error=self.db.error)
        rows = [row for row in self.db.tables.get(self.table, []) if all(f(row) for f in self.filters)]
        if self.order_by:
            column, desc = self.order_by
            rows.sort(key=lambda row: str(row.get(column) or ""), reverse=desc)
        if self.max_rows is not None:
            rows = rows[: self.max_rows]
        if self.columns and self.columns != ["*"]:
            rows = [{c: row.get(c) for c in self.columns if c in row} for row in rows]
        return SimpleNamespace(data=rows, error=None)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.queries = []
        self.error = None
        self.fail = False

    def table(self, name):
        return FakeQuery(self, name)


def product_row(**overrides):
    row = {
        "hash_id": "a1b2c3d4e5f6",
        "product_id": "550e8400-e29b-41d4-a716-446655440000",
        "title": "Wireless Bluetooth Headphones",
        "description": "<p>Great <b>sound</b></p>",
        "description_english": None,
        "price": 100,
        "sale_price": 80,
        "currency": "EUR",
        "image": "https://cdn.example.com/headphones.jpg",
        "brand": "Sonic",
        "availability": "in stock",
        "updated_at": "2024-02-01T10:00:00+00:00",
        "store_id": 7,
        "status": "published",
    }
    row.update(overrides)
    return row


@pytest.fixture()
def clock():
    return lambda: FROZEN_NOW


@pytest.fixture()
def fake_db():
    return FakeSupabase()


@pytest.fixture()
def settings():
    from shopshout.config import Settings

    return Settings(SUPABASE_URL="https://test-project.supabase.co", SUPABASE_ANON_KEY="test-anon-key")


@pytest.fixture()
def client(fake_db, settings, clock):
    from fastapi.testclient import TestClient

    from shopshout.config import get_settings
    from shopshout.deps import get_client, get_client_factory, get_clock
    from shopshout.main import app

    app.dependency_overrides[get_client_factory] = lambda: (lambda: fake_db)
    app.dependency_overrides[get_client] = lambda: fake_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def make_row():
    return product_row
