# tests/conftest.py
from __future__ import annotations

import copy
import itertools
import uuid
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

import api
from functions.catalog.data_store import DataStoreError, RecordNotFoundError
from functions.routes.common import get_store


class InMemoryStore:
    """
    Stand-in for functions.catalog.data_store.DataStore.

    - Column lists are ignored; seed rows with embedded objects
      (e.g. "brand": {...}) when a route expects a join.
    - `failures[(op, table)] = exc` makes the next matching call raise.
    """

    def __init__(self) -> None:
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.failures: Dict[tuple, Exception] = {}
        self.calls: List[tuple] = []
        self.rpc_results: Dict[str, Any] = {}
        self.accounts: List[Dict[str, str]] = []
        self.objects: Dict[str, bytes] = {}
        self._ids = itertools.count(1000)

    # ---- seeding --------------------------------------------------
    def seed(self, table: str, *rows: Dict[str, Any]) -> None:
        self.tables.setdefault(table, []).extend(copy.deepcopy(list(rows)))

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(table, [])

    # ---- helpers --------------------------------------------------
    def _maybe_fail(self, op: str, table: str) -> None:
        self.calls.append((op, table))
        exc = self.failures.pop((op, table), None)
        if exc is not None:
            raise exc

    @staticmethod
    def _matches(
        row: Mapping[str, Any],
        eq: Optional[Mapping[str, Any]] = None,
        ilike: Optional[Mapping[str, str]] = None,
        in_: Optional[Mapping[str, Sequence[Any]]] = None,
    ) -> bool:
        for column, value in (eq or {}).items():
            if row.get(column) != value:
                return False
        for column, pattern in (ilike or {}).items():
            needle = pattern.strip("%").lower()
            if needle not in str(row.get(column) or "").lower():
                return False
        for column, values in (in_ or {}).items():
            if row.get(column) not in list(values):
                return False
        return True

    # ---- DataStore interface -------------------------------------
    def select(self, table, columns="*", *, eq=None, ilike=None, in_=None, order_by=None, descending=False):
        self._maybe_fail("select", table)
        rows = [copy.deepcopy(r) for r in self.rows(table) if self._matches(r, eq, ilike, in_)]
        if order_by:
            rows.sort(key=lambda r: (r.get(order_by) is None, r.get(order_by)), reverse=descending)
        return rows

    def select_one(self, table, columns="*", *, eq):
        self._maybe_fail("select_one", table)
        rows = [r for r in self.rows(table) if self._matches(r, eq)]
        if len(rows) != 1:
            raise RecordNotFoundError("JSON object requested, multiple (or no) rows returned", "PGRST116")
        return copy.deepcopy(rows[0])

    def select_first(self, table, columns="*", *, eq):
        self._maybe_fail("select_first", table)
        rows = [r for r in self.rows(table) if self._matches(r, eq)]
        return copy.deepcopy(rows[0]) if rows else None

    def insert(self, table, record):
        self._maybe_fail("insert", table)
        row = dict(record)
        row.setdefault("id", next(self._ids))
        self.rows(table).append(row)
        return copy.deepcopy(row)

    def update(self, table, values, *, eq):
        self._maybe_fail("update", table)
        matched = [r for r in self.rows(table) if self._matches(r, eq)]
        if not matched:
            raise RecordNotFoundError(f"No {table} row matched {dict(eq)}", "PGRST116")
        for r in matched:
            r.update(values)
        return copy.deepcopy(matched)

    def delete(self, table, *, eq):
        self._maybe_fail("delete", table)
        kept, removed = [], []
        for r in self.rows(table):
            (removed if self._matches(r, eq) else kept).append(r)
        self.tables[table] = kept
        return copy.deepcopy(removed)

    def rpc(self, function, params):
        self._maybe_fail("rpc", function)
        self.calls.append(("rpc_params", function, copy.deepcopy(dict(params))))
        return copy.deepcopy(self.rpc_results.get(function))

    def create_account(self, email, password):
        self._maybe_fail("create_account", "auth")
        account_id = str(uuid.uuid4())
        self.accounts.append({"id": account_id, "email": email})
        return account_id

    def put_object(self, bucket, path, data, content_type="application/octet-stream"):
        self._maybe_fail("put_object", bucket)
        self.objects[f"{bucket}/{path}"] = data
        return f"{bucket}/{path}"


@pytest.fixture()
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture()
def client(store: InMemoryStore):
    api.app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(api.app)
    finally:
        api.app.dependency_overrides.clear()


@pytest.fixture()
def store_failure():
    """Factory for the generic (non not-found) store failure."""
    return lambda message="connection reset": DataStoreError(message, "XX000")
