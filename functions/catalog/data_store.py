"""
functions/catalog/data_store.py

WHAT THIS FILE IS FOR
---------------------
This module is the *data access boundary* of the Parts Catalog API.
It wraps one explicitly constructed Supabase client and exposes the
three external collaborators the routes need:

- Relational store (PostgREST tables + stored procedures)
    select / select_one / select_first / insert / update / delete / rpc
- Identity provider (Supabase Auth admin API)
    create_account
- Object storage (Supabase Storage buckets)
    put_object

LIFECYCLE
---------
There is no module-level client. `build_data_store(settings)` is called
once by the FastAPI lifespan (api.py), the instance is kept on
`app.state.store`, and routes receive it through `Depends(get_store)`.
Tests replace it via `app.dependency_overrides`.

ERROR MODEL
-----------
Every failure reported by Supabase is re-raised as `DataStoreError`.
The "no rows" condition (PostgREST code PGRST116, or an update/select
that matched nothing) is raised as `RecordNotFoundError`.
Mapping to HTTP status codes lives in functions/catalog/status_mapper.py.

Each call is atomic on its own; nothing here spans calls in a transaction.

WHAT THIS FILE IS NOT FOR
-------------------------
- Key case conversion (routes do that at the boundary)
- Business rules (duplicate guard, required fields)
- HTTP concerns
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

import structlog
from postgrest.exceptions import APIError
from supabase import Client, create_client

from functions.utils.settings import Settings

logger = structlog.get_logger(__name__)

NOT_FOUND_CODE = "PGRST116"


class DataStoreError(Exception):
    """Any failure reported by the hosted data store."""

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class RecordNotFoundError(DataStoreError):
    """The store reported that no row matched."""


def _translate(exc: APIError) -> DataStoreError:
    message = getattr(exc, "message", None) or str(exc)
    code = getattr(exc, "code", None)
    if code == NOT_FOUND_CODE:
        return RecordNotFoundError(message, code)
    return DataStoreError(message, code)


class DataStore:
    """
    Thin synchronous adapter around a Supabase client.

    Filters:
        eq:     {column: value}           -> column = value
        ilike:  {column: "%pattern%"}     -> column ILIKE pattern
        in_:    {column: [v1, v2, ...]}   -> column IN (...)
    """

    def __init__(self, client: Client, schema: str = "public") -> None:
        self._client = client
        self._db = client if schema == "public" else client.schema(schema)

    # ------------------------------------------------------------------ #
    # Relational store
    # ------------------------------------------------------------------ #
    def select(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: Optional[Mapping[str, Any]] = None,
        ilike: Optional[Mapping[str, str]] = None,
        in_: Optional[Mapping[str, Sequence[Any]]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        query = self._filtered(self._db.table(table).select(columns), eq=eq, ilike=ilike, in_=in_)
        if order_by:
            query = query.order(order_by, desc=descending)
        return list(self._execute(query, table=table, op="select") or [])

    def select_one(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """Exactly one row, or RecordNotFoundError."""
        query = self._filtered(self._db.table(table).select(columns), eq=eq).single()
        return self._execute(query, table=table, op="select_one")

    def select_first(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: Mapping[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """First matching row or None."""
        query = self._filtered(self._db.table(table).select(columns), eq=eq).limit(1)
        rows = self._execute(query, table=table, op="select_first") or []
        return rows[0] if rows else None

    def insert(self, table: str, record: Mapping[str, Any]) -> Dict[str, Any]:
        rows = self._execute(self._db.table(table).insert(dict(record)), table=table, op="insert")
        if not rows:
            raise DataStoreError(f"Insert into {table} returned no row")
        logger.info("data_store_insert", table=table, id=rows[0].get("id"))
        return rows[0]

    def update(
        self,
        table: str,
        values: Mapping[str, Any],
        *,
        eq: Mapping[str, Any],
    ) -> List[Dict[str, Any]]:
        query = self._filtered(self._db.table(table).update(dict(values)), eq=eq)
        rows = self._execute(query, table=table, op="update") or []
        if not rows:
            raise RecordNotFoundError(f"No {table} row matched {dict(eq)}", NOT_FOUND_CODE)
        logger.info("data_store_update", table=table, filters=dict(eq), rows=len(rows))
        return list(rows)

    def delete(self, table: str, *, eq: Mapping[str, Any]) -> List[Dict[str, Any]]:
        query = self._filtered(self._db.table(table).delete(), eq=eq)
        rows = self._execute(query, table=table, op="delete") or []
        logger.info("data_store_delete", table=table, filters=dict(eq), rows=len(rows))
        return list(rows)

    def rpc(self, function: str, params: Mapping[str, Any]) -> Any:
        return self._execute(self._db.rpc(function, dict(params)), table=function, op="rpc")

    # ------------------------------------------------------------------ #
    # Identity provider
    # ------------------------------------------------------------------ #
    def create_account(self, email: str, password: str) -> str:
        """Create a confirmed Auth account and return its id."""
        try:
            response = self._client.auth.admin.create_user(
                {"email": email, "password": password, "email_confirm": True}
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("auth_create_user_failed", error=str(exc))
            raise DataStoreError(str(exc), getattr(exc, "code", None)) from exc

        user = getattr(response, "user", None)
        account_id = getattr(user, "id", None)
        if not account_id:
            raise DataStoreError("Auth provider did not return a user id")

        logger.info("auth_user_created", account_id=str(account_id))
        return str(account_id)

    # ------------------------------------------------------------------ #
    # Object storage
    # ------------------------------------------------------------------ #
    def put_object(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> str:
        """Upload (upsert) bytes to `bucket/path` and return the stored path."""
        try:
            self._client.storage.from_(bucket).upload(
                path,
                data,
                {"content-type": content_type, "upsert": "true"},
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("storage_upload_failed", bucket=bucket, path=path, error=str(exc))
            raise DataStoreError(str(exc), getattr(exc, "code", None)) from exc

        logger.info("storage_upload_success", bucket=bucket, path=path, size=len(data))
        return f"{bucket}/{path}"

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    @staticmethod
    def _filtered(
        query: Any,
        *,
        eq: Optional[Mapping[str, Any]] = None,
        ilike: Optional[Mapping[str, str]] = None,
        in_: Optional[Mapping[str, Sequence[Any]]] = None,
    ) -> Any:
        for column, value in (eq or {}).items():
            query = query.eq(column, value)
        for column, pattern in (ilike or {}).items():
            query = query.ilike(column, pattern)
        for column, values in (in_ or {}).items():
            query = query.in_(column, list(values))
        return query

    @staticmethod
    def _execute(query: Any, *, table: str, op: str) -> Any:
        try:
            return query.execute().data
        except APIError as exc:
            err = _translate(exc)
            logger.warning(
                "data_store_call_failed",
                table=table,
                op=op,
                code=err.code,
                error=err.message,
            )
            raise err from exc


def build_data_store(settings: Settings) -> DataStore:
    """
    Create the process-wide DataStore from settings.

    Fails fast when credentials are missing.
    """
    missing: list[str] = []
    if not settings.supabase_url:
        missing.append("supabase_url")
    if not settings.supabase_service_role_key:
        missing.append("supabase_service_role_key")

    if missing:
        logger.error("settings_missing_supabase_credentials", missing=missing)
        raise RuntimeError(
            f"Missing required settings: {', '.join(missing)}. "
            "Set them in environment variables (CATALOG_API_*)."
        )

    url = str(settings.supabase_url).rstrip("/")
    client = create_client(url, settings.supabase_service_role_key)
    logger.info("data_store_ready", supabase_url=url, schema=settings.supabase_schema)
    return DataStore(client, schema=settings.supabase_schema)
