"""
functions/routes/users.py

User endpoints (table `user`, joined with `person` and `role`).

    GET    /users                  active users (active = 1)
    GET    /users?id=<id>          one active user
    POST   /users                  Auth account -> create_user_with_person -> read back
    PUT    /users?id=<id>          optional person update, then role/active
    DELETE /users?id=<id>          soft delete (active = 0)

The Auth account and the user/person rows are written by separate calls;
if the procedure fails after the account exists, the account is left in
place and the error is reported.
"""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from functions.catalog.data_store import DataStore
from functions.routes.common import camel_json, correlation_id_of, get_store, parse_record_id
from functions.utils.json_naming_converter import convert_keys_camel_to_snake
from schemas.input_schema import UserCreateRequest, UserUpdateRequest

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

TABLE = "user"
USER_COLUMNS = "*, person(*), role(*)"


@router.get("")
def get_users(
    record_id: Optional[str] = Query(None, alias="id"),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    if record_id is not None:
        user = store.select_one(TABLE, USER_COLUMNS, eq={"id": parse_record_id(record_id), "active": 1})
        return camel_json(user)
    return camel_json(store.select(TABLE, USER_COLUMNS, eq={"active": 1}))


@router.post("")
def create_user(
    payload: UserCreateRequest,
    request: Request,
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    correlation_id = correlation_id_of(request)

    account_id = store.create_account(payload.email, payload.password)
    store.rpc(
        "create_user_with_person",
        {
            "user_data": {
                "id": account_id,
                "roleId": payload.role_id,
                "active": payload.active,
                "person": convert_keys_camel_to_snake(payload.person),
            }
        },
    )

    user = store.select_one(TABLE, USER_COLUMNS, eq={"id": account_id})
    logger.info("user_created", correlation_id=correlation_id, user_id=account_id, role_id=payload.role_id)
    return camel_json(user, status_code=201)


@router.put("")
def update_user(
    payload: UserUpdateRequest,
    record_id: Optional[str] = Query(None, alias="id"),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    user_id = parse_record_id(record_id)

    if payload.person:
        owner = store.select_one(TABLE, "person_id", eq={"id": user_id})
        store.update("person", convert_keys_camel_to_snake(payload.person), eq={"id": owner["person_id"]})

    values = payload.model_dump(include={"role_id", "active"}, exclude_none=True)
    if values:
        store.update(TABLE, values, eq={"id": user_id})

    return camel_json(store.select_one(TABLE, USER_COLUMNS, eq={"id": user_id}))


@router.delete("")
def delete_user(
    request: Request,
    record_id: Optional[str] = Query(None, alias="id"),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    user_id = parse_record_id(record_id)
    user = store.select_one(TABLE, USER_COLUMNS, eq={"id": user_id})
    store.update(TABLE, {"active": 0}, eq={"id": user_id})

    logger.info("user_deactivated", correlation_id=correlation_id_of(request), user_id=user_id)
    return camel_json(user)
