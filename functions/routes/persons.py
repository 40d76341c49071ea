"""
functions/routes/persons.py

Person endpoints (table `person`). Plain CRUD; bodies are camelCase and
stored as snake_case. DELETE is a hard delete.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from functions.catalog.data_store import DataStore, RecordNotFoundError
from functions.routes.common import camel_json, get_store, parse_record_id, update_values
from functions.utils.json_naming_converter import convert_keys_camel_to_snake

router = APIRouter(prefix="/persons", tags=["persons"])

TABLE = "person"


@router.get("")
def get_persons(store: DataStore = Depends(get_store)) -> JSONResponse:
    return camel_json(store.select(TABLE))


@router.post("")
def create_person(
    payload: Dict[str, Any] = Body(...),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    person = store.insert(TABLE, convert_keys_camel_to_snake(payload))
    return camel_json(person, status_code=201)


@router.put("")
def update_person(
    record_id: Optional[str] = Query(None, alias="id"),
    payload: Dict[str, Any] = Body(...),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    record_pk = parse_record_id(record_id)
    rows = store.update(TABLE, update_values(payload), eq={"id": record_pk})
    return camel_json(rows[0])


@router.delete("")
def delete_person(
    record_id: Optional[str] = Query(None, alias="id"),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    person_id = parse_record_id(record_id)
    rows = store.delete(TABLE, eq={"id": person_id})
    if not rows:
        raise RecordNotFoundError(f"No person row matched id={person_id}")
    return camel_json(rows[0])
