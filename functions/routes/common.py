"""
functions/routes/common.py

Helpers shared by every catalog router:
- data store injection (Depends(get_store))
- query parameter parsing (required ids, integer filters, ilike patterns)
- camelCase JSON responses
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from functions.catalog.data_store import DataStore
from functions.utils.json_naming_converter import convert_keys_camel_to_snake, convert_keys_snake_to_camel

RecordId = Union[int, str]


def get_store(request: Request) -> DataStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Data store is not initialised; was the app started through its lifespan?")
    return store


def correlation_id_of(request: Request) -> Optional[str]:
    return getattr(request.state, "correlation_id", None)


def missing_parameter(name: str) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={"code": "MISSING_PARAMETER", "message": f"Missing query parameter '{name}'"},
    )


def invalid_parameter(name: str, reason: str) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={"code": "INVALID_PARAMETER", "message": f"Invalid query parameter '{name}': {reason}"},
    )


def parse_record_id(value: Optional[str], name: str = "id") -> RecordId:
    """
    Required id from the query string.

    Numeric ids become int so equality filters match integer primary keys;
    anything else (user ids are UUIDs) is kept as a string.
    """
    if value is None or not value.strip():
        raise missing_parameter(name)
    value = value.strip()
    return int(value) if value.isascii() and value.isdigit() else value


def parse_int(value: Optional[str], name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise invalid_parameter(name, "expected an integer")


def contains_pattern(value: str) -> str:
    return f"%{value}%"


def camel_json(payload: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=convert_keys_snake_to_camel(payload))


def update_values(payload: Dict[str, Any]) -> Dict[str, Any]:
    """snake_case column values for a generic PUT; an empty body is a 400."""
    if not payload:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_FAILED", "message": "Request body has no fields to update"},
        )
    return convert_keys_camel_to_snake(payload)
