"""
functions/routes/brands.py

Brand endpoints (table `brand`, image rows in `file`).

    GET    /brands                           active brands + image file
    GET    /brands?id=<id>                   one active brand + image file
    GET    /brands?id=<id>&models=true[&name=]
    POST   /brands                           brand + optional image file row
    PUT    /brands?id=<id>                   brand fields + image upsert
    DELETE /brands?id=<id>                   hard delete (image, then brand)

A brand image is the `file` row with object_id = brand id and
file_type_id = settings.brand_image_file_type_id.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from functions.catalog.data_store import DataStore, DataStoreError
from functions.routes.common import (
    RecordId,
    camel_json,
    contains_pattern,
    correlation_id_of,
    get_store,
    parse_record_id,
)
from functions.utils.settings import Settings, get_settings
from schemas.input_schema import BrandCreateRequest, BrandUpdateRequest, FileAttachment

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/brands", tags=["brands"])

TABLE = "brand"
FILE_TABLE = "file"


def _image_filter(brand_id: RecordId, settings: Settings) -> Dict[str, Any]:
    return {"object_id": brand_id, "file_type_id": settings.brand_image_file_type_id}


def _file_values(file: FileAttachment) -> Dict[str, Any]:
    return {"name": file.name, "mime_type": file.mime_type, "storage_path": file.storage_path}


def _list_brands(store: DataStore, settings: Settings) -> List[Dict[str, Any]]:
    brands = store.select(TABLE, eq={"active": True})
    if not brands:
        return []

    files = store.select(
        FILE_TABLE,
        in_={"object_id": [b["id"] for b in brands]},
        eq={"file_type_id": settings.brand_image_file_type_id},
    )
    image_by_brand: Dict[Any, Dict[str, Any]] = {}
    for f in files:
        image_by_brand.setdefault(f.get("object_id"), f)

    return [{**b, "file": image_by_brand.get(b["id"])} for b in brands]


def _brand_models(store: DataStore, brand_id: RecordId, name: Optional[str]) -> List[Dict[str, Any]]:
    brand = store.select_one(TABLE, eq={"id": brand_id, "active": True})
    models = store.select(
        "car_model",
        eq={"brand_id": brand_id, "active": True},
        ilike={"name": contains_pattern(name)} if name else None,
    )
    return [{**m, "brand": brand} for m in models]


@router.get("")
def get_brands(
    record_id: Optional[str] = Query(None, alias="id"),
    models: Optional[str] = Query(None),
    name: Optional[str] = Query(None),
    store: DataStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    if record_id is None:
        return camel_json(_list_brands(store, settings))

    brand_id = parse_record_id(record_id)
    if models == "true":
        return camel_json(_brand_models(store, brand_id, name))

    brand = store.select_one(TABLE, eq={"id": brand_id, "active": True})
    image = store.select_first(FILE_TABLE, eq=_image_filter(brand_id, settings))
    return camel_json({**brand, "file": image})


@router.post("")
def create_brand(
    payload: BrandCreateRequest,
    request: Request,
    store: DataStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    correlation_id = correlation_id_of(request)
    brand = store.insert(
        TABLE,
        {"name": payload.name, "brand_type_id": payload.brand_type_id, "active": payload.active},
    )

    image = None
    if payload.file is not None and payload.file.storage_path:
        try:
            image = store.insert(
                FILE_TABLE,
                {
                    **_file_values(payload.file),
                    **_image_filter(brand["id"], settings),
                    "active": True,
                },
            )
        except DataStoreError:
            # compensate: a brand without its image is not kept
            logger.warning("brand_image_insert_failed", correlation_id=correlation_id, brand_id=brand["id"])
            store.delete(TABLE, eq={"id": brand["id"]})
            raise

    logger.info("brand_created", correlation_id=correlation_id, brand_id=brand["id"], has_image=image is not None)
    return camel_json({**brand, "file": image}, status_code=201)


@router.put("")
def update_brand(
    payload: BrandUpdateRequest,
    record_id: Optional[str] = Query(None, alias="id"),
    store: DataStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    brand_id = parse_record_id(record_id)

    values = payload.brand_values()
    if values:
        brand = store.update(TABLE, values, eq={"id": brand_id})[0]
    else:
        brand = store.select_one(TABLE, eq={"id": brand_id})

    image = None
    if payload.file is not None and payload.file.storage_path:
        existing = store.select_first(FILE_TABLE, eq=_image_filter(brand_id, settings))
        if existing is not None:
            image = store.update(FILE_TABLE, _file_values(payload.file), eq={"id": existing["id"]})[0]
        else:
            image = store.insert(
                FILE_TABLE,
                {**_file_values(payload.file), **_image_filter(brand_id, settings), "active": True},
            )

    return camel_json({**brand, "file": image})


@router.delete("")
def delete_brand(
    request: Request,
    record_id: Optional[str] = Query(None, alias="id"),
    store: DataStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    brand_id = parse_record_id(record_id)
    brand = store.select_one(TABLE, eq={"id": brand_id})
    image = store.select_first(FILE_TABLE, eq=_image_filter(brand_id, settings))

    if image is not None:
        store.delete(FILE_TABLE, eq={"id": image["id"]})
    store.delete(TABLE, eq={"id": brand_id})

    logger.info("brand_deleted", correlation_id=correlation_id_of(request), brand_id=brand_id)
    return camel_json({**brand, "file": image})
