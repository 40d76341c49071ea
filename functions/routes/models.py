"""
functions/routes/models.py

Car model endpoints (table `car_model`).

    GET    /models[?name=]                      active models, brand embedded
    GET    /models?id=<id>                      one active model
    GET    /models/products?modelId=&productTypeId=
    POST   /models[?forceCreate]                duplicate-guarded create
    PUT    /models?id=<id>
    DELETE /models?id=<id>                      soft delete (active=false)
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import JSONResponse

from functions.catalog.data_store import DataStore
from functions.catalog.duplicate_guard import find_similar_record
from functions.catalog.status_mapper import DuplicateNameError
from functions.routes.common import (
    camel_json,
    contains_pattern,
    correlation_id_of,
    get_store,
    parse_int,
    parse_record_id,
    update_values,
)
from functions.utils.settings import Settings, get_settings
from schemas.input_schema import CarModelCreateRequest

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/models", tags=["models"])

TABLE = "car_model"
MODEL_COLUMNS = "*, brand(name, brand_type_id)"
PRODUCT_CAR_MODEL_COLUMNS = """
    product_id,
    car_model_id,
    initial_year,
    last_year,
    active,
    created_at,
    updated_at,
    product:product_id(
        id,
        name,
        comments,
        stock_count,
        dpi,
        product_type_id,
        product_type:product_type_id(id, name)
    )
"""


@router.get("/products")
def get_model_products(
    model_id: Optional[str] = Query(None, alias="modelId"),
    product_type_id: Optional[str] = Query(None, alias="productTypeId"),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    """Products fitted to a model, optionally narrowed to one product type."""
    model_pk = parse_record_id(model_id, "modelId")
    type_filter = parse_int(product_type_id, "productTypeId")

    # 404 when the model is missing or inactive
    store.select_one(TABLE, "id, name, brand:brand_id(id, name)", eq={"id": model_pk, "active": True})

    links = store.select(
        "product_car_model",
        PRODUCT_CAR_MODEL_COLUMNS,
        eq={"car_model_id": model_pk, "active": True},
    )

    if type_filter is not None:
        links = [
            link
            for link in links
            if isinstance(link.get("product"), dict)
            and link["product"].get("product_type_id") == type_filter
        ]

    return camel_json(links)


@router.get("")
def get_models(
    record_id: Optional[str] = Query(None, alias="id"),
    name: Optional[str] = Query(None),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    if record_id is not None:
        model = store.select_one(TABLE, MODEL_COLUMNS, eq={"id": parse_record_id(record_id), "active": True})
        return camel_json(model)

    models = store.select(
        TABLE,
        MODEL_COLUMNS,
        eq={"active": True},
        ilike={"name": contains_pattern(name)} if name else None,
    )
    return camel_json(models)


@router.post("")
def create_model(
    payload: CarModelCreateRequest,
    request: Request,
    force_create: Optional[str] = Query(None, alias="forceCreate"),
    store: DataStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    correlation_id = correlation_id_of(request)
    override = force_create is not None

    if not override:
        existing = store.select(TABLE, MODEL_COLUMNS, eq={"active": True}, order_by="id")
        similar = find_similar_record(
            payload.name,
            existing,
            threshold=settings.similarity_threshold,
        )
        if similar is not None:
            logger.info(
                "duplicate_name_conflict",
                correlation_id=correlation_id,
                entity_kind="model",
                candidate_name=payload.name,
                matched_id=similar.get("id"),
                matched_name=similar.get("name"),
            )
            raise DuplicateNameError("model", payload.name, similar)

    created = store.insert(TABLE, payload.to_record())
    model = store.select_one(TABLE, MODEL_COLUMNS, eq={"id": created["id"]})

    logger.info(
        "model_created",
        correlation_id=correlation_id,
        model_id=created["id"],
        forced=override,
    )
    return camel_json(model, status_code=201)


@router.put("")
def update_model(
    record_id: Optional[str] = Query(None, alias="id"),
    payload: Dict[str, Any] = Body(...),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    model_pk = parse_record_id(record_id)
    store.update(TABLE, update_values(payload), eq={"id": model_pk})
    return camel_json(store.select_one(TABLE, MODEL_COLUMNS, eq={"id": model_pk}))


@router.delete("")
def delete_model(
    request: Request,
    record_id: Optional[str] = Query(None, alias="id"),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    model_pk = parse_record_id(record_id)
    model = store.select_one(TABLE, MODEL_COLUMNS, eq={"id": model_pk})
    store.update(TABLE, {"active": False}, eq={"id": model_pk})

    logger.info("model_deactivated", correlation_id=correlation_id_of(request), model_id=model_pk)
    return camel_json(model)
