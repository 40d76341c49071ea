"""
functions/routes/products.py

Product endpoints (table `product`).

    GET    /products[?name=&productTypeId=]
    GET    /products?id=<id>        product + type, car models, prices,
                                    providers and ordered image files
    POST   /products                create_product_with_relations(product_data)
    PUT    /products?id=<id>        update_product_with_relations(p_product_id, product_data)
    DELETE /products?id=<id>        hard delete

Multi-table writes run inside the stored procedures; the camelCase body
is handed to them unchanged.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import JSONResponse

from functions.catalog.data_store import DataStore
from functions.routes.common import (
    camel_json,
    contains_pattern,
    correlation_id_of,
    get_store,
    invalid_parameter,
    parse_int,
    parse_record_id,
)
from functions.utils.settings import Settings, get_settings
from schemas.input_schema import ProductCreateRequest

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/products", tags=["products"])

TABLE = "product"
LIST_COLUMNS = "*, product_type(id, name)"
DETAIL_COLUMNS = """
    *,
    product_type(id, name),
    car_models:product_car_model(
        car_model_id,
        initial_year,
        last_year,
        car_model:car_model_id(
            id,
            name,
            brand:brand_id(id, name)
        )
    ),
    prices:product_price(
        product_id,
        price_id,
        price:price_id(*)
    ),
    providers:provider_product(
        provider_id,
        price_id,
        num_series,
        price:price_id(*),
        provider:provider_id(*)
    )
"""
FILE_COLUMNS = """
    id,
    name,
    mime_type,
    storage_path,
    object_id,
    order_id,
    file_type:file_type_id(id, name),
    active,
    created_at,
    updated_at
"""


@router.get("")
def get_products(
    record_id: Optional[str] = Query(None, alias="id"),
    name: Optional[str] = Query(None),
    product_type_id: Optional[str] = Query(None, alias="productTypeId"),
    store: DataStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    if record_id is not None:
        product_id = parse_record_id(record_id)
        product = store.select_one(TABLE, DETAIL_COLUMNS, eq={"id": product_id, "active": True})
        files = store.select(
            "file",
            FILE_COLUMNS,
            eq={
                "object_id": product_id,
                "file_type_id": settings.product_image_file_type_id,
                "active": True,
            },
            order_by="order_id",
        )
        return camel_json({**product, "files": files})

    filters: Dict[str, Any] = {"active": True}
    type_filter = parse_int(product_type_id, "productTypeId")
    if type_filter is not None:
        filters["product_type_id"] = type_filter

    products = store.select(
        TABLE,
        LIST_COLUMNS,
        eq=filters,
        ilike={"name": contains_pattern(name)} if name else None,
    )
    return camel_json(products)


@router.post("")
def create_product(
    payload: ProductCreateRequest,
    request: Request,
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    data = store.rpc("create_product_with_relations", {"product_data": payload.to_procedure_payload()})
    logger.info("product_created", correlation_id=correlation_id_of(request), name=payload.name)
    return camel_json(data, status_code=201)


@router.put("")
def update_product(
    request: Request,
    record_id: Optional[str] = Query(None, alias="id"),
    payload: Dict[str, Any] = Body(...),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    product_id = parse_record_id(record_id)
    if not isinstance(product_id, int) or product_id <= 0:
        raise invalid_parameter("id", "expected a positive integer")

    data = store.rpc(
        "update_product_with_relations",
        {"p_product_id": product_id, "product_data": payload},
    )
    logger.info("product_updated", correlation_id=correlation_id_of(request), product_id=product_id)
    return camel_json(data)


@router.delete("")
def delete_product(
    request: Request,
    record_id: Optional[str] = Query(None, alias="id"),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    product_id = parse_record_id(record_id)
    product = store.select_one(TABLE, LIST_COLUMNS, eq={"id": product_id})
    store.delete(TABLE, eq={"id": product_id})

    logger.info("product_deleted", correlation_id=correlation_id_of(request), product_id=product_id)
    return camel_json(product)
