"""
functions/routes/providers.py

Provider endpoints (table `provider`).

    GET    /providers[?name=]          {"providers": [...], "totalCount": n}
    GET    /providers?id=<id>
    POST   /providers[?forceCreate]    duplicate-guarded create
    PUT    /providers?id=<id>
    DELETE /providers?id=<id>          soft delete (active=false)
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
    parse_record_id,
    update_values,
)
from functions.utils.settings import Settings, get_settings
from schemas.input_schema import ProviderCreateRequest
from schemas.output_schema import ProviderListing

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/providers", tags=["providers"])

TABLE = "provider"


@router.get("")
def get_providers(
    record_id: Optional[str] = Query(None, alias="id"),
    name: Optional[str] = Query(None),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    if record_id is not None:
        provider = store.select_one(TABLE, eq={"id": parse_record_id(record_id), "active": True})
        return camel_json(provider)

    providers = store.select(
        TABLE,
        eq={"active": True},
        ilike={"name": contains_pattern(name)} if name else None,
    )
    listing = ProviderListing(providers=providers, total_count=len(providers))
    return camel_json(listing.model_dump())


@router.post("")
def create_provider(
    payload: ProviderCreateRequest,
    request: Request,
    force_create: Optional[str] = Query(None, alias="forceCreate"),
    store: DataStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    correlation_id = correlation_id_of(request)
    override = force_create is not None

    if not override:
        existing = store.select(TABLE, eq={"active": True}, order_by="id")
        similar = find_similar_record(payload.name, existing, threshold=settings.similarity_threshold)
        if similar is not None:
            logger.info(
                "duplicate_name_conflict",
                correlation_id=correlation_id,
                entity_kind="provider",
                candidate_name=payload.name,
                matched_id=similar.get("id"),
                matched_name=similar.get("name"),
            )
            raise DuplicateNameError("provider", payload.name, similar)

    provider = store.insert(TABLE, payload.to_record())
    logger.info("provider_created", correlation_id=correlation_id, provider_id=provider.get("id"), forced=override)
    return camel_json(provider, status_code=201)


@router.put("")
def update_provider(
    record_id: Optional[str] = Query(None, alias="id"),
    payload: Dict[str, Any] = Body(...),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    record_pk = parse_record_id(record_id)
    rows = store.update(TABLE, update_values(payload), eq={"id": record_pk})
    return camel_json(rows[0])


@router.delete("")
def delete_provider(
    request: Request,
    record_id: Optional[str] = Query(None, alias="id"),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    provider_pk = parse_record_id(record_id)
    provider = store.select_one(TABLE, eq={"id": provider_pk})
    store.update(TABLE, {"active": False}, eq={"id": provider_pk})

    logger.info("provider_deactivated", correlation_id=correlation_id_of(request), provider_id=provider_pk)
    return camel_json(provider)
