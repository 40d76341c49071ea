"""
functions/routes/files.py

File metadata endpoints (table `file`) plus binary upload to object storage.

    GET    /files?id=<id>
    GET    /files[?objectId=&fileTypeId=]      (object_id / file_type_id also accepted)
    POST   /files
    PUT    /files?id=<id>
    DELETE /files?id=<id>                      hard delete
    POST   /files/upload?bucket=&path=         multipart, upserts the object
"""

from __future__ import annotations

import mimetypes
from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Body, Depends, File, Query, Request, UploadFile
from fastapi.responses import JSONResponse

from functions.catalog.data_store import DataStore, RecordNotFoundError
from functions.routes.common import (
    camel_json,
    correlation_id_of,
    get_store,
    missing_parameter,
    parse_int,
    parse_record_id,
    update_values,
)
from functions.utils.json_naming_converter import convert_keys_camel_to_snake
from functions.utils.settings import Settings, get_settings
from schemas.output_schema import StoredObject

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/files", tags=["files"])

TABLE = "file"


@router.get("")
def get_files(
    record_id: Optional[str] = Query(None, alias="id"),
    object_id: Optional[str] = Query(None, alias="objectId"),
    object_id_snake: Optional[str] = Query(None, alias="object_id"),
    file_type_id: Optional[str] = Query(None, alias="fileTypeId"),
    file_type_id_snake: Optional[str] = Query(None, alias="file_type_id"),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    if record_id is not None:
        return camel_json(store.select_one(TABLE, eq={"id": parse_record_id(record_id)}))

    filters: Dict[str, Any] = {}
    object_filter = parse_int(object_id or object_id_snake, "objectId")
    if object_filter is not None:
        filters["object_id"] = object_filter
    type_filter = parse_int(file_type_id or file_type_id_snake, "fileTypeId")
    if type_filter is not None:
        filters["file_type_id"] = type_filter

    return camel_json(store.select(TABLE, eq=filters))


@router.post("/upload")
def upload_file(
    request: Request,
    file: UploadFile = File(..., description="Binary content to store"),
    bucket: Optional[str] = Query(None),
    path: Optional[str] = Query(None, description="Object path inside the bucket; defaults to the file name"),
    store: DataStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    bucket_name = bucket or settings.default_storage_bucket
    object_path = (path or file.filename or "").strip("/")
    if not object_path:
        raise missing_parameter("path")

    content_type = (
        file.content_type
        if file.content_type and file.content_type != "application/octet-stream"
        else mimetypes.guess_type(object_path)[0] or "application/octet-stream"
    )
    data = file.file.read()

    storage_path = store.put_object(bucket_name, object_path, data, content_type)
    logger.info(
        "file_uploaded",
        correlation_id=correlation_id_of(request),
        bucket=bucket_name,
        path=object_path,
        size=len(data),
    )

    stored = StoredObject(
        bucket=bucket_name,
        path=object_path,
        storage_path=storage_path,
        content_type=content_type,
        size=len(data),
    )
    return camel_json(stored.model_dump(), status_code=201)


@router.post("")
def create_file(
    payload: Dict[str, Any] = Body(...),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    return camel_json(store.insert(TABLE, convert_keys_camel_to_snake(payload)), status_code=201)


@router.put("")
def update_file(
    record_id: Optional[str] = Query(None, alias="id"),
    payload: Dict[str, Any] = Body(...),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    record_pk = parse_record_id(record_id)
    rows = store.update(TABLE, update_values(payload), eq={"id": record_pk})
    return camel_json(rows[0])


@router.delete("")
def delete_file(
    record_id: Optional[str] = Query(None, alias="id"),
    store: DataStore = Depends(get_store),
) -> JSONResponse:
    file_id = parse_record_id(record_id)
    rows = store.delete(TABLE, eq={"id": file_id})
    if not rows:
        raise RecordNotFoundError(f"No file row matched id={file_id}")
    return camel_json(rows[0])
