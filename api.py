"""
api.py

WHAT THIS FILE IS FOR
---------------------
This module defines the FastAPI application entrypoint for the
Parts Catalog API.

It is responsible for:
- Creating the FastAPI app instance (title/version/description)
- Owning the data store lifecycle (built once in the lifespan,
  kept on app.state.store, injected into routes via Depends)
- Registering middleware for:
    - CORS
    - Correlation ID propagation (X-Correlation-Id)
    - API version validation (X-API-Version)
- Defining standard error responses using a consistent schema:
    {code, message, subErrors, timestamp, correlationId}
- Registering exception handlers for:
    - RequestValidationError     (400 VALIDATION_FAILED)
    - HTTPException passthrough  (with standardized envelope)
    - DataStoreError             (404 NOT_FOUND / 500 DATA_STORE_FAILED)
    - DuplicateNameError         (409 DUPLICATE_NAME + similarRecord)
- Exposing GET /health and /healthz and mounting the catalog routers
  under /api/v1

REQUEST/RESPONSE CONTRACT RULES
-------------------------------
- Request bodies are camelCase; routes convert them to snake_case.
- Response bodies are camelCase across nested objects.

DESIGN INTENT
-------------
This file contains ONLY the HTTP layer. Data access lives in
functions/catalog/*, endpoint glue in functions/routes/*.
"""

from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from functions.catalog.data_store import DataStoreError, build_data_store
from functions.catalog.status_mapper import DuplicateNameError, map_catalog_error
from functions.routes import brands, files, models, persons, products, providers, users
from functions.utils.json_naming_converter import convert_keys_snake_to_camel
from functions.utils.settings import get_settings

logger = structlog.get_logger(__name__)

settings = get_settings()

CORRELATION_HEADER = "X-Correlation-Id"
API_VERSION_HEADER = "X-API-Version"
SUPPORTED_API_VERSIONS = {"1"}
API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.store = build_data_store(settings)
    logger.info("service_started", service=settings.service_name, environment=settings.environment)
    yield
    logger.info("service_stopped", service=settings.service_name)


app = FastAPI(
    title="Parts Catalog API",
    version="1.0.0",
    description="CRUD API over the auto-parts catalog (brands, models, products, providers, persons, users, files).",
    lifespan=lifespan,
)


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------
def _get_or_create_correlation_id(request: Request) -> str:
    incoming = request.headers.get(CORRELATION_HEADER)
    return incoming.strip() if incoming else f"corr_{uuid.uuid4().hex}"


def _get_api_version(request: Request) -> str:
    v = getattr(request.state, "api_version", None)
    return str(v) if v else request.headers.get(API_VERSION_HEADER, "1").strip() or "1"


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", None) or f"corr_{uuid.uuid4().hex}"


def _std_error(
    *,
    code: str,
    message: str,
    correlation_id: str,
    http_status: int,
    api_version: str = "1",
    sub_errors: Optional[list[dict[str, Any]]] = None,
    extra: Optional[dict[str, Any]] = None,
) -> JSONResponse:
    payload = {
        "code": code,
        "message": message,
        "subErrors": sub_errors or [],
        "timestamp": int(time.time()),
        "correlationId": correlation_id,
        **(extra or {}),
    }
    headers = {
        CORRELATION_HEADER: correlation_id,
        API_VERSION_HEADER: api_version,
    }
    return JSONResponse(status_code=http_status, content=payload, headers=headers)


# -------------------------------------------------------------------
# Middleware
# -------------------------------------------------------------------
@app.middleware("http")
async def correlation_id_middleware(request: Request, call_next):
    correlation_id = _get_or_create_correlation_id(request)
    request.state.correlation_id = correlation_id
    response = await call_next(request)
    response.headers[CORRELATION_HEADER] = correlation_id
    return response


@app.middleware("http")
async def api_version_middleware(request: Request, call_next):
    correlation_id = _correlation_id(request)
    version = request.headers.get(API_VERSION_HEADER, "1").strip() or "1"

    if version not in SUPPORTED_API_VERSIONS:
        return _std_error(
            code="INVALID_FIELD_VALUE",
            message="Invalid API version",
            correlation_id=correlation_id,
            http_status=400,
            sub_errors=[
                {
                    "field": API_VERSION_HEADER,
                    "errors": [{"code": "isIn", "message": "Supported versions: 1"}],
                }
            ],
        )

    request.state.api_version = version
    response = await call_next(request)
    response.headers[API_VERSION_HEADER] = version
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "x-client-info", "apikey"],
)


# -------------------------------------------------------------------
# Exception handlers
# -------------------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    correlation_id = _correlation_id(request)

    sub_errors: list[dict[str, Any]] = []
    for err in exc.errors():
        field = ".".join(str(x) for x in err.get("loc", []) if x != "body") or "body"
        sub_errors.append(
            {
                "field": field,
                "errors": [{"code": err.get("type"), "message": err.get("msg")}],
            }
        )

    logger.info(
        "request_validation_failed",
        correlation_id=correlation_id,
        path=request.url.path,
        error_count=len(sub_errors),
    )

    return _std_error(
        code="VALIDATION_FAILED",
        message="Validation failed",
        correlation_id=correlation_id,
        http_status=400,
        api_version=_get_api_version(request),
        sub_errors=sub_errors,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    correlation_id = _correlation_id(request)

    logger.warning(
        "http_exception",
        correlation_id=correlation_id,
        path=request.url.path,
        status_code=exc.status_code,
        detail=str(exc.detail),
    )

    if isinstance(exc.detail, dict):
        code = str(exc.detail.get("code") or "HTTP_ERROR")
        message = str(exc.detail.get("message"))
    else:
        code = "HTTP_ERROR"
        message = str(exc.detail)

    return _std_error(
        code=code,
        message=message,
        correlation_id=correlation_id,
        http_status=exc.status_code,
        api_version=_get_api_version(request),
    )


@app.exception_handler(DataStoreError)
async def data_store_error_handler(request: Request, exc: DataStoreError):
    correlation_id = _correlation_id(request)
    http_status, code = map_catalog_error(exc)

    log = logger.info if http_status == 404 else logger.error
    log(
        "data_store_error",
        correlation_id=correlation_id,
        path=request.url.path,
        method=request.method,
        status_code=http_status,
        store_code=exc.code,
        error=exc.message,
    )

    return _std_error(
        code=code,
        message=exc.message,
        correlation_id=correlation_id,
        http_status=http_status,
        api_version=_get_api_version(request),
    )


@app.exception_handler(DuplicateNameError)
async def duplicate_name_handler(request: Request, exc: DuplicateNameError):
    http_status, code = map_catalog_error(exc)
    return _std_error(
        code=code,
        message=str(exc),
        correlation_id=_correlation_id(request),
        http_status=http_status,
        api_version=_get_api_version(request),
        extra={
            "entityKind": exc.entity_kind,
            "similarRecord": convert_keys_snake_to_camel(exc.similar_record),
        },
    )


# -------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------
@app.get("/healthz")
@app.get("/health")
async def health():
    return {
        "status": "ok",
        "service": settings.service_name,
        "environment": settings.environment,
    }


for _router in (brands.router, models.router, products.router, providers.router, persons.router, users.router, files.router):
    app.include_router(_router, prefix=API_PREFIX)
