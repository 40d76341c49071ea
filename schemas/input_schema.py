# -------------------------------------------------------------------
# schemas/input_schema.py
#
# WHAT THIS FILE IS FOR
# --------------------
# Public request schemas for the create/update payloads of the
# Parts Catalog API that carry required fields.
#
# KEY DESIGN DECISION
# -------------------
# Every schema accepts **both camelCase and snake_case** field names:
#   - alias=camelCase on each field
#   - populate_by_name=True in model_config
#
# Payloads without required fields (persons, files, generic PUTs) are
# not modelled here; routes convert their keys with
# convert_keys_camel_to_snake() and pass them to the store.
#
# WHAT THIS FILE IS NOT FOR
# ------------------------
# This module does NOT:
# - Perform business logic (duplicate guard, compensation)
# - Call the data store
# - Normalize response payloads
# -------------------------------------------------------------------

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class CarModelCreateRequest(BaseModel):
    """Payload for POST /models."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"name": "F150", "brandId": 16, "active": True}},
    )

    name: str = Field(..., min_length=1)
    brand_id: int = Field(..., alias="brandId")
    active: Optional[bool] = None

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ProviderCreateRequest(BaseModel):
    """Payload for POST /providers."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "FRONTERA",
                "phoneNumber": "8129710460",
                "address": "AV. CHAPULTEPEC 2321",
                "comments": None,
                "active": True,
            }
        },
    )

    name: str = Field(..., min_length=1)
    phone_number: str = Field(..., alias="phoneNumber", min_length=1)
    address: str = Field(..., min_length=1)
    comments: Optional[str] = None
    active: Optional[bool] = None

    def to_record(self) -> Dict[str, Any]:
        record = self.model_dump(exclude_none=True)
        record.setdefault("comments", self.comments)
        return record


class FileAttachment(BaseModel):
    """Image file reference embedded in brand payloads."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    mime_type: Optional[str] = Field(None, alias="mimeType")
    storage_path: Optional[str] = Field(None, alias="storagePath")


class BrandCreateRequest(BaseModel):
    """Payload for POST /brands."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "Acura",
                "brandTypeId": 1,
                "file": {
                    "name": "acura.png",
                    "mimeType": "image/png",
                    "storagePath": "/brands/logos/acura.png",
                },
            }
        },
    )

    name: str = Field(..., min_length=1)
    brand_type_id: int = Field(..., alias="brandTypeId")
    active: bool = True
    file: Optional[FileAttachment] = None


class BrandUpdateRequest(BaseModel):
    """Payload for PUT /brands?id=<id>."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    brand_type_id: Optional[int] = Field(None, alias="brandTypeId")
    active: Optional[bool] = None
    file: Optional[FileAttachment] = None

    def brand_values(self) -> Dict[str, Any]:
        return self.model_dump(include={"name", "brand_type_id", "active"}, exclude_none=True)


class ProductCreateRequest(BaseModel):
    """
    Payload for POST /products.

    Only `name` and `productTypeId` are checked; the full camelCase body
    (files, providers, prices, carModels, ...) is forwarded to the
    create_product_with_relations procedure.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field(..., min_length=1)
    product_type_id: int = Field(..., alias="productTypeId")

    def to_procedure_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class UserCreateRequest(BaseModel):
    """Payload for POST /users."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "email": "usuario@ejemplo.com",
                "password": "tuPasswordSegura",
                "person": {
                    "name": "Juan",
                    "lastName": "Pérez",
                    "birthDate": "1990-01-01",
                    "email": "usuario@ejemplo.com",
                    "phoneNumber": "1234567890",
                    "address": "Calle Falsa 123",
                },
                "roleId": 1,
                "active": 1,
            }
        },
    )

    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    person: Dict[str, Any]
    role_id: int = Field(..., alias="roleId")
    active: int = 1


class UserUpdateRequest(BaseModel):
    """Payload for PUT /users?id=<id>."""

    model_config = ConfigDict(populate_by_name=True)

    person: Optional[Dict[str, Any]] = None
    role_id: Optional[int] = Field(None, alias="roleId")
    active: Optional[int] = None
