# -------------------------------------------------------------------
# schemas/output_schema.py
#
# WHAT THIS FILE IS FOR
# --------------------
# Internal response schemas for the few Parts Catalog responses that
# are not a plain table row (or list of rows).
#
# NAMING CONVENTION (IMPORTANT)
# -----------------------------
# All fields in this file use **snake_case**. At the API boundary the
# dumped dicts are converted to camelCase with
#     convert_keys_snake_to_camel()
#
# DO NOT rename fields here to camelCase.
# -------------------------------------------------------------------

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class ProviderListing(BaseModel):
    """GET /providers body."""

    providers: List[Dict[str, Any]] = Field(default_factory=list)
    total_count: int = 0


class StoredObject(BaseModel):
    """POST /files/upload body."""

    bucket: str
    path: str
    storage_path: str
    content_type: str
    size: int = Field(..., ge=0)
