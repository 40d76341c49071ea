"""
functions/catalog/status_mapper.py

WHAT THIS FILE IS FOR
---------------------
This module defines the *single canonical rule* for mapping catalog
failures onto the public HTTP contract.

PUBLIC CONTRACT RULE
--------------------
- RecordNotFoundError            -> 404  NOT_FOUND
- any other DataStoreError       -> 500  DATA_STORE_FAILED
- DuplicateNameError             -> 409  DUPLICATE_NAME

Malformed input (400) and unsupported methods (405) are produced by the
HTTP layer itself and do not pass through here.

WHAT THIS FILE IS NOT FOR
-------------------------
This module MUST NOT log, raise, or build responses.
It performs **pure, deterministic mapping only**.
"""

from __future__ import annotations

from typing import Any, Dict, Tuple

from functions.catalog.data_store import DataStoreError, RecordNotFoundError


class DuplicateNameError(Exception):
    """A create was refused because an active record has a similar name."""

    def __init__(self, entity_kind: str, candidate_name: str, similar_record: Dict[str, Any]) -> None:
        super().__init__(f"A {entity_kind} with a similar name already exists")
        self.entity_kind = entity_kind
        self.candidate_name = candidate_name
        self.similar_record = similar_record


def map_catalog_error(exc: Exception) -> Tuple[int, str]:
    """Return (http_status, error_code) for a catalog failure."""
    if isinstance(exc, DuplicateNameError):
        return 409, "DUPLICATE_NAME"
    if isinstance(exc, RecordNotFoundError):
        return 404, "NOT_FOUND"
    if isinstance(exc, DataStoreError):
        return 500, "DATA_STORE_FAILED"
    return 500, "INTERNAL_ERROR"
