"""
functions/utils/json_naming_converter.py

WHAT THIS FILE IS FOR
---------------------
This module provides the **recursive JSON key normalization utility**
used by the Parts Catalog API at both edges of every endpoint:

- Inbound:  camelCase request bodies  -> snake_case table columns
- Outbound: snake_case database rows  -> camelCase response payloads

It rewrites dictionary keys while preserving values, list order,
nesting depth and key insertion order.

KEY REWRITE RULES
-----------------
snake -> camel:
    Every "_" immediately followed by a lowercase ASCII letter is replaced
    by the uppercase form of that letter.
        "brand_type_id" -> "brandTypeId"
    Anything else after an underscore (digit, uppercase letter, end of key)
    is left untouched, underscore included.
        "address_2" -> "address_2"

camel -> snake:
    Every uppercase ASCII letter "X" is replaced by "_x".
        "brandTypeId" -> "brand_type_id"
    This applies to a leading uppercase letter as well:
        "Name" -> "_name"
    That asymmetry is the current contract and is pinned by tests.
    Round-tripping is only guaranteed for keys that were lowercase
    snake_case to begin with.

WHAT THIS FILE IS NOT FOR
-------------------------
This module MUST NOT:
- Perform request validation
- Modify values or business semantics
- Perform I/O or logging

It is a **pure transformation utility**.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Callable


_SNAKE_RE = re.compile(r"_([a-z])")
_UPPER_RE = re.compile(r"[A-Z]")


class CaseDirection(str, Enum):
    TO_CAMEL = "to_camel"
    TO_SNAKE = "to_snake"


def snake_to_camel(s: str) -> str:
    """Convert a snake_case key to camelCase."""
    if "_" not in s:
        return s
    return _SNAKE_RE.sub(lambda m: m.group(1).upper(), s)


def camel_to_snake(s: str) -> str:
    """Convert a camelCase key to snake_case ("Name" becomes "_name")."""
    return _UPPER_RE.sub(lambda m: "_" + m.group(0).lower(), s)


_KEY_CONVERTERS: dict[CaseDirection, Callable[[str], str]] = {
    CaseDirection.TO_CAMEL: snake_to_camel,
    CaseDirection.TO_SNAKE: camel_to_snake,
}


def convert_keys(obj: Any, direction: CaseDirection) -> Any:
    """
    Recursively rewrite every dict key of a JSON-like value.

    Args:
        obj:
            Any JSON-like object (dict / list / primitive), arbitrarily nested.
        direction:
            CaseDirection.TO_CAMEL or CaseDirection.TO_SNAKE

    Returns:
        New object with converted keys (input is not mutated).
        Non-string keys are kept as-is.
    """
    convert_key = _KEY_CONVERTERS[CaseDirection(direction)]
    return _convert(obj, convert_key)


def _convert(obj: Any, convert_key: Callable[[str], str]) -> Any:
    # ---------- list ----------
    if isinstance(obj, list):
        return [_convert(x, convert_key) for x in obj]

    # ---------- dict ----------
    if isinstance(obj, dict):
        out: dict[Any, Any] = {}
        for key, value in obj.items():
            new_key = convert_key(key) if isinstance(key, str) else key
            out[new_key] = _convert(value, convert_key)
        return out

    # ---------- primitive ----------
    return obj


def convert_keys_snake_to_camel(obj: Any) -> Any:
    return convert_keys(obj, CaseDirection.TO_CAMEL)


def convert_keys_camel_to_snake(obj: Any) -> Any:
    return convert_keys(obj, CaseDirection.TO_SNAKE)
