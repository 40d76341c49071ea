"""
functions/catalog/duplicate_guard.py

WHAT THIS FILE IS FOR
---------------------
This module decides whether a new named entity (car model, provider)
may be inserted, given the names of the active entities of the same kind.

DECISION RULE
-------------
- override=True               -> Proceed (caller bypassed the check,
                                 e.g. ?forceCreate on the endpoint)
- first existing name, in the given order, whose similarity to the
  candidate is >= threshold   -> Conflict(matched_name, position)
- no such name                -> Proceed

First-match, not best-match: the order of `existing_active_names` decides
which record is reported. Routes fetch candidates ordered by primary key
so the reported match is stable between runs.

WHAT THIS FILE IS NOT FOR
-------------------------
- Fetching existing records or inserting the new one (routes + DataStore)
- Atomicity: two concurrent creates can both get Proceed
- Validating the threshold range (caller supplies a value in [0, 1])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Sequence, Union

from functions.utils.string_similarity import similarity

DEFAULT_SIMILARITY_THRESHOLD = 0.8


@dataclass(frozen=True)
class Proceed:
    pass


@dataclass(frozen=True)
class Conflict:
    matched_name: str
    # index into the caller's sequence; not part of equality
    position: int = field(default=0, compare=False)


Decision = Union[Proceed, Conflict]


def guarded_create(
    candidate_name: str,
    existing_active_names: Iterable[str],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    override: bool = False,
) -> Decision:
    """Return Proceed or the first Conflict for ``candidate_name``."""
    if override:
        return Proceed()

    for position, existing_name in enumerate(existing_active_names):
        if similarity(candidate_name, existing_name) >= threshold:
            return Conflict(matched_name=existing_name, position=position)

    return Proceed()


def find_similar_record(
    candidate_name: str,
    records: Sequence[Dict[str, Any]],
    *,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    override: bool = False,
    name_field: str = "name",
) -> Optional[Dict[str, Any]]:
    """
    Convenience wrapper for routes working with fetched rows.

    Rows whose name is missing are compared as the empty string.
    Returns the conflicting row, or None when the insert may proceed.
    """
    names = [str(r.get(name_field) or "") for r in records]
    decision = guarded_create(candidate_name, names, threshold, override)
    if isinstance(decision, Conflict):
        return records[decision.position]
    return None
