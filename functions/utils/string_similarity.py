"""
functions/utils/string_similarity.py

WHAT THIS FILE IS FOR
---------------------
Normalized edit-distance similarity between two names, used to flag
probable duplicates before a new model or provider is inserted.

SCORING RULES
-------------
- Both inputs are lowercased and stripped of surrounding whitespace.
- Both empty            -> 1.0
- Exactly one empty     -> 0.0
- Otherwise             -> 1 - levenshtein(a, b) / max(len(a), len(b))

Levenshtein distance uses unit cost for insertion, deletion and
substitution. The DP keeps two rows only, sized on the shorter string;
the result is identical to the full (len(a)+1) x (len(b)+1) table.

WHAT THIS FILE IS NOT FOR
-------------------------
- Token / phonetic matching
- Threshold decisions (see functions/catalog/duplicate_guard.py)
"""

from __future__ import annotations


def levenshtein_distance(a: str, b: str) -> int:
    """Unit-cost edit distance between ``a`` and ``b``."""
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i] + [0] * len(b)
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current[j] = min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost,  # substitution
            )
        previous = current

    return previous[len(b)]


def similarity(a: str, b: str) -> float:
    """
    Return a similarity score in [0, 1] for two names.

    similarity("Ford", "ford") == 1.0
    similarity("Toyota", "Toyotta") ~= 0.857
    """
    left = a.lower().strip()
    right = b.lower().strip()

    if not left or not right:
        return 1.0 if len(left) == len(right) else 0.0

    distance = levenshtein_distance(left, right)
    return 1.0 - distance / max(len(left), len(right))
