"""Naming helpers.

Centralizes deterministic sheet names and enumeration captions.
"""

from __future__ import annotations

import re

# Excel limits worksheet titles to 31 characters and forbids these.
SHEET_NAME_MAX = 31
_SHEET_FORBIDDEN_RE = re.compile(r"[\[\]:*?/\\]+")
_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def safe_sheet_name(name: str) -> str:
    """Convert an arbitrary label into a valid worksheet title.

    Rules:
    - Forbidden characters are replaced with '_'
    - Leading/trailing apostrophes and whitespace are stripped
    - The result is truncated to 31 characters
    """
    safe = _SHEET_FORBIDDEN_RE.sub("_", name).strip().strip("'").strip()
    return safe[:SHEET_NAME_MAX] or "Sheet"


def auxiliary_sheet_name(primary: str, ordinal: int = 1) -> str:
    """Name of the hidden sheet backing dropdowns for ``primary``.

    The first auxiliary sheet is ``DataFor<primary>Filters``; overflow sheets
    get a numeric suffix starting at 2.
    """
    suffix = "" if ordinal <= 1 else str(ordinal)
    base = f"DataFor{primary}Filters"
    return safe_sheet_name(base[: SHEET_NAME_MAX - len(suffix)] + suffix)


def enum_caption(member_name: str) -> str:
    """Convert an enumeration member name to a display caption.

    ``SIMPLE_PRODUCT`` and ``SimpleProduct`` both become ``Simple Product``.
    Single-letter tokens are uppercase.
    """
    spaced = _CAMEL_BOUNDARY_RE.sub(" ", member_name.replace("_", " "))
    tokens = spaced.split()
    out_tokens: list[str] = []
    for token in tokens:
        if len(token) == 1:
            out_tokens.append(token.upper())
        elif token.isupper():
            out_tokens.append(token[:1] + token[1:].lower())
        else:
            out_tokens.append(token[:1].upper() + token[1:])
    return " ".join(out_tokens)
