"""
Shared input normalizers.

Used by the pydantic request schemas (before-validators) and by handlers
that take raw values from paths or CSV rows.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status

NAME_MAX_LENGTH = 100
TITLE_MAX_LENGTH = 100
WORDS_MAX_LENGTH = 500
LANGUAGE_MAX_LENGTH = 35

# Ids are BIGINT (Postgres) / INTEGER (SQLite): signed 64-bit.
MAX_ID = 2**63 - 1
# popularity is a 32-bit INTEGER column on Postgres.
POPULARITY_MIN = -(2**31)
POPULARITY_MAX = 2**31 - 1


def strip_text(value: Any) -> Any:
    """
    Trim strings; leave every other value for the field type to judge.
    """
    if isinstance(value, str):
        return value.strip()
    return value


def optional_text(value: Any) -> Any:
    """
    Trim strings and turn empty ones into None.
    """
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def bool_like(value: Any) -> Any:
    """
    Map "true"/"false" (any case) to booleans. Anything else passes through.
    """
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return value


BOOLEAN_TRUE = frozenset({"t", "true", "y", "yes", "on", "1"})
BOOLEAN_FALSE = frozenset({"f", "false", "n", "no", "off", "0"})


def boolean_literal(value: Any) -> bool | None:
    """
    Read a value the way a BOOLEAN column does (Postgres literal rules).

    Raises ValueError for anything that is not a boolean literal.
    """
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in BOOLEAN_TRUE:
            return True
        if lowered in BOOLEAN_FALSE:
            return False
    raise ValueError(f"{value!r} is not a boolean value")


def parse_positive_int(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if 0 < raw <= MAX_ID else None
    text = str(raw or "").strip()
    try:
        value = int(text)
    except ValueError:
        return None
    return value if 0 < value <= MAX_ID else None


def parse_id(raw: Any, *, label: str) -> int:
    value = parse_positive_int(raw)
    if value is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {label} id.",
        )
    return value
