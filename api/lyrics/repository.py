"""
Lyric persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core.db import InvalidValue
from core.settings import SchemaProfile
from core.validation import boolean_literal

from . import filters

# Wire field -> column.
LYRIC_COLUMNS: dict[str, str] = {
    "performerId": "performer_id",
    "songTitle": "song_title",
    "words": "words",
    "language": "language",
    "spotLink": "spot_link",
    "imageUrl": "image_url",
    "previewUrl": "preview_url",
    "popularity": "popularity",
    "era": "era",
    "classic": "classic",
}


def _bind_values(values: dict[str, Any], fields: tuple[str, ...]) -> list[Any]:
    """
    Column values in field order. classic is read as a BOOLEAN literal so
    both backends accept and reject the same inputs.
    """
    bound = []
    for field in fields:
        value = values.get(field)
        if field == "classic":
            try:
                value = boolean_literal(value)
            except ValueError as exc:
                raise InvalidValue(str(exc)) from exc
        bound.append(value)
    return bound


async def list_lyrics(
    db: Any,
    lyric_filters: filters.LyricFilters,
    page: filters.Page,
    *,
    profile: SchemaProfile,
) -> tuple[list[dict[str, Any]], int]:
    """
    Return (rows for the requested page, total matching rows).
    """
    query = filters.build_lyric_query(lyric_filters, page, profile=profile)
    count_row = await db.fetch_one(query.count_sql, *query.count_params)
    rows = await db.fetch_all(query.list_sql, *query.list_params)
    return rows, int((count_row or {}).get("total", 0))


async def get_lyric(db: Any, lyric_id: int, *, profile: SchemaProfile) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {filters.select_columns(profile)}
        {filters.FROM_CLAUSE}
        WHERE l.lyric_id = $1
        """,
        lyric_id,
    )


async def insert_lyric(db: Any, values: dict[str, Any], *, profile: SchemaProfile) -> int:
    """
    Insert one lyric from wire-named values and return its id.
    """
    fields = profile.lyric_fields
    columns = ", ".join(LYRIC_COLUMNS[f] for f in fields)
    placeholders = ", ".join(f"${i}" for i in range(1, len(fields) + 1))
    row = await db.fetch_one(
        f"""
        INSERT INTO lyrics ({columns})
        VALUES ({placeholders})
        RETURNING lyric_id
        """,
        *_bind_values(values, fields),
    )
    if row is None or "lyric_id" not in row:
        raise RuntimeError("Failed to insert lyric.")
    return int(row["lyric_id"])


async def update_lyric(
    db: Any,
    lyric_id: int,
    values: dict[str, Any],
    *,
    profile: SchemaProfile,
) -> bool:
    fields = profile.lyric_fields
    assignments = ",\n            ".join(
        f"{LYRIC_COLUMNS[f]} = ${i}" for i, f in enumerate(fields, start=2)
    )
    row = await db.fetch_one(
        f"""
        UPDATE lyrics
        SET {assignments}
        WHERE lyric_id = $1
        RETURNING lyric_id
        """,
        lyric_id,
        *_bind_values(values, fields),
    )
    return row is not None


async def delete_lyric(db: Any, lyric_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM lyrics
        WHERE lyric_id = $1
        RETURNING lyric_id
        """,
        lyric_id,
    )
    return row is not None


async def lyric_exists(db: Any, *, performer_id: int, song_title: str) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM lyrics
        WHERE performer_id = $1
          AND lower(song_title) = lower($2)
        LIMIT 1
        """,
        performer_id,
        song_title,
    )
    return row is not None


async def delete_all(db: Any) -> None:
    await db.execute("DELETE FROM lyrics")
