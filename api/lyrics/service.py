"""
Lyric business logic.

Writes check the referenced performer first so a missing performer is a
404 with a clear message; a foreign-key violation reported by the store
anyway (concurrent delete) becomes a 409.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, status

from core.db import ForeignKeyViolation
from core.settings import SchemaProfile
from performers import repository as performer_repository

from . import filters, repository, schemas

logger = logging.getLogger(__name__)


def _as_bool(value: Any) -> Any:
    # SQLite hands booleans back as 0/1.
    if isinstance(value, int) and not isinstance(value, bool) and value in (0, 1):
        return bool(value)
    return value


def to_lyric(row: dict[str, Any], *, profile: SchemaProfile) -> dict[str, Any]:
    performer: dict[str, Any] | None = None
    if row.get("performer_name") is not None:
        performer = {
            "performerId": int(row["performer_id"]),
            "name": str(row["performer_name"]),
        }
        if profile.has_performer_field("genre"):
            performer["genre"] = row.get("performer_genre")

    lyric: dict[str, Any] = {
        "lyricId": int(row["lyric_id"]),
        "performerId": int(row["performer_id"]),
        "performer": performer,
        "songTitle": row["song_title"],
        "words": row["words"],
        "language": row["language"],
        "spotLink": row.get("spot_link"),
    }
    if profile.has_lyric_field("imageUrl"):
        lyric["imageUrl"] = row.get("image_url")
    if profile.has_lyric_field("previewUrl"):
        lyric["previewUrl"] = row.get("preview_url")
    if profile.has_lyric_field("popularity"):
        popularity = row.get("popularity")
        lyric["popularity"] = int(popularity) if isinstance(popularity, (int, float)) else popularity
    if profile.has_lyric_field("era"):
        lyric["era"] = row.get("era")
    if profile.has_lyric_field("classic"):
        lyric["classic"] = _as_bool(row.get("classic"))
    return lyric


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lyric not found.")


async def _ensure_performer(db: Any, performer_id: int) -> None:
    if not await performer_repository.performer_exists(db, performer_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Performer not found.")


def _fk_conflict(exc: ForeignKeyViolation) -> HTTPException:
    logger.info("lyric_fk_violation error=%s", exc)
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Unknown performerId (foreign key violation).",
    )


async def list_lyrics(
    db: Any,
    lyric_filters: filters.LyricFilters,
    page: filters.Page,
    *,
    profile: SchemaProfile,
) -> tuple[list[dict[str, Any]], int]:
    rows, total = await repository.list_lyrics(db, lyric_filters, page, profile=profile)
    return [to_lyric(row, profile=profile) for row in rows], total


async def get_lyric(db: Any, lyric_id: int, *, profile: SchemaProfile) -> dict[str, Any]:
    row = await repository.get_lyric(db, lyric_id, profile=profile)
    if row is None:
        raise _not_found()
    return to_lyric(row, profile=profile)


async def create_lyric(db: Any, payload: schemas.LyricCreate, *, profile: SchemaProfile) -> dict[str, Any]:
    values = schemas.to_fields(payload)
    await _ensure_performer(db, payload.performer_id)

    try:
        lyric_id = await repository.insert_lyric(db, values, profile=profile)
    except ForeignKeyViolation as exc:
        raise _fk_conflict(exc) from exc

    logger.info("lyric_created lyric_id=%s performer_id=%s", lyric_id, payload.performer_id)
    return await get_lyric(db, lyric_id, profile=profile)


async def update_lyric(
    db: Any,
    lyric_id: int,
    payload: schemas.LyricUpdate,
    *,
    profile: SchemaProfile,
) -> dict[str, Any]:
    current = await get_lyric(db, lyric_id, profile=profile)

    changes = schemas.to_fields(payload, only_set=True)
    merged = {field: changes.get(field, current.get(field)) for field in profile.lyric_fields}
    await _ensure_performer(db, int(merged["performerId"]))

    try:
        updated = await repository.update_lyric(db, lyric_id, merged, profile=profile)
    except ForeignKeyViolation as exc:
        raise _fk_conflict(exc) from exc

    if not updated:
        raise _not_found()
    logger.info("lyric_updated lyric_id=%s fields=%s", lyric_id, ",".join(sorted(changes)))
    return await get_lyric(db, lyric_id, profile=profile)


async def delete_lyric(db: Any, lyric_id: int) -> None:
    if not await repository.delete_lyric(db, lyric_id):
        raise _not_found()
    logger.info("lyric_deleted lyric_id=%s", lyric_id)
