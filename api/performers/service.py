"""
Performer business logic.

Creation follows the deployment's create policy:
- insert_or_fetch: insert, or return the row with the same name in any case
  (created=False).
- upsert: insert, or update the genre of that row; always reported as created.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, status

from core.db import ForeignKeyViolation, UniqueViolation
from core.settings import SchemaProfile

from . import repository, schemas

logger = logging.getLogger(__name__)


def to_performer(row: dict[str, Any], *, profile: SchemaProfile) -> dict[str, Any]:
    performer: dict[str, Any] = {
        "performerId": int(row["performer_id"]),
        "name": str(row["name"]),
    }
    if profile.has_performer_field("genre"):
        performer["genre"] = row.get("genre")
    return performer


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Performer not found.")


def _name_conflict() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Performer name conflict, please retry.",
    )


async def list_performers(db: Any, *, profile: SchemaProfile) -> list[dict[str, Any]]:
    rows = await repository.list_performers(db, profile=profile)
    return [to_performer(row, profile=profile) for row in rows]


async def get_performer(db: Any, performer_id: int, *, profile: SchemaProfile) -> dict[str, Any]:
    row = await repository.get_performer(db, performer_id, profile=profile)
    if row is None:
        raise _not_found()
    return to_performer(row, profile=profile)


async def create_performer(
    db: Any,
    payload: schemas.PerformerWrite,
    *,
    profile: SchemaProfile,
) -> tuple[dict[str, Any], bool]:
    """
    Returns (performer, created).
    """
    genre = payload.genre if profile.has_performer_field("genre") else None

    if profile.create_policy == "upsert":
        row = await repository.upsert_by_name(db, name=payload.name, genre=genre, profile=profile)
        if row is None:
            raise _name_conflict()
        logger.info("performer_upserted performer_id=%s", row["performer_id"])
        return to_performer(row, profile=profile), True

    row = await repository.insert_if_absent(db, name=payload.name, genre=genre, profile=profile)
    if row is not None:
        logger.info("performer_created performer_id=%s", row["performer_id"])
        return to_performer(row, profile=profile), True

    existing = await repository.find_by_name(db, payload.name, profile=profile)
    if existing is None:
        # The conflicting row vanished between the two statements.
        raise _name_conflict()
    return to_performer(existing, profile=profile), False


async def update_performer(
    db: Any,
    performer_id: int,
    payload: schemas.PerformerWrite,
    *,
    profile: SchemaProfile,
) -> dict[str, Any]:
    if not profile.performer_updates:
        raise HTTPException(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            detail="Performer updates are disabled.",
        )

    genre = payload.genre if profile.has_performer_field("genre") else None
    try:
        row = await repository.update_performer(
            db,
            performer_id,
            name=payload.name,
            genre=genre,
            profile=profile,
        )
    except UniqueViolation as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Another performer already uses this name.",
        ) from exc

    if row is None:
        raise _not_found()
    logger.info("performer_updated performer_id=%s", performer_id)
    return to_performer(row, profile=profile)


async def delete_performer(db: Any, performer_id: int, *, profile: SchemaProfile) -> None:
    if not await repository.performer_exists(db, performer_id):
        raise _not_found()

    if profile.delete_policy == "restrict":
        referenced_by = await repository.count_lyrics(db, performer_id)
        if referenced_by > 0:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Performer is still referenced by {referenced_by} lyric(s).",
            )

    try:
        deleted = await repository.delete_performer(db, performer_id)
    except ForeignKeyViolation as exc:
        # A lyric was attached after the reference check.
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Performer is still referenced by lyrics.",
        ) from exc

    if not deleted:
        raise _not_found()
    logger.info("performer_deleted performer_id=%s policy=%s", performer_id, profile.delete_policy)
