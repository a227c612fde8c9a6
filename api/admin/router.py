"""
Administrative maintenance endpoints (bearer ADMIN_TOKEN required).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from core.db import Database, get_db
from core.dependencies import get_profile, require_admin
from core.settings import SchemaProfile

from . import service

router = APIRouter(prefix="/api/admin", dependencies=[Depends(require_admin)])


@router.post("/import")
async def import_lyrics(
    request: Request,
    delimiter: str = Query(default=",", min_length=1, max_length=1),
    db: Database = Depends(get_db),
    profile: SchemaProfile = Depends(get_profile),
) -> dict:
    """
    Import delimited text (header row + one lyric per line) in one transaction.
    """
    raw = await request.body()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Import payload must be UTF-8 text.",
        ) from exc

    rows = service.parse_import(text, delimiter=delimiter)
    stats = await service.import_rows(db, rows, profile=profile)
    return stats.as_dict()


@router.post("/reset")
async def reset(db: Database = Depends(get_db)) -> dict:
    await service.reset(db)
    return {"ok": True}


@router.post("/seed")
async def seed(
    db: Database = Depends(get_db),
    profile: SchemaProfile = Depends(get_profile),
) -> dict:
    stats = await service.seed(db, profile=profile)
    return stats.as_dict()
