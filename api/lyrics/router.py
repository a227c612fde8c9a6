"""
Lyric API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from core.db import Database, get_db
from core.dependencies import get_profile
from core.settings import SchemaProfile
from core.validation import parse_id

from . import filters, schemas, service

router = APIRouter()

NO_STORE = {"Cache-Control": "no-store"}


def _page_response(lyrics: list[dict], *, total: int, page: filters.Page) -> JSONResponse:
    return JSONResponse(
        content=lyrics,
        headers={
            **NO_STORE,
            "X-Total-Count": str(total),
            "X-Page": str(page.page),
            "X-Page-Size": str(page.page_size),
        },
    )


@router.get("/api/lyrics")
async def list_lyrics(
    language: str | None = None,
    era: str | None = None,
    release_date: str | None = Query(default=None, alias="releaseDate"),
    text: str | None = None,
    search_query_title: str | None = Query(default=None, alias="SearchQueryTitle"),
    page: str | None = None,
    page_size: str | None = Query(default=None, alias="pageSize"),
    db: Database = Depends(get_db),
    profile: SchemaProfile = Depends(get_profile),
) -> JSONResponse:
    """
    Filtered, paginated listing. The total match count is in X-Total-Count.
    """
    lyric_filters = filters.parse_filters(
        language=language,
        era=era,
        release_date=release_date,
        text=text,
        search_query_title=search_query_title,
    )
    paging = filters.parse_page(page, page_size)
    lyrics, total = await service.list_lyrics(db, lyric_filters, paging, profile=profile)
    return _page_response(lyrics, total=total, page=paging)


@router.get("/api/performers/{performer_id}/lyrics")
async def list_performer_lyrics(
    performer_id: str,
    page: str | None = None,
    page_size: str | None = Query(default=None, alias="pageSize"),
    db: Database = Depends(get_db),
    profile: SchemaProfile = Depends(get_profile),
) -> JSONResponse:
    lyric_filters = filters.parse_filters(performer_id=parse_id(performer_id, label="performer"))
    paging = filters.parse_page(page, page_size)
    lyrics, total = await service.list_lyrics(db, lyric_filters, paging, profile=profile)
    return _page_response(lyrics, total=total, page=paging)


@router.get("/api/lyrics/{lyric_id}")
async def get_lyric(
    lyric_id: str,
    db: Database = Depends(get_db),
    profile: SchemaProfile = Depends(get_profile),
) -> JSONResponse:
    lyric = await service.get_lyric(db, parse_id(lyric_id, label="lyric"), profile=profile)
    return JSONResponse(content=lyric, headers=NO_STORE)


@router.post("/api/lyrics", status_code=status.HTTP_201_CREATED)
async def create_lyric(
    payload: schemas.LyricCreate,
    db: Database = Depends(get_db),
    profile: SchemaProfile = Depends(get_profile),
) -> dict:
    return await service.create_lyric(db, payload, profile=profile)


@router.put("/api/lyrics/{lyric_id}")
async def update_lyric(
    lyric_id: str,
    payload: schemas.LyricUpdate,
    db: Database = Depends(get_db),
    profile: SchemaProfile = Depends(get_profile),
) -> dict:
    return await service.update_lyric(db, parse_id(lyric_id, label="lyric"), payload, profile=profile)


@router.delete("/api/lyrics/{lyric_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_lyric(
    lyric_id: str,
    db: Database = Depends(get_db),
) -> Response:
    await service.delete_lyric(db, parse_id(lyric_id, label="lyric"))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
