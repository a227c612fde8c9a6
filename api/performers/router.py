"""
Performer API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from core.db import Database, get_db
from core.dependencies import get_profile
from core.settings import SchemaProfile
from core.validation import parse_id

from . import schemas, service

router = APIRouter(prefix="/api/performers")

NO_STORE = {"Cache-Control": "no-store"}


@router.get("")
async def list_performers(
    db: Database = Depends(get_db),
    profile: SchemaProfile = Depends(get_profile),
) -> JSONResponse:
    performers = await service.list_performers(db, profile=profile)
    return JSONResponse(content=performers, headers=NO_STORE)


@router.get("/{performer_id}")
async def get_performer(
    performer_id: str,
    db: Database = Depends(get_db),
    profile: SchemaProfile = Depends(get_profile),
) -> JSONResponse:
    performer = await service.get_performer(db, parse_id(performer_id, label="performer"), profile=profile)
    return JSONResponse(content=performer, headers=NO_STORE)


@router.post("")
async def create_performer(
    payload: schemas.PerformerWrite,
    db: Database = Depends(get_db),
    profile: SchemaProfile = Depends(get_profile),
) -> JSONResponse:
    performer, created = await service.create_performer(db, payload, profile=profile)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        content=performer,
    )


@router.put("/{performer_id}")
async def update_performer(
    performer_id: str,
    payload: schemas.PerformerWrite,
    db: Database = Depends(get_db),
    profile: SchemaProfile = Depends(get_profile),
) -> dict:
    return await service.update_performer(
        db,
        parse_id(performer_id, label="performer"),
        payload,
        profile=profile,
    )


@router.delete("/{performer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_performer(
    performer_id: str,
    db: Database = Depends(get_db),
    profile: SchemaProfile = Depends(get_profile),
) -> Response:
    await service.delete_performer(db, parse_id(performer_id, label="performer"), profile=profile)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
