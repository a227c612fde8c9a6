"""
Administrative maintenance: bulk import, reset, seed.

Each operation runs in one transaction; a failing row rolls back the
whole operation.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from fastapi import HTTPException, status
from pydantic import ValidationError

from core.db import Database
from core.errors import describe_errors
from core.settings import SchemaProfile
from lyrics import repository as lyric_repository
from lyrics import schemas as lyric_schemas
from performers import repository as performer_repository

from . import schemas
from .seed_data import SEED_ROWS

logger = logging.getLogger(__name__)

MAX_IMPORT_ROWS = 5000


@dataclass(frozen=True)
class WriteStats:
    performers: int
    lyrics: int

    def as_dict(self) -> dict[str, int]:
        return {"performers": self.performers, "lyrics": self.lyrics}


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _clean_cells(record: Mapping[str | None, Any]) -> dict[str, Any]:
    # DictReader puts surplus cells under the None key.
    return {str(k).strip(): v for k, v in record.items() if k is not None and str(k).strip()}


def parse_import(text: str, *, delimiter: str = ",") -> list[schemas.ImportRow]:
    """
    Parse and validate delimited text with a header row.
    """
    if not text.strip():
        raise _bad_request("Import payload is empty.")

    reader = csv.DictReader(io.StringIO(text), delimiter=delimiter)
    header = [str(name).strip() for name in (reader.fieldnames or [])]
    missing = {"performer", "songTitle", "words", "language"} - set(header)
    if missing:
        raise _bad_request(f"Import header is missing column(s): {', '.join(sorted(missing))}.")

    rows: list[schemas.ImportRow] = []
    try:
        for record in reader:
            if len(rows) >= MAX_IMPORT_ROWS:
                raise _bad_request(f"Import is limited to {MAX_IMPORT_ROWS} rows.")
            try:
                rows.append(schemas.ImportRow.model_validate(_clean_cells(record)))
            except ValidationError as exc:
                raise _bad_request(f"Line {reader.line_num}: {describe_errors(exc.errors())}") from exc
    except csv.Error as exc:
        raise _bad_request(f"Line {reader.line_num}: {exc}") from exc

    if not rows:
        raise _bad_request("Import payload has no data rows.")
    return rows


async def _write_rows(
    session: Any,
    rows: Iterable[schemas.ImportRow],
    *,
    profile: SchemaProfile,
    skip_existing_lyrics: bool,
) -> WriteStats:
    performer_ids: dict[str, int] = {}
    performers_created = 0
    lyrics_created = 0

    for row in rows:
        performer_id = performer_ids.get(row.performer.lower())
        if performer_id is None:
            genre = row.genre if profile.has_performer_field("genre") else None
            created = await performer_repository.insert_if_absent(
                session, name=row.performer, genre=genre, profile=profile
            )
            if created is not None:
                performers_created += 1
                performer_id = int(created["performer_id"])
            else:
                existing = await performer_repository.find_by_name(session, row.performer, profile=profile)
                if existing is None:
                    raise RuntimeError(f"Performer {row.performer!r} vanished during import.")
                performer_id = int(existing["performer_id"])
            performer_ids[row.performer.lower()] = performer_id

        if skip_existing_lyrics and await lyric_repository.lyric_exists(
            session, performer_id=performer_id, song_title=row.song_title
        ):
            continue

        values = lyric_schemas.to_fields(row)
        values["performerId"] = performer_id
        await lyric_repository.insert_lyric(session, values, profile=profile)
        lyrics_created += 1

    return WriteStats(performers=performers_created, lyrics=lyrics_created)


async def import_rows(
    db: Database,
    rows: list[schemas.ImportRow],
    *,
    profile: SchemaProfile,
) -> WriteStats:
    async with db.transaction() as session:
        stats = await _write_rows(session, rows, profile=profile, skip_existing_lyrics=False)
    logger.info("admin_import performers=%s lyrics=%s", stats.performers, stats.lyrics)
    return stats


async def reset(db: Database) -> None:
    async with db.transaction() as session:
        await lyric_repository.delete_all(session)
        await performer_repository.delete_all(session)
    logger.warning("admin_reset all lyrics and performers deleted")


async def seed(db: Database, *, profile: SchemaProfile) -> WriteStats:
    rows = [schemas.ImportRow.model_validate(record) for record in SEED_ROWS]
    async with db.transaction() as session:
        stats = await _write_rows(session, rows, profile=profile, skip_existing_lyrics=True)
    logger.info("admin_seed performers=%s lyrics=%s", stats.performers, stats.lyrics)
    return stats
