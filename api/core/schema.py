"""
Table definitions per schema profile and dialect.

`init_schema` creates missing tables on startup (DB_INIT_SCHEMA=true).
Existing tables are left untouched; changing profiles on an existing
database is a migration concern, not handled here.
"""

from __future__ import annotations

import logging

from .db import Database
from .settings import SchemaProfile

logger = logging.getLogger(__name__)


def _id_column(dialect: str, name: str) -> str:
    if dialect == "postgres":
        return f"{name} BIGSERIAL PRIMARY KEY"
    return f"{name} INTEGER PRIMARY KEY AUTOINCREMENT"


def performers_ddl(profile: SchemaProfile, *, dialect: str) -> str:
    columns = [
        _id_column(dialect, "performer_id"),
        "name TEXT NOT NULL",
    ]
    if profile.has_performer_field("genre"):
        columns.append("genre TEXT")
    body = ",\n  ".join(columns)
    return f"CREATE TABLE IF NOT EXISTS performers (\n  {body}\n)"


def lyrics_ddl(profile: SchemaProfile, *, dialect: str) -> str:
    on_delete = "CASCADE" if profile.delete_policy == "cascade" else "RESTRICT"
    ref_type = "BIGINT" if dialect == "postgres" else "INTEGER"
    columns = [
        _id_column(dialect, "lyric_id"),
        f"performer_id {ref_type} NOT NULL REFERENCES performers (performer_id) ON DELETE {on_delete}",
        "song_title TEXT NOT NULL",
        "words TEXT NOT NULL",
        "language TEXT NOT NULL",
        "spot_link TEXT",
    ]
    if profile.has_lyric_field("imageUrl"):
        columns.append("image_url TEXT")
    if profile.has_lyric_field("previewUrl"):
        columns.append("preview_url TEXT")
    if profile.has_lyric_field("popularity"):
        columns.append("popularity INTEGER")
    if profile.has_lyric_field("era"):
        columns.append("era TEXT")
    if profile.has_lyric_field("classic"):
        columns.append("classic BOOLEAN")
    body = ",\n  ".join(columns)
    return f"CREATE TABLE IF NOT EXISTS lyrics (\n  {body}\n)"


def schema_statements(profile: SchemaProfile, *, dialect: str) -> list[str]:
    return [
        performers_ddl(profile, dialect=dialect),
        lyrics_ddl(profile, dialect=dialect),
        # Names are unique regardless of case.
        "CREATE UNIQUE INDEX IF NOT EXISTS performers_name_lower_key ON performers (lower(name))",
        "CREATE INDEX IF NOT EXISTS lyrics_performer_id_idx ON lyrics (performer_id)",
        "CREATE INDEX IF NOT EXISTS lyrics_language_idx ON lyrics (language)",
    ]


async def init_schema(db: Database, profile: SchemaProfile) -> None:
    async with db.transaction() as session:
        for statement in schema_statements(profile, dialect=db.dialect):
            await session.execute(statement)
    logger.info("schema_ready profile=%s dialect=%s", profile.name, db.dialect)
