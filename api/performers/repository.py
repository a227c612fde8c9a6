"""
Performer persistence (raw SQL).

Every function takes the database handle (or a transaction session) as its
first argument; both expose fetch_one / fetch_all / execute.
"""

from __future__ import annotations

from typing import Any

from core.settings import SchemaProfile


def _columns(profile: SchemaProfile) -> str:
    columns = ["performer_id", "name"]
    if profile.has_performer_field("genre"):
        columns.append("genre")
    return ", ".join(columns)


async def list_performers(db: Any, *, profile: SchemaProfile) -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {_columns(profile)}
        FROM performers
        ORDER BY lower(name) ASC, performer_id ASC
        """
    )


async def get_performer(db: Any, performer_id: int, *, profile: SchemaProfile) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_columns(profile)}
        FROM performers
        WHERE performer_id = $1
        """,
        performer_id,
    )


async def performer_exists(db: Any, performer_id: int) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM performers
        WHERE performer_id = $1
        LIMIT 1
        """,
        performer_id,
    )
    return row is not None


async def find_by_name(db: Any, name: str, *, profile: SchemaProfile) -> dict[str, Any] | None:
    """
    Case-insensitive lookup; names are unique ignoring case.
    """
    return await db.fetch_one(
        f"""
        SELECT {_columns(profile)}
        FROM performers
        WHERE lower(name) = lower($1)
        LIMIT 1
        """,
        name,
    )


async def insert_if_absent(
    db: Any,
    *,
    name: str,
    genre: str | None,
    profile: SchemaProfile,
) -> dict[str, Any] | None:
    """
    Insert a performer; returns None when the name is taken (in any case).
    """
    if profile.has_performer_field("genre"):
        return await db.fetch_one(
            f"""
            INSERT INTO performers (name, genre)
            VALUES ($1, $2)
            ON CONFLICT DO NOTHING
            RETURNING {_columns(profile)}
            """,
            name,
            genre,
        )
    return await db.fetch_one(
        f"""
        INSERT INTO performers (name)
        VALUES ($1)
        ON CONFLICT DO NOTHING
        RETURNING {_columns(profile)}
        """,
        name,
    )


async def upsert_by_name(
    db: Any,
    *,
    name: str,
    genre: str | None,
    profile: SchemaProfile,
) -> dict[str, Any] | None:
    """
    Insert a performer or update the row whose name matches ignoring case.
    A provided genre overwrites the stored one; an omitted genre keeps it.

    Returns None only if the conflicting row was deleted in between.
    """
    row = await insert_if_absent(db, name=name, genre=genre, profile=profile)
    if row is not None:
        return row
    if not profile.has_performer_field("genre"):
        return await find_by_name(db, name, profile=profile)
    return await db.fetch_one(
        f"""
        UPDATE performers
        SET genre = COALESCE($2, genre)
        WHERE lower(name) = lower($1)
        RETURNING {_columns(profile)}
        """,
        name,
        genre,
    )


async def update_performer(
    db: Any,
    performer_id: int,
    *,
    name: str,
    genre: str | None,
    profile: SchemaProfile,
) -> dict[str, Any] | None:
    if profile.has_performer_field("genre"):
        return await db.fetch_one(
            f"""
            UPDATE performers
            SET name = $2,
                genre = $3
            WHERE performer_id = $1
            RETURNING {_columns(profile)}
            """,
            performer_id,
            name,
            genre,
        )
    return await db.fetch_one(
        f"""
        UPDATE performers
        SET name = $2
        WHERE performer_id = $1
        RETURNING {_columns(profile)}
        """,
        performer_id,
        name,
    )


async def count_lyrics(db: Any, performer_id: int) -> int:
    row = await db.fetch_one(
        """
        SELECT count(*) AS n
        FROM lyrics
        WHERE performer_id = $1
        """,
        performer_id,
    )
    return int((row or {}).get("n", 0))


async def delete_performer(db: Any, performer_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM performers
        WHERE performer_id = $1
        RETURNING performer_id
        """,
        performer_id,
    )
    return row is not None


async def delete_all(db: Any) -> None:
    await db.execute("DELETE FROM performers")
