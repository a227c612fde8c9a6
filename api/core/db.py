"""
Async database access helpers (raw SQL).

Two interchangeable backends share one interface:
- `PostgresDatabase`: a managed network database through an asyncpg pool.
- `SqliteDatabase`: an embedded single-file database through aiosqlite.

The database handle is opened in the app lifespan (see `api/main.py`),
stored on `app.state.db`, and reaches handlers through `get_db`.

SQL parameter style:
- queries are written with positional placeholders: $1, $2, $3, ...
- the SQLite backend rewrites them to SQLite's numbered form (?1, ?2, ...),
  so one placeholder may be referenced several times in both dialects.

Driver errors are translated into `StoreError` subclasses so callers never
depend on asyncpg or sqlite3 exception types.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import AsyncIterator, Iterable, Sequence
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import aiosqlite
import asyncpg
from fastapi import Request

from .settings import Settings

logger = logging.getLogger(__name__)

_SQLITE_PLACEHOLDER = re.compile(r"\$(\d+)")
_SQLITE_PREFIXES = ("sqlite+aiosqlite:///", "sqlite:///")
_POSTGRES_SCHEMES = ("postgres", "postgresql", "postgresql+asyncpg")


class StoreError(RuntimeError):
    pass


class IntegrityViolation(StoreError):
    pass


class ForeignKeyViolation(IntegrityViolation):
    pass


class UniqueViolation(IntegrityViolation):
    pass


class InvalidValue(StoreError):
    """
    A bound value the column type cannot hold (out of range, wrong type).
    """


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    scheme = "postgresql" if parts.scheme == "postgresql+asyncpg" else parts.scheme
    return urlunsplit((scheme, parts.netloc, parts.path, query, parts.fragment))


def _sqlite_path(url: str) -> str:
    for prefix in _SQLITE_PREFIXES:
        if url.startswith(prefix):
            path = url[len(prefix):]
            return path or ":memory:"
    raise StoreError(f"Not a sqlite URL: {url!r}")


def _to_sqlite_sql(sql: str) -> str:
    return _SQLITE_PLACEHOLDER.sub(r"?\1", sql)


# --- Postgres ---------------------------------------------------------------


@asynccontextmanager
async def _postgres_errors() -> AsyncIterator[None]:
    try:
        yield
    except asyncpg.ForeignKeyViolationError as exc:
        raise ForeignKeyViolation(str(exc)) from exc
    except asyncpg.UniqueViolationError as exc:
        raise UniqueViolation(str(exc)) from exc
    except asyncpg.PostgresError as exc:
        # SQLSTATE class 22: data exception.
        if str(getattr(exc, "sqlstate", "") or "").startswith("22"):
            raise InvalidValue(str(exc)) from exc
        raise StoreError(str(exc)) from exc
    except asyncpg.InterfaceError as exc:
        # Client-side encoding failures (asyncpg DataError) are ValueErrors.
        if isinstance(exc, ValueError):
            raise InvalidValue(str(exc)) from exc
        raise StoreError(str(exc)) from exc


class _PostgresSession:
    """
    Query helpers bound to one acquired asyncpg connection.
    """

    def __init__(self, conn: asyncpg.Connection) -> None:
        self._conn = conn

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        async with _postgres_errors():
            row = await self._conn.fetchrow(sql, *args)
        return dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        async with _postgres_errors():
            rows = await self._conn.fetch(sql, *args)
        return [dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> None:
        async with _postgres_errors():
            await self._conn.execute(sql, *args)

    async def executemany(self, sql: str, records: Iterable[Sequence[Any]]) -> None:
        async with _postgres_errors():
            await self._conn.executemany(sql, list(records))


class PostgresDatabase:
    dialect = "postgres"

    def __init__(
        self,
        dsn: str,
        *,
        min_size: int = 1,
        max_size: int = 5,
        command_timeout: float = 30.0,
    ) -> None:
        self._dsn = _sanitize_database_url(dsn)
        self._min_size = min_size
        self._max_size = max(min_size, max_size)
        self._command_timeout = command_timeout
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        if self._pool is not None:
            return None
        self._pool = await asyncpg.create_pool(
            dsn=self._dsn,
            min_size=self._min_size,
            max_size=self._max_size,
            command_timeout=self._command_timeout,
        )

    async def close(self) -> None:
        if self._pool is None:
            return None
        await self._pool.close()
        self._pool = None

    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise StoreError("DB pool is not initialized. Call connect() on startup.")
        return self._pool

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        async with self.pool().acquire() as conn:
            return await _PostgresSession(conn).fetch_one(sql, *args)

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        async with self.pool().acquire() as conn:
            return await _PostgresSession(conn).fetch_all(sql, *args)

    async def execute(self, sql: str, *args: Any) -> None:
        async with self.pool().acquire() as conn:
            await _PostgresSession(conn).execute(sql, *args)

    async def executemany(self, sql: str, records: Iterable[Sequence[Any]]) -> None:
        async with self.pool().acquire() as conn:
            await _PostgresSession(conn).executemany(sql, records)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[_PostgresSession]:
        async with self.pool().acquire() as conn:  # type: asyncpg.Connection
            async with conn.transaction():
                yield _PostgresSession(conn)


# --- SQLite -----------------------------------------------------------------


@asynccontextmanager
async def _sqlite_errors() -> AsyncIterator[None]:
    try:
        yield
    except aiosqlite.IntegrityError as exc:
        message = str(exc)
        if "FOREIGN KEY" in message:
            raise ForeignKeyViolation(message) from exc
        if "UNIQUE" in message:
            raise UniqueViolation(message) from exc
        raise IntegrityViolation(message) from exc
    except aiosqlite.Error as exc:
        raise StoreError(str(exc)) from exc
    except OverflowError as exc:
        # Python int wider than SQLite INTEGER.
        raise InvalidValue(str(exc)) from exc


def _unicode_lower(value: Any) -> Any:
    if isinstance(value, str):
        return value.lower()
    return value


class _SqliteSession:
    """
    Query helpers bound to the (already locked) aiosqlite connection.
    """

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        async with _sqlite_errors():
            async with self._conn.execute(_to_sqlite_sql(sql), args) as cursor:
                row = await cursor.fetchone()
        return dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        async with _sqlite_errors():
            async with self._conn.execute(_to_sqlite_sql(sql), args) as cursor:
                rows = await cursor.fetchall()
        return [dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> None:
        async with _sqlite_errors():
            await self._conn.execute(_to_sqlite_sql(sql), args)

    async def executemany(self, sql: str, records: Iterable[Sequence[Any]]) -> None:
        async with _sqlite_errors():
            await self._conn.executemany(_to_sqlite_sql(sql), [tuple(r) for r in records])


class SqliteDatabase:
    """
    Single-connection embedded backend.

    The connection runs in autocommit mode; `transaction()` issues explicit
    BEGIN/COMMIT. Statements are serialized through one lock so a running
    transaction never interleaves with other requests' statements.

    SQLite's built-in lower() folds ASCII only; it is replaced with a
    Unicode-aware one so case-insensitive search, ordering and the unique
    performer-name index behave as on Postgres.
    """

    dialect = "sqlite"

    def __init__(self, path: str) -> None:
        self._path = path
        self._conn: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        if self._conn is not None:
            return None
        conn = await aiosqlite.connect(self._path, isolation_level=None)
        conn.row_factory = aiosqlite.Row
        await conn.execute("PRAGMA foreign_keys = ON")
        await conn.create_function("lower", 1, _unicode_lower, deterministic=True)
        self._conn = conn

    async def close(self) -> None:
        if self._conn is None:
            return None
        await self._conn.close()
        self._conn = None

    def connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise StoreError("SQLite connection is not open. Call connect() on startup.")
        return self._conn

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        async with self._lock:
            return await _SqliteSession(self.connection()).fetch_one(sql, *args)

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        async with self._lock:
            return await _SqliteSession(self.connection()).fetch_all(sql, *args)

    async def execute(self, sql: str, *args: Any) -> None:
        async with self._lock:
            await _SqliteSession(self.connection()).execute(sql, *args)

    async def executemany(self, sql: str, records: Iterable[Sequence[Any]]) -> None:
        async with self._lock:
            await _SqliteSession(self.connection()).executemany(sql, records)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[_SqliteSession]:
        async with self._lock:
            conn = self.connection()
            await conn.execute("BEGIN")
            try:
                yield _SqliteSession(conn)
            except BaseException:
                await conn.execute("ROLLBACK")
                raise
            await conn.execute("COMMIT")


Database = PostgresDatabase | SqliteDatabase


def open_database(settings: Settings) -> Database:
    """
    Build (but do not connect) the backend named by DATABASE_URL.
    """
    url = settings.database_url
    if url.startswith(_SQLITE_PREFIXES):
        return SqliteDatabase(_sqlite_path(url))

    scheme = urlsplit(url).scheme
    if scheme in _POSTGRES_SCHEMES:
        return PostgresDatabase(
            url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            command_timeout=settings.command_timeout,
        )
    raise StoreError(f"Unsupported DATABASE_URL scheme: {scheme!r}")


def get_db(request: Request) -> Database:
    """
    FastAPI dependency returning the app's database handle.
    """
    return request.app.state.db
