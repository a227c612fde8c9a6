"""
Filter and pagination query builder for lyric listings.

Filters become an ordered list of predicates, each binding its value
through a positional placeholder ($1, $2, ...) numbered in append order.
The listing query and the count query share the exact same WHERE clause
and filter parameters; only the listing adds ORDER BY / LIMIT / OFFSET.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote

from core.settings import SchemaProfile
from core.validation import MAX_ID

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100

FROM_CLAUSE = "FROM lyrics l LEFT JOIN performers p ON p.performer_id = l.performer_id"

# Templates only ever receive a placeholder, never a user value.
LANGUAGE_PREDICATE = "l.language = {p}"
ERA_PREDICATE = "l.era = {p}"
PERFORMER_PREDICATE = "l.performer_id = {p}"
TEXT_PREDICATE = (
    "(lower(l.song_title) LIKE lower({p})"
    " OR lower(COALESCE(l.words, '')) LIKE lower({p})"
    " OR lower(COALESCE(p.name, '')) LIKE lower({p}))"
)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_SPACE_WRAPPER = re.compile(r"^%20|%20$")


@dataclass(frozen=True)
class LyricFilters:
    language: str | None = None
    era: str | None = None
    text: str | None = None
    performer_id: int | None = None


@dataclass(frozen=True)
class Page:
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class LyricQuery:
    list_sql: str
    list_params: tuple[Any, ...]
    count_sql: str
    count_params: tuple[Any, ...]
    where_sql: str = ""


@dataclass
class WhereBuilder:
    predicates: list[str] = field(default_factory=list)
    params: list[Any] = field(default_factory=list)

    def add(self, template: str, value: Any) -> None:
        """
        Append one predicate; every {p} in the template shares one placeholder.
        """
        self.params.append(value)
        self.predicates.append(template.format(p=f"${len(self.params)}"))

    def sql(self) -> str:
        if not self.predicates:
            return ""
        return "WHERE " + " AND ".join(self.predicates)

    def next_index(self) -> int:
        return len(self.params) + 1


def normalize_param(value: Any) -> str | None:
    """
    Treat missing and blank values alike.
    """
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def clean_search_text(value: Any) -> str | None:
    text = normalize_param(value)
    if text is None:
        return None
    # Some clients send the search text encoded twice, wrapped in %20.
    decoded = _SPACE_WRAPPER.sub("", unquote(text)).strip()
    return decoded or None


def _leading_int(value: Any, default: int) -> int:
    match = _LEADING_INT.match(str(value or ""))
    if match is None:
        return default
    try:
        return int(match.group(1))
    except ValueError:
        # Longer than int() will parse.
        return default


def parse_page(page: Any = None, page_size: Any = None) -> Page:
    size = min(MAX_PAGE_SIZE, max(1, _leading_int(page_size, DEFAULT_PAGE_SIZE)))
    # Keep OFFSET inside a signed 64-bit integer.
    page_number = min(MAX_ID // size, max(1, _leading_int(page, DEFAULT_PAGE)))
    return Page(page=page_number, page_size=size)


def parse_filters(
    *,
    language: Any = None,
    era: Any = None,
    release_date: Any = None,
    text: Any = None,
    search_query_title: Any = None,
    performer_id: int | None = None,
) -> LyricFilters:
    """
    Build filters from query values; current names win over legacy aliases.
    """
    era_value = normalize_param(era)
    if era_value is None:
        era_value = normalize_param(release_date)

    text_value = clean_search_text(text)
    if text_value is None:
        text_value = clean_search_text(search_query_title)

    return LyricFilters(
        language=normalize_param(language),
        era=era_value,
        text=text_value,
        performer_id=performer_id,
    )


def select_columns(profile: SchemaProfile) -> str:
    columns = [
        "l.lyric_id",
        "l.performer_id",
        "p.name AS performer_name",
    ]
    if profile.has_performer_field("genre"):
        columns.append("p.genre AS performer_genre")
    columns += ["l.song_title", "l.words", "l.language", "l.spot_link"]
    if profile.has_lyric_field("imageUrl"):
        columns.append("l.image_url")
    if profile.has_lyric_field("previewUrl"):
        columns.append("l.preview_url")
    if profile.has_lyric_field("popularity"):
        columns.append("l.popularity")
    if profile.has_lyric_field("era"):
        columns.append("l.era")
    if profile.has_lyric_field("classic"):
        columns.append("l.classic")
    return ", ".join(columns)


def build_where(filters: LyricFilters, *, profile: SchemaProfile) -> WhereBuilder:
    where = WhereBuilder()
    if filters.performer_id is not None:
        where.add(PERFORMER_PREDICATE, filters.performer_id)
    if filters.language:
        where.add(LANGUAGE_PREDICATE, filters.language)
    if filters.era and profile.has_lyric_field("era"):
        where.add(ERA_PREDICATE, filters.era)
    if filters.text:
        where.add(TEXT_PREDICATE, f"%{filters.text}%")
    return where


def build_lyric_query(filters: LyricFilters, page: Page, *, profile: SchemaProfile) -> LyricQuery:
    where = build_where(filters, profile=profile)
    where_sql = where.sql()
    limit_index = where.next_index()

    list_sql = " ".join(
        part
        for part in (
            f"SELECT {select_columns(profile)}",
            FROM_CLAUSE,
            where_sql,
            "ORDER BY l.lyric_id ASC",
            f"LIMIT ${limit_index} OFFSET ${limit_index + 1}",
        )
        if part
    )
    count_sql = " ".join(part for part in ("SELECT count(*) AS total", FROM_CLAUSE, where_sql) if part)

    filter_params = tuple(where.params)
    return LyricQuery(
        list_sql=list_sql,
        list_params=filter_params + (page.page_size, page.offset),
        count_sql=count_sql,
        count_params=filter_params,
        where_sql=where_sql,
    )
