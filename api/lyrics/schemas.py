"""
Lyric API schemas (request models).

Field names are camelCase on the wire (songTitle, performerId, ...).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from core.validation import (
    LANGUAGE_MAX_LENGTH,
    MAX_ID,
    POPULARITY_MAX,
    POPULARITY_MIN,
    TITLE_MAX_LENGTH,
    WORDS_MAX_LENGTH,
    bool_like,
    optional_text,
    strip_text,
)

REQUIRED_FIELDS = ("performer_id", "song_title", "words", "language")


def _era_text(value: Any) -> Any:
    # Years often arrive as numbers.
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return optional_text(value)


class _LyricBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    spot_link: str | None = None
    image_url: str | None = None
    preview_url: str | None = None
    popularity: int | None = Field(default=None, ge=POPULARITY_MIN, le=POPULARITY_MAX)
    era: str | None = Field(default=None, max_length=TITLE_MAX_LENGTH)
    # Permissive: "true"/"false" become booleans, other scalars pass through
    # and the BOOLEAN column decides (see lyrics.repository).
    classic: bool | int | float | str | None = None

    @field_validator("spot_link", "image_url", "preview_url", "popularity", mode="before")
    @classmethod
    def _clean_optional(cls, value: Any) -> Any:
        return optional_text(value)

    @field_validator("era", mode="before")
    @classmethod
    def _clean_era(cls, value: Any) -> Any:
        return _era_text(value)

    @field_validator("classic", mode="before")
    @classmethod
    def _clean_classic(cls, value: Any) -> Any:
        return bool_like(optional_text(value))

    @field_validator("song_title", "words", "language", mode="before", check_fields=False)
    @classmethod
    def _strip_required(cls, value: Any) -> Any:
        return strip_text(value)


class LyricContent(_LyricBase):
    song_title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    words: str = Field(..., min_length=1, max_length=WORDS_MAX_LENGTH)
    language: str = Field(..., min_length=1, max_length=LANGUAGE_MAX_LENGTH)


class LyricCreate(LyricContent):
    performer_id: int = Field(..., gt=0, le=MAX_ID)


class LyricUpdate(_LyricBase):
    """
    Partial update: omitted fields keep their stored value, an explicit null
    clears an optional field. Required fields cannot be cleared.
    """

    performer_id: int | None = Field(default=None, gt=0, le=MAX_ID)
    song_title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    words: str | None = Field(default=None, min_length=1, max_length=WORDS_MAX_LENGTH)
    language: str | None = Field(default=None, min_length=1, max_length=LANGUAGE_MAX_LENGTH)

    @model_validator(mode="after")
    def _required_not_null(self) -> LyricUpdate:
        for name in REQUIRED_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null.")
        return self


def to_fields(payload: _LyricBase, *, only_set: bool = False) -> dict[str, Any]:
    """
    Dump a payload keyed by wire names ("songTitle", ...).
    """
    return payload.model_dump(by_alias=True, exclude_unset=only_set)
