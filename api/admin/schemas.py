"""
Admin schemas: one row of a bulk import.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from core.validation import NAME_MAX_LENGTH, optional_text, strip_text
from lyrics.schemas import LyricContent


class ImportRow(LyricContent):
    """
    A lyric whose performer is named instead of referenced by id.
    """

    performer: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    genre: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)

    @field_validator("performer", mode="before")
    @classmethod
    def _strip_performer(cls, value: Any) -> Any:
        return strip_text(value)

    @field_validator("genre", mode="before")
    @classmethod
    def _clean_genre(cls, value: Any) -> Any:
        return optional_text(value)
