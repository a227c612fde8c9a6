"""
Performer API schemas (request models).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from core.validation import NAME_MAX_LENGTH, optional_text, strip_text


class PerformerWrite(BaseModel):
    """
    Body for both create and replace. Omitted genre means "no genre".
    """

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    genre: str | None = Field(default=None, max_length=NAME_MAX_LENGTH)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        return strip_text(value)

    @field_validator("genre", mode="before")
    @classmethod
    def _clean_genre(cls, value: Any) -> Any:
        return optional_text(value)
