"""
Environment-driven configuration.

Settings are read once at startup (see `api/main.py`) and stored on
`app.state.settings`. Schema profiles describe which optional columns and
policies a deployment uses, so handlers never branch on table shape.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

DEFAULT_DATABASE_URL = "sqlite:///./lyrics.db"

CREATE_POLICIES = ("insert_or_fetch", "upsert")
DELETE_POLICIES = ("restrict", "cascade")

# API field names. Order is the column order used in inserts.
PERFORMER_FIELDS_BASIC = ("name",)
PERFORMER_FIELDS_EXTENDED = ("name", "genre")
LYRIC_FIELDS_BASIC = ("performerId", "songTitle", "words", "language", "spotLink")
LYRIC_FIELDS_EXTENDED = LYRIC_FIELDS_BASIC + (
    "imageUrl",
    "previewUrl",
    "popularity",
    "era",
    "classic",
)


class SettingsError(RuntimeError):
    pass


@dataclass(frozen=True)
class SchemaProfile:
    name: str
    performer_fields: tuple[str, ...]
    lyric_fields: tuple[str, ...]
    create_policy: str = "insert_or_fetch"
    delete_policy: str = "restrict"
    performer_updates: bool = True

    def has_performer_field(self, field: str) -> bool:
        return field in self.performer_fields

    def has_lyric_field(self, field: str) -> bool:
        return field in self.lyric_fields


PROFILES: dict[str, SchemaProfile] = {
    "extended": SchemaProfile(
        name="extended",
        performer_fields=PERFORMER_FIELDS_EXTENDED,
        lyric_fields=LYRIC_FIELDS_EXTENDED,
    ),
    "basic": SchemaProfile(
        name="basic",
        performer_fields=PERFORMER_FIELDS_BASIC,
        lyric_fields=LYRIC_FIELDS_BASIC,
    ),
}


@dataclass(frozen=True)
class Settings:
    database_url: str
    profile: SchemaProfile
    init_schema: bool = True
    pool_min_size: int = 1
    pool_max_size: int = 5
    command_timeout: float = 30.0
    cors_allow_origins: tuple[str, ...] = ("*",)
    admin_token: str | None = None
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    if raw in {"1", "true", "yes", "on"}:
        return True
    if raw in {"0", "false", "no", "off"}:
        return False
    return default


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    items = tuple(part.strip() for part in raw.split(",") if part.strip())
    return items or default


def schema_profile() -> SchemaProfile:
    """
    Resolve the active schema profile, applying per-policy overrides.
    """
    profile_name = _env_str("SCHEMA_PROFILE", "extended").lower()
    profile = PROFILES.get(profile_name)
    if profile is None:
        raise SettingsError(
            f"Unknown SCHEMA_PROFILE {profile_name!r}; expected one of {sorted(PROFILES)}."
        )

    create_policy = _env_str("PERFORMER_CREATE_POLICY", profile.create_policy).lower()
    if create_policy not in CREATE_POLICIES:
        raise SettingsError(f"Unknown PERFORMER_CREATE_POLICY {create_policy!r}.")

    delete_policy = _env_str("PERFORMER_DELETE_POLICY", profile.delete_policy).lower()
    if delete_policy not in DELETE_POLICIES:
        raise SettingsError(f"Unknown PERFORMER_DELETE_POLICY {delete_policy!r}.")

    return replace(
        profile,
        create_policy=create_policy,
        delete_policy=delete_policy,
        performer_updates=_env_bool("PERFORMER_UPDATES", profile.performer_updates),
    )


def load_settings() -> Settings:
    admin_token = os.environ.get("ADMIN_TOKEN", "").strip() or None
    return Settings(
        database_url=_env_str("DATABASE_URL", DEFAULT_DATABASE_URL),
        profile=schema_profile(),
        init_schema=_env_bool("DB_INIT_SCHEMA", True),
        pool_min_size=max(1, _env_int("DB_POOL_MIN_SIZE", 1)),
        pool_max_size=max(1, _env_int("DB_POOL_MAX_SIZE", 5)),
        command_timeout=_env_float("DB_COMMAND_TIMEOUT", 30.0),
        cors_allow_origins=_env_list("CORS_ALLOW_ORIGINS", ("*",)),
        admin_token=admin_token,
        log_level=_env_str("LOG_LEVEL", "INFO").upper(),
        host=_env_str("HOST", "0.0.0.0"),
        port=_env_int("PORT", 8080),
    )
