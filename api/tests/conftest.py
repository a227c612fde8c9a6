import os
import sys
from collections.abc import Callable, Generator
from contextlib import ExitStack
from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

# Make the api/ directory importable (core, performers, lyrics, admin, main).
CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
API_DIR = os.path.dirname(CURRENT_DIR)
if API_DIR not in sys.path:
    sys.path.insert(0, API_DIR)

# Importing `main` builds a module-level app from the environment.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from core.settings import PROFILES, SchemaProfile, Settings  # noqa: E402

ADMIN_TOKEN = "test-admin-token"


def make_settings(db_path: str, profile: SchemaProfile | None = None, **overrides) -> Settings:
    values = {
        "database_url": f"sqlite:///{db_path}",
        "profile": profile or PROFILES["extended"],
        "admin_token": ADMIN_TOKEN,
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def client_factory(tmp_path) -> Generator[Callable[..., TestClient], None, None]:
    """
    Build clients for a given profile, each on its own SQLite file.

    Keyword arguments override profile fields (create_policy, delete_policy,
    performer_updates) or Settings fields (admin_token, ...).
    """
    from main import create_app

    profile_fields = {"create_policy", "delete_policy", "performer_updates"}

    with ExitStack() as stack:
        counter = {"n": 0}

        def _make(profile_name: str = "extended", raise_server_exceptions: bool = True, **overrides) -> TestClient:
            counter["n"] += 1
            profile = PROFILES[profile_name]
            profile_overrides = {k: v for k, v in overrides.items() if k in profile_fields}
            settings_overrides = {k: v for k, v in overrides.items() if k not in profile_fields}
            if profile_overrides:
                profile = replace(profile, **profile_overrides)

            db_path = tmp_path / f"lyrics_{counter['n']}.db"
            settings = make_settings(str(db_path), profile, **settings_overrides)
            app = create_app(settings)
            return stack.enter_context(TestClient(app, raise_server_exceptions=raise_server_exceptions))

        yield _make


@pytest.fixture
def client(client_factory) -> TestClient:
    """Client on the default (extended) profile with insert-or-fetch and restrict policies."""
    return client_factory()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
