"""
Shared test fixtures.

Provides:
  • a temporary SQLite database (`temp_db`)
  • a FastAPI TestClient wired to a registry of in-memory sources
    (no external HTTP) and the temp database, with rate limiting off

The `client` fixture runs the full lifespan (DB init / shutdown).
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from courtwatch import db
from courtwatch.main import app
from courtwatch.services.registry import SourceRegistry
from tests.mocks.models import LTA_LOCATION, make_slot
from tests.mocks.sources import StaticSource


@pytest.fixture()
def db_path(monkeypatch, tmp_path):
    path = tmp_path / "test.db"
    monkeypatch.setattr(db, "DB_PATH", str(path))
    return path


@pytest.fixture()
async def temp_db(db_path):
    """An initialized database in a temp directory, closed after the test."""
    await db.init_db()
    yield db
    await db.close_db()


@pytest.fixture()
def _test_env(monkeypatch, db_path):
    """
    Patch the registry so the app lifespan runs cleanly against the
    temp database and in-memory sources.
    """
    test_registry = SourceRegistry()

    # Prevent the lifespan from registering real providers
    test_registry.register_all = lambda: None  # type: ignore[assignment]
    test_registry.register(StaticSource("static", [make_slot(location=LTA_LOCATION, spaces=0)]))

    for mod_path in (
        "courtwatch.services.registry",
        "courtwatch.main",
        "courtwatch.routers.pipeline",
    ):
        monkeypatch.setattr(f"{mod_path}.registry", test_registry)

    # ── Disable rate limiting in tests ────────────────────────────────
    from courtwatch.rate_limit import limiter as _limiter
    monkeypatch.setattr(_limiter, "enabled", False)

    return test_registry


@pytest.fixture()
def mock_registry(_test_env) -> SourceRegistry:
    return _test_env


@pytest.fixture()
def client(_test_env: SourceRegistry) -> TestClient:
    with TestClient(app, raise_server_exceptions=False) as tc:
        yield tc
