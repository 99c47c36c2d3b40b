"""
Notes Service - Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test that touches the database gets its own SQLite file under
       pytest's tmp_path, so tests never share rows or see a real notes.db.

Fixture Hierarchy (all function-scoped):
    test_settings ── Settings pointing at tmp_path/notes.db
    └── database ── Database with the schema created, disposed afterwards
        ├── store ── NoteStore over that database
        └── app ── create_app(test_settings, database)
            ├── test_client ── httpx AsyncClient over ASGITransport
            └── notes_client ── NotesClient over ASGITransport
    sample_note_data ── a valid create/update payload
"""

import os
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Before any notes_service import: the module-level settings read these
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"

from notes_service.client.api import NotesClient  # noqa: E402
from notes_service.config import Settings  # noqa: E402
from notes_service.database import Database  # noqa: E402
from notes_service.main import create_app  # noqa: E402
from notes_service.services.note_store import NoteStore  # noqa: E402


class Clock:
    """
    Deterministic replacement for models.note.utcnow().

    Each call returns a time `step` later than the previous one, so
    created_at ordering in tests never depends on timer resolution.
    """

    def __init__(self, start: datetime = None, step: timedelta = timedelta(seconds=1)):
        self.now = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        self.now = self.now + self.step
        return self.now


@pytest.fixture
def clock(monkeypatch) -> Clock:
    """Patches the store's clock; returns the Clock for inspection."""
    fake = Clock()
    monkeypatch.setattr("notes_service.services.note_store.utcnow", fake)
    return fake


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(test_settings):
    db = Database(test_settings)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def store(database) -> NoteStore:
    return NoteStore(database.session_factory)


@pytest.fixture
def app(test_settings, database):
    return create_app(test_settings, database)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app in-process.

    ASGITransport does not run the lifespan; the `database` fixture has
    already created the schema.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def notes_client(app):
    """NotesClient bound to the in-process app."""
    client = NotesClient(base_url="http://test", api_prefix="/api", transport=ASGITransport(app=app))
    yield client
    await client.aclose()


@pytest.fixture
def sample_note_data():
    return {
        "title": "Work Meeting Notes",
        "category": "work",
        "priority": "high",
        "description": "Discussed quarterly goals and project timelines.",
    }
