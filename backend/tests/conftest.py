"""
DysNote Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── clock: controllable UTC clock injected into repositories
    ├── memory_repository: fresh InMemoryNoteRepository
    ├── database_repository: SqlAlchemyNoteRepository on a temp SQLite file
    ├── repository: parametrized over both backends (contract tests)
    ├── note_fields: a valid NoteCreate payload
    └── test_client: HTTPX AsyncClient bound to an app with an empty memory store
"""

import os
from datetime import datetime, timedelta, timezone

# Override settings for testing BEFORE any dysnote imports
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["SEED_EXAMPLE_NOTES"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from dysnote.config import Settings
from dysnote.main import create_app
from dysnote.repositories import InMemoryNoteRepository, SqlAlchemyNoteRepository
from dysnote.schemas.note import NoteCreate

SAMPLE_DRAWING = "data:image/png;base64,AAA="


class FakeClock:
    """
    Repository clock that only moves when told to.

    Lets tests produce identical timestamps on purpose (to check that
    updated_at still grows) or step time by a known amount.
    """

    def __init__(self, start: datetime = datetime(2026, 1, 5, 9, 30, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> datetime:
        self.now += timedelta(**delta)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_repository(clock):
    return InMemoryNoteRepository(clock=clock)


@pytest_asyncio.fixture
async def database_repository(tmp_path, clock):
    """
    Durable repository on a throwaway SQLite file.

    What:    Real SQL through aiosqlite; the table is created up front and
             the engine disposed afterwards.
    """
    cfg = Settings(
        storage_backend="database",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}",
    )
    repo = SqlAlchemyNoteRepository.from_settings(cfg, clock=clock)
    await repo.create_schema()
    yield repo
    await repo.close()


@pytest_asyncio.fixture(params=["memory", "database"])
async def repository(request, tmp_path, clock):
    """Runs a test once per storage backend."""
    if request.param == "memory":
        yield InMemoryNoteRepository(clock=clock)
        return
    cfg = Settings(
        storage_backend="database",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'contract.db'}",
    )
    repo = SqlAlchemyNoteRepository.from_settings(cfg, clock=clock)
    await repo.create_schema()
    yield repo
    await repo.close()


@pytest.fixture
def note_fields():
    return NoteCreate(title="Shopping list", content=SAMPLE_DRAWING)


@pytest.fixture
def test_settings():
    return Settings(storage_backend="memory", seed_example_notes=False, log_level="WARNING")


@pytest_asyncio.fixture
async def test_client(test_settings):
    """
    HTTPX AsyncClient talking to a fresh app with an empty memory store.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/notes")
            assert response.status_code == 200
    """
    app = create_app(settings=test_settings, repository=InMemoryNoteRepository())
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
