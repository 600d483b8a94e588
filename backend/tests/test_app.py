"""
DysNote Backend — Application Wiring Tests
===========================================

What:  Health check, request ID header, lifespan startup/shutdown and the
       database repository's error translation.
How:   Lifespan is driven directly as an async context manager because
       ASGITransport does not send lifespan events.
"""

import logging
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from dysnote.config import Settings
from dysnote.dependencies import MAX_NOTE_ID, resolve_note_id
from dysnote.exceptions import DatabaseError, NotFoundError
from dysnote.main import create_app, describe_validation_errors, first_invalid_field, lifespan
from dysnote.repositories import InMemoryNoteRepository, NoteRepository, SqlAlchemyNoteRepository
from dysnote.schemas.note import NoteCreate


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy_with_memory_store(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["storage"] == "memory"
        assert body["storage_status"] == "available"

    @pytest.mark.asyncio
    async def test_unreachable_storage_is_503(self):
        repository = AsyncMock(spec=NoteRepository)
        repository.backend_name = "database"
        repository.ping.return_value = False
        app = create_app(settings=Settings(storage_backend="memory"), repository=repository)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, test_client):
        response = await test_client.get("/notes")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_client_value_echoed(self, test_client):
        response = await test_client.get("/notes/404", headers={"X-Request-ID": "trace-me"})

        assert response.status_code == 404
        assert response.headers["X-Request-ID"] == "trace-me"


class TestLifespan:

    @pytest.mark.asyncio
    async def test_seeds_memory_store_on_startup(self):
        repository = InMemoryNoteRepository()
        app = create_app(
            settings=Settings(storage_backend="memory", seed_example_notes=True),
            repository=repository,
        )

        with patch("dysnote.main.setup_logging"):
            async with lifespan(app):
                notes = await repository.list_all()

        assert [n.id for n in notes] == [1, 2]

    @pytest.mark.asyncio
    async def test_seeding_can_be_disabled(self):
        repository = InMemoryNoteRepository()
        app = create_app(
            settings=Settings(storage_backend="memory", seed_example_notes=False),
            repository=repository,
        )

        with patch("dysnote.main.setup_logging"):
            async with lifespan(app):
                assert await repository.list_all() == []

    @pytest.mark.asyncio
    async def test_database_table_created_and_engine_closed(self, tmp_path):
        cfg = Settings(
            storage_backend="database",
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'startup.db'}",
        )
        repository = SqlAlchemyNoteRepository.from_settings(cfg)
        app = create_app(settings=cfg, repository=repository)

        with patch("dysnote.main.setup_logging"), \
             patch.object(repository, "close", wraps=repository.close) as mock_close:
            async with lifespan(app):
                async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                    created = await client.post("/notes", json={"title": "T", "content": "c"})
                    listed = await client.get("/notes")

            mock_close.assert_awaited_once()

        assert created.status_code == 201
        assert [n["id"] for n in listed.json()] == [1]


class TestDatabaseErrors:

    @pytest.mark.asyncio
    async def test_unreachable_database_raises_database_error(self, tmp_path):
        cfg = Settings(
            storage_backend="database",
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'missing-dir' / 'notes.db'}",
        )
        repository = SqlAlchemyNoteRepository.from_settings(cfg)
        try:
            with pytest.raises(DatabaseError) as exc_info:
                await repository.create(NoteCreate(title="T", content="c"))
            assert exc_info.value.message == "Failed to create note"
            assert await repository.ping() is False
        finally:
            await repository.close()

    @pytest.mark.asyncio
    async def test_missing_table_is_500_over_http(self, tmp_path):
        cfg = Settings(
            storage_backend="database",
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}",
        )
        repository = SqlAlchemyNoteRepository.from_settings(cfg)
        app = create_app(settings=cfg, repository=repository)
        try:
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                response = await client.get("/notes")
        finally:
            await repository.close()

        assert response.status_code == 500
        assert response.json() == {"message": "Failed to fetch notes"}


class TestValidationMessage:

    def test_lists_each_violation(self):
        message = describe_validation_errors(
            [
                {"loc": ("body", "title"), "msg": "Field required"},
                {"loc": ("body", "content"), "msg": "Field required"},
            ]
        )
        assert message == (
            'Validation error: Field required at "title"; Field required at "content"'
        )

    def test_body_level_error(self):
        message = describe_validation_errors([{"loc": ("body",), "msg": "Field required"}])
        assert message == "Validation error: Field required"

    def test_first_invalid_field(self):
        errors = [
            {"loc": ("body",), "msg": "Input should be a valid dictionary"},
            {"loc": ("body", "content"), "msg": "Field required"},
            {"loc": ("body", "title"), "msg": "Field required"},
        ]
        assert first_invalid_field(errors) == "content"

    def test_first_invalid_field_without_field(self):
        assert first_invalid_field([{"loc": ("body",), "msg": "Field required"}]) is None

    @pytest.mark.asyncio
    async def test_rejected_body_logs_offending_field(self, test_client, caplog):
        with caplog.at_level(logging.WARNING, logger="dysnote.main"):
            response = await test_client.post("/notes", json={"content": "c"})

        assert response.status_code == 400
        assert "Field: title" in caplog.text


class TestResolveNoteId:

    @pytest.mark.asyncio
    async def test_parses_plain_integer(self):
        assert await resolve_note_id("42") == 42
        assert await resolve_note_id(str(MAX_NOTE_ID)) == MAX_NOTE_ID

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "raw",
        ["", "0", str(MAX_NOTE_ID + 1), "1e3", pytest.param("7" * 5000, id="5000-digits")],
    )
    async def test_unmatchable_ids_are_not_found(self, raw):
        with pytest.raises(NotFoundError) as exc_info:
            await resolve_note_id(raw)
        assert exc_info.value.message == "Note not found"
