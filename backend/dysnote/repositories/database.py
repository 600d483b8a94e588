"""
DysNote Backend — SQLAlchemy Note Repository
=============================================

What:  Durable Note store on a relational table via async SQLAlchemy.
Why:   Notes survive restarts; PostgreSQL (asyncpg) in deployment, SQLite
       (aiosqlite) for single-machine use and tests.
How:   One short-lived AsyncSession per operation. Each write is a single
       statement plus commit, so atomicity comes from the database; there is
       no application-level locking or retry.

Error Handling Strategy:
    SQLAlchemyError from the driver or ORM is logged with full detail and
    re-raised as DatabaseError carrying a generic per-operation message.
    A missing id is NOT an error: get/update return None, delete returns False.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional

from sqlalchemy import delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from dysnote.config import Settings
from dysnote.database import Base, create_engine_from_settings, create_session_factory
from dysnote.exceptions import DatabaseError
from dysnote.models.note import Note as NoteRow
from dysnote.repositories.base import Clock, NoteRepository, as_utc, merge_note, utc_now
from dysnote.schemas.note import Note, NoteCreate, NoteUpdate

logger = logging.getLogger(__name__)

# Columns copied from a merged Note back onto its row
_MUTABLE_COLUMNS = ("title", "content", "preview", "recognized_text", "is_favorite", "updated_at")


def _to_schema(row: NoteRow) -> Note:
    return Note(
        id=row.id,
        title=row.title,
        content=row.content,
        preview=row.preview,
        recognized_text=row.recognized_text,
        is_favorite=row.is_favorite,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


class SqlAlchemyNoteRepository(NoteRepository):
    """
    Note store backed by the `notes` table.

    list_all() orders by id ascending, matching the in-memory store.
    """

    backend_name = "database"

    def __init__(self, engine: AsyncEngine, clock: Clock = utc_now):
        self._engine = engine
        self._session_factory = create_session_factory(engine)
        self._clock = clock

    @classmethod
    def from_settings(cls, cfg: Settings, clock: Clock = utc_now) -> "SqlAlchemyNoteRepository":
        return cls(create_engine_from_settings(cfg), clock=clock)

    @asynccontextmanager
    async def _session(self, failure_message: str, **context: Any) -> AsyncIterator[AsyncSession]:
        """Session scope that converts storage faults into DatabaseError."""
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error("%s: %s", failure_message, str(e), exc_info=True)
            raise DatabaseError(
                message=failure_message,
                context={**context, "error_type": type(e).__name__},
            ) from e

    async def create_schema(self) -> None:
        """Create the notes table if it does not exist yet."""
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error("Could not create database schema: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to prepare the note store",
                context={"error_type": type(e).__name__},
            ) from e

    async def list_all(self) -> List[Note]:
        async with self._session("Failed to fetch notes") as session:
            result = await session.execute(select(NoteRow).order_by(NoteRow.id.asc()))
            return [_to_schema(row) for row in result.scalars().all()]

    async def get(self, note_id: int) -> Optional[Note]:
        async with self._session("Failed to fetch note", note_id=note_id) as session:
            row = await session.get(NoteRow, note_id)
            return _to_schema(row) if row is not None else None

    async def create(self, fields: NoteCreate) -> Note:
        now = self._clock()
        async with self._session("Failed to create note") as session:
            row = NoteRow(
                title=fields.title,
                content=fields.content,
                preview=fields.preview,
                recognized_text=fields.recognized_text,
                is_favorite=fields.is_favorite,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            await session.commit()
            logger.debug("Created note %d", row.id)
            return _to_schema(row)

    async def update(self, note_id: int, changes: NoteUpdate) -> Optional[Note]:
        async with self._session("Failed to update note", note_id=note_id) as session:
            row = await session.get(NoteRow, note_id)
            if row is None:
                return None
            merged = merge_note(_to_schema(row), changes, self._clock())
            for column in _MUTABLE_COLUMNS:
                setattr(row, column, getattr(merged, column))
            await session.commit()
            return merged

    async def delete(self, note_id: int) -> bool:
        async with self._session("Failed to delete note", note_id=note_id) as session:
            result = await session.execute(delete(NoteRow).where(NoteRow.id == note_id))
            await session.commit()
            return result.rowcount > 0

    async def ping(self) -> bool:
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def close(self) -> None:
        # Returns pooled connections and lets the driver disconnect cleanly
        await self._engine.dispose()
