"""
DysNote Backend — Note Repository Interface
============================================

What:  Abstract contract for Note persistence, plus the pure helpers every
       implementation shares (clock, timestamp stepping, partial-update merge).
Why:   The volatile and durable stores must behave identically for callers;
       putting the merge and timestamp rules here means neither backend can
       drift from the other.
Who:   Implemented by InMemoryNoteRepository and SqlAlchemyNoteRepository;
       consumed by the notes routes and the health check.

Contract summary:
    list_all()        → every note, ascending id (creation order)
    get(id)           → Note, or None when absent (never raises for a miss)
    create(fields)    → stored Note with new id and created_at == updated_at
    update(id, diff)  → merged Note, or None when absent (no implicit create)
    delete(id)        → True if a record was removed, False if absent

Only genuine storage faults raise (DatabaseError); absence is a return value.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from dysnote.schemas.note import Note, NoteCreate, NoteUpdate

Clock = Callable[[], datetime]

# Smallest step the stores can represent (datetime and PostgreSQL TIMESTAMP)
_TICK = timedelta(microseconds=1)


def utc_now() -> datetime:
    """Default repository clock: timezone-aware UTC."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on the way back)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def next_timestamp(previous: datetime, now: datetime) -> datetime:
    """
    The updated_at value for a write happening at `now`.

    Strictly greater than `previous` even when the clock has not advanced
    (or went backwards), so every update is observable.
    """
    previous, now = as_utc(previous), as_utc(now)
    return now if now > previous else previous + _TICK


def merge_note(note: Note, changes: NoteUpdate, now: datetime) -> Note:
    """
    Apply present fields, preserve absent fields, always refresh updated_at.

    Pure: returns a new Note and leaves `note` untouched. id and created_at
    cannot be changed through NoteUpdate.
    """
    update = changes.changes()
    update["updated_at"] = next_timestamp(note.updated_at, now)
    return note.model_copy(update=update)


class NoteRepository(ABC):
    """
    Abstract interface for the Note store.

    Implementations:
        - InMemoryNoteRepository: process memory, lost on restart
        - SqlAlchemyNoteRepository: relational table via async SQLAlchemy
    """

    #: Short backend name reported by the health endpoint
    backend_name: str = "unknown"

    @abstractmethod
    async def list_all(self) -> List[Note]:
        """Return every note ordered by ascending id."""
        ...

    @abstractmethod
    async def get(self, note_id: int) -> Optional[Note]:
        """Return the note with `note_id`, or None."""
        ...

    @abstractmethod
    async def create(self, fields: NoteCreate) -> Note:
        """Store a new note and return it with id and timestamps assigned."""
        ...

    @abstractmethod
    async def update(self, note_id: int, changes: NoteUpdate) -> Optional[Note]:
        """Merge `changes` onto the stored note; None if `note_id` is unknown."""
        ...

    @abstractmethod
    async def delete(self, note_id: int) -> bool:
        """Remove the note; report whether anything was removed."""
        ...

    async def ping(self) -> bool:
        """Cheap reachability check for the health endpoint."""
        return True

    async def close(self) -> None:
        """Release backend resources at application shutdown."""
        return None
