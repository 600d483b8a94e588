"""
DysNote Backend — Note Repositories
====================================

What:  Storage backends for the Note entity behind one interface.

Repository Inventory:
    - NoteRepository (abstract): the capability set every backend provides
    - InMemoryNoteRepository: volatile, process-local store
    - SqlAlchemyNoteRepository: durable store on a relational table

build_repository() is the only place that turns configuration into a
backend; the application calls it once at startup.
"""

from typing import Optional

from dysnote.config import Settings, settings as default_settings
from dysnote.repositories.base import NoteRepository
from dysnote.repositories.database import SqlAlchemyNoteRepository
from dysnote.repositories.memory import InMemoryNoteRepository

__all__ = [
    "NoteRepository",
    "InMemoryNoteRepository",
    "SqlAlchemyNoteRepository",
    "build_repository",
]


def build_repository(cfg: Optional[Settings] = None) -> NoteRepository:
    """Construct the backend selected by `cfg.storage_backend`."""
    cfg = cfg or default_settings
    if cfg.uses_database:
        return SqlAlchemyNoteRepository.from_settings(cfg)
    return InMemoryNoteRepository()
