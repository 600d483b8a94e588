"""
DysNote Backend — In-Memory Note Repository
============================================

What:  Volatile Note store living in process memory.
Why:   Zero-setup backend for demos, local development and tests.
How:   A dict keyed by id plus a counter, both owned by the repository object.
       The application constructs exactly one instance at startup and hands it
       to the routes through app.state, so two apps (or two tests) never share
       notes.

Concurrency:
    Each operation runs without awaiting, so under the single-threaded event
    loop it is atomic. Concurrent updates to the same note still race at the
    request level (last write wins).
"""

import logging
from typing import Dict, List, Optional

from dysnote.repositories.base import Clock, NoteRepository, merge_note, utc_now
from dysnote.schemas.note import Note, NoteCreate, NoteUpdate

logger = logging.getLogger(__name__)

# 1x1 transparent PNG, stands in for a drawing in the welcome notes
_BLANK_PNG = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)

WELCOME_NOTES = (
    NoteCreate(
        title="Welcome to DysNote",
        content=_BLANK_PNG,
        preview=_BLANK_PNG,
        recognized_text=(
            "Write with your finger, pen or mouse. "
            "Tap Recognize to turn your handwriting into text."
        ),
    ),
    NoteCreate(
        title="Tips for easier reading",
        content=_BLANK_PNG,
        preview=_BLANK_PNG,
        recognized_text=(
            "Use the writing guide lines, pick a bigger pen, "
            "and press Read Aloud to hear your note."
        ),
        is_favorite=True,
    ),
)


class InMemoryNoteRepository(NoteRepository):
    """
    Note store backed by a dict.

    list_all() returns notes in insertion order, which equals ascending id
    because ids only ever grow.
    """

    backend_name = "memory"

    def __init__(self, clock: Clock = utc_now):
        self._clock = clock
        self._notes: Dict[int, Note] = {}
        self._next_id = 1

    # Callers get copies; the dict holds the only canonical instance.

    async def list_all(self) -> List[Note]:
        return [note.model_copy() for note in self._notes.values()]

    async def get(self, note_id: int) -> Optional[Note]:
        note = self._notes.get(note_id)
        return note.model_copy() if note is not None else None

    async def create(self, fields: NoteCreate) -> Note:
        now = self._clock()
        note = Note(
            id=self._next_id,
            title=fields.title,
            content=fields.content,
            preview=fields.preview,
            recognized_text=fields.recognized_text,
            is_favorite=fields.is_favorite,
            created_at=now,
            updated_at=now,
        )
        self._notes[note.id] = note
        self._next_id += 1
        logger.debug("Created note %d", note.id)
        return note.model_copy()

    async def update(self, note_id: int, changes: NoteUpdate) -> Optional[Note]:
        current = self._notes.get(note_id)
        if current is None:
            return None
        updated = merge_note(current, changes, self._clock())
        self._notes[note_id] = updated
        return updated.model_copy()

    async def delete(self, note_id: int) -> bool:
        return self._notes.pop(note_id, None) is not None

    async def seed_example_notes(self) -> int:
        """
        Pre-populate an empty store with the welcome notes.

        Returns how many notes were added (0 when the store already has data).
        """
        if self._notes:
            return 0
        for fields in WELCOME_NOTES:
            await self.create(fields)
        logger.info("Seeded %d example notes", len(WELCOME_NOTES))
        return len(WELCOME_NOTES)
