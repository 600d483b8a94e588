"""
DysNote Backend — FastAPI Dependencies
=======================================

What:  Small Depends() providers shared by the route modules.

get_note_repository:
    The repository is constructed once by create_app() and parked on
    app.state; handlers receive it per request instead of importing a
    module-level store.

resolve_note_id:
    Turns the `{note_id}` path segment into an int. Anything that is not a
    plain positive integer in the storable range cannot match a stored note,
    so it is reported as "Note not found" (404) rather than a 400/422.
"""

from fastapi import Request

from dysnote.exceptions import NotFoundError
from dysnote.repositories.base import NoteRepository

# Upper bound of the INTEGER primary key column
MAX_NOTE_ID = 2**31 - 1
_MAX_NOTE_ID_DIGITS = len(str(MAX_NOTE_ID))


def get_note_repository(request: Request) -> NoteRepository:
    return request.app.state.repository


async def resolve_note_id(note_id: str) -> int:
    # Length check first: int() refuses very long digit strings
    if len(note_id) > _MAX_NOTE_ID_DIGITS or not (note_id.isascii() and note_id.isdigit()):
        raise NotFoundError(resource="note", resource_id=note_id)
    value = int(note_id)
    if not 1 <= value <= MAX_NOTE_ID:
        raise NotFoundError(resource="note", resource_id=note_id)
    return value
