"""
DysNote Backend — Notes Route Handlers
=======================================

What:  The six note endpoints: list, get, create, replace, favorite, delete.
Why:   The drawing page saves notes here; the home page lists, favorites and
       deletes them.
How:   Handlers validate input, call exactly one repository operation, and
       translate the outcome into a status code. Absence (None / False) from
       the repository becomes NotFoundError → 404 via the global handler.

Route Inventory:
    GET    /notes                → 200 + array (ascending id)
    GET    /notes/{id}           → 200 | 404
    POST   /notes                → 201 | 400
    PUT    /notes/{id}           → 200 | 404 | 400
    PATCH  /notes/{id}/favorite  → 200 | 404
    DELETE /notes/{id}           → 204 | 404
"""

import logging
from typing import Any, List

from fastapi import APIRouter, Body, Depends, Response

from dysnote.dependencies import get_note_repository, resolve_note_id
from dysnote.exceptions import NotFoundError
from dysnote.repositories.base import NoteRepository
from dysnote.schemas.note import (
    ErrorResponse,
    FavoriteUpdate,
    Note,
    NoteCreate,
    NoteUpdate,
)

logger = logging.getLogger(__name__)

# Mounted under settings.api_prefix by create_app()
router = APIRouter(prefix="/notes", tags=["Notes"])

_NOT_FOUND = {404: {"description": "Note not found", "model": ErrorResponse}}
_INVALID = {400: {"description": "Invalid note payload", "model": ErrorResponse}}
_SERVER_ERROR = {500: {"description": "Storage error", "model": ErrorResponse}}


def _not_found(note_id: int) -> NotFoundError:
    return NotFoundError(resource="note", resource_id=str(note_id))


@router.get(
    "",
    response_model=List[Note],
    responses={**_SERVER_ERROR},
    summary="List all notes",
    description="Returns every stored note, oldest first (ascending id).",
)
async def list_notes(
    repository: NoteRepository = Depends(get_note_repository),
) -> List[Note]:
    return await repository.list_all()


@router.get(
    "/{note_id}",
    response_model=Note,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Get a single note by ID",
)
async def get_note(
    note_id: int = Depends(resolve_note_id),
    repository: NoteRepository = Depends(get_note_repository),
) -> Note:
    note = await repository.get(note_id)
    if note is None:
        raise _not_found(note_id)
    return note


@router.post(
    "",
    status_code=201,
    response_model=Note,
    responses={**_INVALID, **_SERVER_ERROR},
    summary="Create a note",
    description=(
        "Stores a new note. `title` and `content` are required; `preview`, "
        "`recognizedText` and `isFavorite` default to empty, null and false."
    ),
)
async def create_note(
    payload: NoteCreate,
    repository: NoteRepository = Depends(get_note_repository),
) -> Note:
    note = await repository.create(payload)
    logger.info("Note %d created", note.id)
    return note


@router.put(
    "/{note_id}",
    response_model=Note,
    responses={**_NOT_FOUND, **_INVALID, **_SERVER_ERROR},
    summary="Replace the editable fields of a note",
    description=(
        "Replaces title and content, plus any optional field present in the "
        "body. Optional fields left out keep their stored values."
    ),
)
async def replace_note(
    payload: NoteCreate,
    note_id: int = Depends(resolve_note_id),
    repository: NoteRepository = Depends(get_note_repository),
) -> Note:
    changes = NoteUpdate(**payload.model_dump(exclude_unset=True))
    note = await repository.update(note_id, changes)
    if note is None:
        raise _not_found(note_id)
    logger.info("Note %d updated", note_id)
    return note


@router.patch(
    "/{note_id}/favorite",
    response_model=Note,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Set or clear the favorite flag",
    description=(
        "Sets `isFavorite` to the truthiness of the body's `isFavorite`. A "
        "missing body, or one that is not a JSON object, clears the flag."
    ),
)
async def set_favorite(
    payload: Any = Body(default=None, examples=[{"isFavorite": True}]),
    note_id: int = Depends(resolve_note_id),
    repository: NoteRepository = Depends(get_note_repository),
) -> Note:
    is_favorite = FavoriteUpdate.from_body(payload).is_favorite
    note = await repository.update(note_id, NoteUpdate(is_favorite=is_favorite))
    if note is None:
        raise _not_found(note_id)
    return note


@router.delete(
    "/{note_id}",
    status_code=204,
    response_class=Response,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Delete a note",
)
async def delete_note(
    note_id: int = Depends(resolve_note_id),
    repository: NoteRepository = Depends(get_note_repository),
) -> Response:
    if not await repository.delete(note_id):
        raise _not_found(note_id)
    logger.info("Note %d deleted", note_id)
    return Response(status_code=204)
