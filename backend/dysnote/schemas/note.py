"""
DysNote Backend — Pydantic Request/Response Schemas
====================================================

What:  Pydantic models defining the API contract between the browser client
       and the backend, and the Note value that repositories hand around.
Why:   Strict input validation, automatic serialization, and OpenAPI docs.
How:   Python attributes are snake_case; JSON keys are the camelCase names the
       client already uses (recognizedText, isFavorite, createdAt, updatedAt).
       `populate_by_name` lets server code construct models by attribute name.

Schemas are separate from the SQLAlchemy model because the in-memory store has
no ORM rows at all: `Note` is the one value type both backends return.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

# Placeholder used when a note is saved without a title
UNTITLED_NOTE = "Untitled Note"

# Fields that may not be cleared to null by a partial update
_NON_NULLABLE_FIELDS = {"title", "content", "preview", "is_favorite"}


def _title_or_placeholder(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        return UNTITLED_NOTE
    return value


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what the client sends
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    What:  Body of POST /notes and PUT /notes/{id}.
    Rules: `title` and `content` are required strings; the optional fields
           fall back to their documented defaults. Unknown keys are ignored.
    """
    title: str = Field(max_length=255, description="Note title; empty becomes 'Untitled Note'")
    content: str = Field(description="Encoded drawing (data URL)")
    preview: str = Field(default="", description="Encoded thumbnail (data URL)")
    recognized_text: Optional[str] = Field(
        default=None,
        alias="recognizedText",
        description="OCR output for the drawing, stored verbatim",
    )
    is_favorite: bool = Field(default=False, alias="isFavorite")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("title")
    @classmethod
    def default_title(cls, v: str) -> str:
        return _title_or_placeholder(v)


class NoteUpdate(BaseModel):
    """
    What:  Partial field set merged onto a stored note by `update()`.
    How:   Only fields that were explicitly set take part in the merge
           (see `changes()`); everything else keeps its stored value.
    """
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = None
    preview: Optional[str] = None
    recognized_text: Optional[str] = Field(default=None, alias="recognizedText")
    is_favorite: Optional[bool] = Field(default=None, alias="isFavorite")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("title")
    @classmethod
    def default_title(cls, v: Optional[str]) -> Optional[str]:
        return _title_or_placeholder(v)

    def changes(self) -> Dict[str, Any]:
        """
        Fields to apply, keyed by attribute name.

        An explicit null is kept only for recognized_text (clearing OCR text);
        null for a required field means "leave it alone".
        """
        return {
            name: value
            for name, value in self.model_dump(exclude_unset=True).items()
            if value is not None or name not in _NON_NULLABLE_FIELDS
        }


class FavoriteUpdate(BaseModel):
    """
    What:  Body of PATCH /notes/{id}/favorite.
    How:   The flag is reduced to its truthiness, so a missing or null flag
           un-favorites the note. Bodies that are not JSON objects carry no
           flag at all (see `from_body`).
    """
    is_favorite: bool = Field(default=False, alias="isFavorite")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("is_favorite", mode="before")
    @classmethod
    def coerce_truthiness(cls, v: Any) -> bool:
        return bool(v)

    @classmethod
    def from_body(cls, body: Any) -> "FavoriteUpdate":
        """Read the flag from any decoded JSON body; non-objects mean False."""
        if isinstance(body, dict):
            return cls.model_validate(body)
        return cls()


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class Note(BaseModel):
    """
    What:  A stored note, as returned by every repository operation.
    Who:   Serialized by GET/POST/PUT/PATCH responses (camelCase keys,
           ISO-8601 timestamps).
    Invariant: created_at <= updated_at.
    """
    id: int = Field(description="Repository-assigned identifier")
    title: str
    content: str
    preview: str = ""
    recognized_text: Optional[str] = Field(default=None, alias="recognizedText")
    is_favorite: bool = Field(default=False, alias="isFavorite")
    created_at: datetime = Field(alias="createdAt", description="Creation time (UTC)")
    updated_at: datetime = Field(alias="updatedAt", description="Last update time (UTC)")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    """
    What:  The single error body shape used by every endpoint.

    Example:
        {"message": "Note not found"}
    """
    message: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and storage status.
    Who:   Returned by GET /health for monitoring and container probes.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    storage: str = Field(description="Configured storage backend: memory, database")
    storage_status: str = Field(description="Storage reachability: available, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
