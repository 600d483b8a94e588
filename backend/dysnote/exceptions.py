"""
DysNote Backend — Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the error taxonomy of the notes API.
Why:   Exceptions carry a client-safe message plus server-side context, and
       global handlers (registered in main.py) map each type to one status code.
Who:   Raised by repositories and route handlers; caught by global handlers.

Exception Hierarchy:
    DysNoteError (base)
    ├── ValidationError  → 400 Bad Request (client can fix)
    ├── NotFoundError    → 404 Not Found
    └── DatabaseError    → 500 Internal Server Error (detail logged only)

A missing note is NOT an exception at the repository level: repositories
return None / False and the route handler raises NotFoundError.
"""

from typing import Any, Dict, Optional


class DysNoteError(Exception):
    """
    Base exception for all DysNote application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(DysNoteError):
    """
    Raised when client input fails validation.

    HTTP: 400 Bad Request. The message lists the violations so the client can
    fix the payload; FastAPI's RequestValidationError is converted to the same
    response shape in main.py.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(DysNoteError):
    """
    Raised by route handlers when a repository reports absence.

    HTTP: 404 Not Found with the fixed message "Note not found".
    """

    def __init__(
        self,
        resource: str = "note",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(DysNoteError):
    """
    Raised when the backing store fails.

    HTTP: 500 Internal Server Error.

    Security Note:
        The message is a generic per-operation sentence. Driver errors, SQL
        and constraint names go into `context` and the server log only.
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
