"""
DysNote Backend — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn dysnote.main:app) and by
       tests that need an app with their own settings or repository.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────┐ ┌─────────┐  │
    │  │  Req ID  │→│   Logging   │→│ GZip │→│  CORS   │  │
    │  └──────────┘ └─────────────┘ └──────┘ └─────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────────────┐ ┌──────────────┐  │
    │  │ /notes  (CRUD + favorite)    │ │ GET /health  │  │
    │  └──────────────────────────────┘ └──────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Storage→500  │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → create table (database) → seed welcome notes (memory)
    Shutdown: repository.close() (disposes the engine for the database backend)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Iterable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dysnote import __version__
from dysnote.config import Settings, settings as default_settings
from dysnote.exceptions import DatabaseError, DysNoteError, NotFoundError, ValidationError
from dysnote.middleware.logging import RequestLoggingMiddleware
from dysnote.middleware.request_id import RequestIDMiddleware, request_id_var
from dysnote.repositories import (
    InMemoryNoteRepository,
    NoteRepository,
    SqlAlchemyNoteRepository,
    build_repository,
)
from dysnote.routes import health, notes

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout
    (containers capture stdout). Called once during startup.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # These log every request / statement at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Database backend: create the notes table when enabled
        3. Memory backend: seed the welcome notes when enabled and empty
    Shutdown:
        1. Close the repository (returns pooled connections)
    """
    cfg: Settings = app.state.settings
    repository: NoteRepository = app.state.repository

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(cfg.log_level)
    logger.info("=" * 60)
    logger.info("DysNote Backend %s starting up...", __version__)
    logger.info("Storage backend: %s", repository.backend_name)

    if isinstance(repository, SqlAlchemyNoteRepository) and cfg.db_create_tables:
        await repository.create_schema()
        logger.info("Notes table ready")

    if isinstance(repository, InMemoryNoteRepository) and cfg.seed_example_notes:
        await repository.seed_example_notes()

    logger.info("Server ready at http://%s:%d", cfg.backend_host, cfg.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("DysNote Backend shutting down...")
    await repository.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, message: str) -> JSONResponse:
    """Every error body has the shape {"message": str}."""
    return JSONResponse(status_code=status_code, content={"message": message})


def _field_path(err: Dict[str, Any]) -> str:
    return ".".join(str(part) for part in err.get("loc", ()) if part != "body")


def first_invalid_field(errors: Iterable[Dict[str, Any]]) -> Optional[str]:
    """Dotted path of the first violation that names a field, e.g. "title"."""
    for err in errors:
        where = _field_path(err)
        if where:
            return where
    return None


def describe_validation_errors(errors: Iterable[Dict[str, Any]]) -> str:
    """
    Turn pydantic error entries into one readable sentence.

    Example:
        [{"loc": ("body", "title"), "msg": "Field required"}]
        → 'Validation error: Field required at "title"'
    """
    parts = []
    for err in errors:
        where = _field_path(err)
        msg = err.get("msg", "Invalid value")
        parts.append(f'{msg} at "{where}"' if where else msg)
    return "Validation error: " + ("; ".join(parts) or "Invalid request")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes.

    Handler hierarchy:
        RequestValidationError / ValidationError → 400
        NotFoundError                            → 404 "Note not found"
        HTTPException (unknown route, 405, ...)  → its own status
        DatabaseError                            → 500, generic message
        DysNoteError (base)                      → 500
        Exception (fallback)                     → 500

    Internal detail (context, driver errors, stack traces) is logged and
    never placed in the response body.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Schema violations in the body: same shape as our own ValidationError."""
        errors = exc.errors()
        error = ValidationError(
            message=describe_validation_errors(errors),
            field=first_invalid_field(errors),
            context={"violations": len(errors)},
        )
        return await handle_validation_error(request, error)

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning(
            "[%s] Validation error: %s | Field: %s",
            request_id_var.get(""),
            exc.message,
            exc.field,
        )
        return _error_response(400, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        response = _error_response(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(500, exc.message)

    @app.exception_handler(DysNoteError)
    async def handle_app_error(request: Request, exc: DysNoteError):
        logger.error(
            "[%s] Application error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(500, GENERIC_ERROR_MESSAGE)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error_response(500, GENERIC_ERROR_MESSAGE)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[NoteRepository] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings:   configuration; defaults to the environment-loaded singleton
        repository: note store; built from `settings` when omitted

    The repository is built here rather than in lifespan so an app driven
    without lifespan events (e.g. httpx ASGITransport) is still usable.
    """
    cfg = settings or default_settings

    app = FastAPI(
        title="DysNote API",
        description=(
            "Storage API for a dyslexia-friendly handwriting notebook. "
            "Notes carry a drawing, its thumbnail, optional OCR text and a favorite flag."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.repository = repository or build_repository(cfg)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    # Drawings travel as base64 data URLs; they compress well
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(notes.router, prefix=cfg.api_prefix)
    app.include_router(health.router)

    return app


# uvicorn expects `dysnote.main:app` to be importable
app = create_app()
