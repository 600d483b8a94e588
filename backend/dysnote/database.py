"""
DysNote Backend — Database Engine & Session Management
=======================================================

What:  Declarative base plus helpers that build the async engine and session
       factory for the durable note store.
Why:   The durable repository owns its engine; building it through one helper
       keeps pool options and URL handling in a single place.
How:   create_engine_from_settings() → create_session_factory() → handed to
       SqlAlchemyNoteRepository by the repository factory.
Who:   Used by dysnote.repositories and by Alembic (for Base.metadata).

Connection Pooling:
    PostgreSQL (asyncpg): pool_size / max_overflow / pre_ping from settings,
        connections recycled hourly.
    SQLite (aiosqlite): SQLAlchemy picks the pool; sizing options are skipped
        because file and memory SQLite pools reject them.
"""

from typing import Any, Dict, Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from dysnote.config import Settings, settings as default_settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic reads for autogenerate.
    """
    pass


def _engine_options(cfg: Settings) -> Dict[str, Any]:
    options: Dict[str, Any] = {
        # SQL echo only when debugging; it is very noisy otherwise
        "echo": cfg.log_level == "DEBUG",
    }
    if make_url(cfg.database_url).get_backend_name() != "sqlite":
        options.update(
            pool_size=cfg.db_pool_size,
            max_overflow=cfg.db_max_overflow,
            pool_pre_ping=cfg.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


def create_engine_from_settings(cfg: Optional[Settings] = None) -> AsyncEngine:
    """
    Build the async engine for `cfg.database_url`.

    No connection is opened here; the pool connects lazily on first use.
    """
    cfg = cfg or default_settings
    return create_async_engine(cfg.database_url, **_engine_options(cfg))


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    expire_on_commit=False: ORM rows stay readable after commit, so the
    repository can convert them to schemas outside the transaction.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
