"""
DysNote Backend — Note SQLAlchemy Model
========================================

What:  ORM model representing the `notes` table of the durable store.
Who:   Used by SqlAlchemyNoteRepository for CRUD and by Alembic for migrations.

Table Design:
    - Integer autoincrement primary key; `sqlite_autoincrement` stops SQLite
      from handing out the id of a deleted last row again
    - content / preview: encoded raster images (data URLs), stored as TEXT
    - recognized_text: nullable OCR output, stored verbatim
    - created_at / updated_at: timezone-aware UTC, stamped by the repository
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from dysnote.database import Base


class Note(Base):
    """
    A handwritten note row.

    Timestamps are always written by the repository (not by server defaults)
    so both storage backends share one clock and one set of rules.
    """

    __tablename__ = "notes"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="User supplied title; placeholder when left empty",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Encoded drawing (data URL), opaque to the backend",
    )

    preview: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="Encoded thumbnail of the drawing (data URL)",
    )

    recognized_text: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
        comment="Text produced by the OCR step, stored verbatim",
    )

    is_favorite: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Set once on insert (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Refreshed on every update (UTC)",
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, title='{self.title}', "
            f"updated_at='{self.updated_at}')>"
        )
