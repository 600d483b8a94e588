"""Create notes table

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates the `notes` table for handwritten notes.
How:   Integer autoincrement key (sqlite_autoincrement so SQLite never reuses
       a deleted id), TEXT columns for the encoded drawing and thumbnail,
       timezone-aware timestamps written by the application.

Rollback: downgrade() drops the table entirely (destructive — all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the notes table. Column docs live in dysnote/models/note.py."""
    op.create_table(
        "notes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "title",
            sa.String(255),
            nullable=False,
            comment="User supplied title; placeholder when left empty",
        ),
        sa.Column(
            "content",
            sa.Text(),
            nullable=False,
            comment="Encoded drawing (data URL), opaque to the backend",
        ),
        sa.Column(
            "preview",
            sa.Text(),
            nullable=False,
            comment="Encoded thumbnail of the drawing (data URL)",
        ),
        sa.Column(
            "recognized_text",
            sa.Text(),
            nullable=True,
            comment="Text produced by the OCR step, stored verbatim",
        ),
        sa.Column(
            "is_favorite",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="Set once on insert (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="Refreshed on every update (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )


def downgrade() -> None:
    """
    Drop the notes table entirely.

    WARNING: destructive — all note data will be permanently lost.
    """
    op.drop_table("notes")
