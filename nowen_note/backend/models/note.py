"""
Note Model.

A note stores its rich-text body as an opaque JSON document (content)
next to a plain-text projection (content_text) used for search and
previews. The version column drives optimistic concurrency.

notes_fts is the FTS5 virtual table holding the searchable copy of
title and content_text. It lives in its own MetaData so create_all
never tries to create it as an ordinary table; core.database issues
the virtual table DDL instead.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, MetaData, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column

from nowen_note.backend.models.base import Base, TimestampMixin, UUIDMixin

DEFAULT_NOTE_TITLE = "Untitled Note"
EMPTY_DOCUMENT = "{}"


class Note(UUIDMixin, TimestampMixin, Base):
    """Note database model."""

    __tablename__ = "notes"
    __table_args__ = (
        Index("idx_notes_user", "user_id"),
        Index("idx_notes_notebook", "notebook_id"),
        Index("idx_notes_updated", "updated_at"),
    )

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    notebook_id: Mapped[str] = mapped_column(
        ForeignKey("notebooks.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(500), default=DEFAULT_NOTE_TITLE, nullable=False)
    content: Mapped[str] = mapped_column(Text, default=EMPTY_DOCUMENT, nullable=False)
    content_text: Mapped[str] = mapped_column(Text, default="", nullable=False)
    is_pinned: Mapped[bool] = mapped_column(default=False, nullable=False)
    is_favorite: Mapped[bool] = mapped_column(default=False, nullable=False)
    is_archived: Mapped[bool] = mapped_column(default=False, nullable=False)
    is_trashed: Mapped[bool] = mapped_column(default=False, nullable=False)
    trashed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    version: Mapped[int] = mapped_column(default=1, nullable=False)
    sort_order: Mapped[int] = mapped_column(default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, version={self.version})>"


fts_metadata = MetaData()

notes_fts = Table(
    "notes_fts",
    fts_metadata,
    Column("note_id", String),
    Column("title", Text),
    Column("content_text", Text),
    # Hidden FTS5 column, bm25 score of the current MATCH
    Column("rank"),
)
