"""
Tag Models.

Tags are per-user labels attached to notes through the note_tags join
table. Removing a note or a tag removes only the join rows.
"""

from sqlalchemy import Column, ForeignKey, String, Table, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from nowen_note.backend.models.base import Base, CreatedAtMixin, UUIDMixin

DEFAULT_TAG_COLOR = "#58a6ff"


class Tag(UUIDMixin, CreatedAtMixin, Base):
    """Tag database model."""

    __tablename__ = "tags"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_tags_user_name"),)

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(String(32), default=DEFAULT_TAG_COLOR, nullable=False)

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name={self.name!r})>"


note_tags = Table(
    "note_tags",
    Base.metadata,
    Column("note_id", ForeignKey("notes.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)
