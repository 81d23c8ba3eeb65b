"""
Notebook Model.

Notebooks form a per-user hierarchy through parent_id. Deleting a
notebook cascades to its sub-notebooks and their notes at the database
level.
"""

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nowen_note.backend.models.base import Base, TimestampMixin, UUIDMixin

DEFAULT_NOTEBOOK_ICON = "📒"


class Notebook(UUIDMixin, TimestampMixin, Base):
    """Notebook database model."""

    __tablename__ = "notebooks"
    __table_args__ = (
        Index("idx_notebooks_user", "user_id"),
        Index("idx_notebooks_parent", "parent_id"),
    )

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    parent_id: Mapped[str | None] = mapped_column(
        ForeignKey("notebooks.id", ondelete="CASCADE"),
        nullable=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str] = mapped_column(String(32), default=DEFAULT_NOTEBOOK_ICON, nullable=False)
    color: Mapped[str | None] = mapped_column(String(32), nullable=True)
    sort_order: Mapped[int] = mapped_column(default=0, nullable=False)
    is_expanded: Mapped[bool] = mapped_column(default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Notebook(id={self.id}, name={self.name!r})>"
