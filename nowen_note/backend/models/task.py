"""
Task Model.

To-do items, optionally linked to a note and optionally nested under a
parent task.
"""

from datetime import date

from sqlalchemy import Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from nowen_note.backend.models.base import Base, TimestampMixin, UUIDMixin

PRIORITY_LOW = 1
PRIORITY_MEDIUM = 2
PRIORITY_HIGH = 3


class Task(UUIDMixin, TimestampMixin, Base):
    """Task database model."""

    __tablename__ = "tasks"
    __table_args__ = (
        Index("idx_tasks_user", "user_id"),
        Index("idx_tasks_due", "due_date"),
    )

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    is_completed: Mapped[bool] = mapped_column(default=False, nullable=False)
    priority: Mapped[int] = mapped_column(default=PRIORITY_MEDIUM, nullable=False)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    note_id: Mapped[str | None] = mapped_column(
        ForeignKey("notes.id", ondelete="SET NULL"),
        nullable=True,
    )
    parent_id: Mapped[str | None] = mapped_column(
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=True,
    )
    sort_order: Mapped[int] = mapped_column(default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title={self.title!r})>"
