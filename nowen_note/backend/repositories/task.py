"""
Task Repository.

Data access layer for tasks. Date windows (today, this week, overdue)
are computed by the caller and passed in as plain dates.
"""

from datetime import date

from sqlalchemy import delete, func, select
from sqlalchemy.sql import Select

from nowen_note.backend.models.task import Task
from nowen_note.backend.repositories.base import BaseRepository


def _ordered(stmt: Select) -> Select:
    return stmt.order_by(
        Task.is_completed,
        Task.priority.desc(),
        Task.sort_order,
        Task.created_at.desc(),
    )


class TaskRepository(BaseRepository[Task]):
    """Repository for Task model."""

    model = Task

    async def list_for_user(
        self,
        user_id: str,
        due_on: date | None = None,
        due_between: tuple[date, date] | None = None,
        overdue_before: date | None = None,
        completed: bool | None = None,
        note_id: str | None = None,
    ) -> list[Task]:
        """
        List the user's tasks, incomplete first, then by priority.

        Args:
            due_on: Only tasks due on this day
            due_between: Only tasks due within this inclusive range
            overdue_before: Only incomplete tasks due before this day
            completed: Filter by completion state
            note_id: Only tasks linked to this note
        """
        stmt = select(Task).where(Task.user_id == user_id)
        if due_on is not None:
            stmt = stmt.where(Task.due_date == due_on)
        if due_between is not None:
            start, end = due_between
            stmt = stmt.where(Task.due_date >= start, Task.due_date <= end)
        if overdue_before is not None:
            stmt = stmt.where(
                Task.due_date < overdue_before,
                Task.is_completed == False,  # noqa: E712
            )
        if completed is not None:
            stmt = stmt.where(Task.is_completed == completed)
        if note_id is not None:
            stmt = stmt.where(Task.note_id == note_id)

        result = await self.session.execute(_ordered(stmt))
        return list(result.scalars().all())

    async def children(self, user_id: str, parent_id: str) -> list[Task]:
        """Direct subtasks of a task."""
        result = await self.session.execute(
            _ordered(select(Task).where(Task.user_id == user_id, Task.parent_id == parent_id))
        )
        return list(result.scalars().all())

    async def stats(self, user_id: str, today: date) -> dict[str, int]:
        """Counts for the summary widget."""
        result = await self.session.execute(
            select(
                func.count(),
                func.count().filter(Task.is_completed == True),  # noqa: E712
                func.count().filter(Task.due_date == today),
                func.count().filter(
                    Task.due_date < today,
                    Task.is_completed == False,  # noqa: E712
                ),
            )
            .select_from(Task)
            .where(Task.user_id == user_id)
        )
        total, completed, due_today, overdue = result.one()
        return {
            "total": total,
            "completed": completed,
            "pending": total - completed,
            "today": due_today,
            "overdue": overdue,
        }

    async def delete_owned(self, user_id: str, task_id: str) -> bool:
        """Delete a task; subtasks cascade in the store."""
        result = await self.session.execute(
            delete(Task)
            .where(Task.id == task_id, Task.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def delete_all_for_user(self, user_id: str) -> int:
        """Delete every task of the user."""
        result = await self.session.execute(
            delete(Task)
            .where(Task.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
