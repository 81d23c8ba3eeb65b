"""
Task Service.

Business logic for tasks: named date views, completion toggling and
subtasks.
"""

from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from nowen_note.backend.core.exceptions import NotFoundError, ValidationError
from nowen_note.backend.core.utils import utc_now
from nowen_note.backend.models.task import Task
from nowen_note.backend.repositories.note import NoteRepository
from nowen_note.backend.repositories.task import TaskRepository
from nowen_note.backend.schemas.task import (
    TaskCreate,
    TaskFilter,
    TaskResponse,
    TaskStats,
    TaskUpdate,
    TaskWithChildren,
)
from nowen_note.backend.services.base import BaseService


def week_bounds(today: date) -> tuple[date, date]:
    """Monday to Sunday of the week containing today."""
    start = today - timedelta(days=today.weekday())
    return start, start + timedelta(days=6)


class TaskService(BaseService):
    """Service for task business logic."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = TaskRepository(session)
        self.notes = NoteRepository(session)

    @staticmethod
    def _today() -> date:
        return utc_now().date()

    async def list_tasks(
        self,
        user_id: str,
        view: TaskFilter = TaskFilter.ALL,
        note_id: str | None = None,
    ) -> list[Task]:
        """List tasks for one of the named views."""
        today = self._today()
        if view == TaskFilter.TODAY:
            return await self.repo.list_for_user(user_id, due_on=today, note_id=note_id)
        if view == TaskFilter.WEEK:
            return await self.repo.list_for_user(
                user_id, due_between=week_bounds(today), note_id=note_id
            )
        if view == TaskFilter.OVERDUE:
            return await self.repo.list_for_user(user_id, overdue_before=today, note_id=note_id)
        if view == TaskFilter.COMPLETED:
            return await self.repo.list_for_user(user_id, completed=True, note_id=note_id)
        return await self.repo.list_for_user(user_id, note_id=note_id)

    async def stats(self, user_id: str) -> TaskStats:
        """Summary counts across all of the user's tasks."""
        return TaskStats(**await self.repo.stats(user_id, self._today()))

    async def get_task(self, user_id: str, task_id: str) -> TaskWithChildren:
        """Get a task with its direct subtasks."""
        task = await self.repo.get_owned(user_id, task_id)
        children = await self.repo.children(user_id, task_id)
        result = TaskWithChildren.model_validate(task)
        result.children = [TaskResponse.model_validate(child) for child in children]
        return result

    async def _check_links(self, user_id: str, note_id: str | None, parent_id: str | None) -> None:
        if note_id is not None and not await self.notes.owned_exists(user_id, note_id):
            raise NotFoundError("Note not found")
        if parent_id is not None and not await self.repo.owned_exists(user_id, parent_id):
            raise NotFoundError("Parent task not found")

    async def create_task(self, user_id: str, data: TaskCreate) -> Task:
        """Create a task. The title is trimmed and must not be blank."""
        self._validate_required({"title": data.title}, ["title"])
        await self._check_links(user_id, data.note_id, data.parent_id)

        self._log_operation("Creating task", user_id=user_id, priority=data.priority)
        return await self._execute_db_operation(
            "create_task",
            self.repo.create(
                user_id=user_id,
                title=data.title.strip(),
                priority=data.priority,
                due_date=data.due_date,
                note_id=data.note_id,
                parent_id=data.parent_id,
            ),
        )

    async def update_task(self, user_id: str, task_id: str, data: TaskUpdate) -> Task:
        """
        Partially update a task.

        due_date, note_id and parent_id can be cleared with an explicit
        null; other fields ignore null.
        """
        task = await self.repo.get_owned(user_id, task_id)
        changes = data.model_dump(exclude_unset=True)
        for field in ("title", "is_completed", "priority", "sort_order"):
            if field in changes and changes[field] is None:
                del changes[field]
        if "title" in changes:
            self._validate_required(changes, ["title"])
            changes["title"] = changes["title"].strip()
        if changes.get("parent_id") == task_id:
            raise ValidationError("A task cannot be its own parent")
        await self._check_links(user_id, changes.get("note_id"), changes.get("parent_id"))

        self._log_operation("Updating task", task_id=task_id, fields=sorted(changes))
        return await self._execute_db_operation("update_task", self.repo.apply(task, **changes))

    async def toggle_task(self, user_id: str, task_id: str) -> Task:
        """Flip the completion state of a task."""
        task = await self.repo.get_owned(user_id, task_id)
        return await self._execute_db_operation(
            "toggle_task",
            self.repo.apply(task, is_completed=not task.is_completed),
        )

    async def delete_task(self, user_id: str, task_id: str) -> None:
        """Delete a task together with its subtasks."""
        self._log_operation("Deleting task", task_id=task_id)
        deleted = await self._execute_db_operation(
            "delete_task",
            self.repo.delete_owned(user_id, task_id),
        )
        if not deleted:
            raise NotFoundError("Task not found")
