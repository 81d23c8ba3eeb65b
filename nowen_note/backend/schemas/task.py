"""
Task Schemas.

Pydantic schemas for task API request/response validation.
"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TaskFilter(str, Enum):
    """Named views over the task list."""

    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    OVERDUE = "overdue"
    COMPLETED = "completed"


class TaskCreate(BaseModel):
    """Schema for creating a task."""

    title: str = Field(..., max_length=500, examples=["Review OKR draft"])
    priority: int = Field(default=2, ge=1, le=3, description="1 low, 2 medium, 3 high")
    due_date: date | None = None
    note_id: str | None = None
    parent_id: str | None = None


class TaskUpdate(BaseModel):
    """Schema for a partial task update."""

    title: str | None = Field(default=None, max_length=500)
    is_completed: bool | None = None
    priority: int | None = Field(default=None, ge=1, le=3)
    due_date: date | None = None
    note_id: str | None = None
    parent_id: str | None = None
    sort_order: int | None = None


class TaskResponse(BaseModel):
    """Schema for a task in API responses."""

    id: str
    title: str
    is_completed: bool
    priority: int
    due_date: date | None
    note_id: str | None
    parent_id: str | None
    sort_order: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TaskWithChildren(TaskResponse):
    """A task with its direct subtasks."""

    children: list[TaskResponse] = Field(default_factory=list)


class TaskStats(BaseModel):
    """Summary counts across the user's tasks."""

    total: int
    completed: int
    pending: int
    today: int
    overdue: int
