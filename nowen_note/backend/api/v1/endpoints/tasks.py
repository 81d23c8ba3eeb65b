"""
Tasks API Endpoints.

REST API endpoints for the task list.
"""

from fastapi import APIRouter, Query

from nowen_note.backend.core.dependencies import CurrentUser, DbSession
from nowen_note.backend.schemas.base import ApiResponse
from nowen_note.backend.schemas.task import (
    TaskCreate,
    TaskFilter,
    TaskResponse,
    TaskStats,
    TaskUpdate,
    TaskWithChildren,
)
from nowen_note.backend.services.task import TaskService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[TaskResponse]],
    summary="List tasks",
    description="Incomplete tasks first, then by priority (high first).",
)
async def list_tasks(
    user: CurrentUser,
    db: DbSession,
    filter: TaskFilter = Query(default=TaskFilter.ALL, description="Named view"),
    note_id: str | None = Query(default=None, description="Only tasks linked to this note"),
) -> ApiResponse[list[TaskResponse]]:
    """List tasks."""
    tasks = await TaskService(db).list_tasks(user.id, view=filter, note_id=note_id)
    return ApiResponse(data=[TaskResponse.model_validate(task) for task in tasks])


@router.get("/stats/summary", response_model=ApiResponse[TaskStats], summary="Task counts")
async def task_stats(user: CurrentUser, db: DbSession) -> ApiResponse[TaskStats]:
    """Totals for the task widget."""
    return ApiResponse(data=await TaskService(db).stats(user.id))


@router.get("/{task_id}", response_model=ApiResponse[TaskWithChildren], summary="Get a task")
async def get_task(task_id: str, user: CurrentUser, db: DbSession) -> ApiResponse[TaskWithChildren]:
    """Get a task with its direct subtasks."""
    return ApiResponse(data=await TaskService(db).get_task(user.id, task_id))


@router.post("", response_model=ApiResponse[TaskResponse], status_code=201, summary="Create a task")
async def create_task(data: TaskCreate, user: CurrentUser, db: DbSession) -> ApiResponse[TaskResponse]:
    """Create a task."""
    task = await TaskService(db).create_task(user.id, data)
    return ApiResponse(data=TaskResponse.model_validate(task))


@router.put("/{task_id}", response_model=ApiResponse[TaskResponse], summary="Update a task")
@router.patch(
    "/{task_id}",
    response_model=ApiResponse[TaskResponse],
    summary="Update a task",
    include_in_schema=False,
)
async def update_task(
    task_id: str,
    data: TaskUpdate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[TaskResponse]:
    """Partially update a task."""
    task = await TaskService(db).update_task(user.id, task_id, data)
    return ApiResponse(data=TaskResponse.model_validate(task))


@router.patch("/{task_id}/toggle", response_model=ApiResponse[TaskResponse], summary="Toggle done")
async def toggle_task(task_id: str, user: CurrentUser, db: DbSession) -> ApiResponse[TaskResponse]:
    """Flip a task between done and not done."""
    task = await TaskService(db).toggle_task(user.id, task_id)
    return ApiResponse(data=TaskResponse.model_validate(task))


@router.delete("/{task_id}", status_code=204, summary="Delete a task")
async def delete_task(task_id: str, user: CurrentUser, db: DbSession) -> None:
    """Delete a task and its subtasks."""
    await TaskService(db).delete_task(user.id, task_id)
