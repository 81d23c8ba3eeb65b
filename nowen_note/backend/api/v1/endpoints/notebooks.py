"""
Notebooks API Endpoints.

REST API endpoints for the notebook hierarchy.
"""

from fastapi import APIRouter

from nowen_note.backend.core.dependencies import CurrentUser, DbSession
from nowen_note.backend.schemas.base import ApiResponse
from nowen_note.backend.schemas.notebook import (
    NotebookCreate,
    NotebookNode,
    NotebookResponse,
    NotebookUpdate,
)
from nowen_note.backend.services.notebook import NotebookService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[NotebookResponse]],
    summary="List notebooks",
    description="Flat list of notebooks ordered by sort order.",
)
async def list_notebooks(user: CurrentUser, db: DbSession) -> ApiResponse[list[NotebookResponse]]:
    """List all notebooks of the current user."""
    notebooks = await NotebookService(db).list_notebooks(user.id)
    return ApiResponse(data=[NotebookResponse.model_validate(nb) for nb in notebooks])


@router.get(
    "/tree",
    response_model=ApiResponse[list[NotebookNode]],
    summary="Notebook tree",
    description="Notebooks nested under their parents.",
)
async def get_tree(user: CurrentUser, db: DbSession) -> ApiResponse[list[NotebookNode]]:
    """Get the notebook forest."""
    return ApiResponse(data=await NotebookService(db).get_tree(user.id))


@router.post(
    "",
    response_model=ApiResponse[NotebookResponse],
    status_code=201,
    summary="Create a notebook",
)
async def create_notebook(
    data: NotebookCreate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[NotebookResponse]:
    """Create a notebook, optionally under a parent."""
    notebook = await NotebookService(db).create_notebook(user.id, data)
    return ApiResponse(data=NotebookResponse.model_validate(notebook))


@router.get("/{notebook_id}", response_model=ApiResponse[NotebookResponse], summary="Get a notebook")
async def get_notebook(
    notebook_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[NotebookResponse]:
    """Get one notebook."""
    notebook = await NotebookService(db).get_notebook(user.id, notebook_id)
    return ApiResponse(data=NotebookResponse.model_validate(notebook))


@router.put(
    "/{notebook_id}",
    response_model=ApiResponse[NotebookResponse],
    summary="Update a notebook",
    description="Rename, move, reorder or expand/collapse. Only provided fields change.",
)
@router.patch(
    "/{notebook_id}",
    response_model=ApiResponse[NotebookResponse],
    summary="Update a notebook",
    include_in_schema=False,
)
async def update_notebook(
    notebook_id: str,
    data: NotebookUpdate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[NotebookResponse]:
    """Update a notebook."""
    notebook = await NotebookService(db).update_notebook(user.id, notebook_id, data)
    return ApiResponse(data=NotebookResponse.model_validate(notebook))


@router.delete(
    "/{notebook_id}",
    status_code=204,
    summary="Delete a notebook",
    description="Delete the notebook, its sub-notebooks and all notes in them.",
)
async def delete_notebook(notebook_id: str, user: CurrentUser, db: DbSession) -> None:
    """Delete a notebook subtree."""
    await NotebookService(db).delete_notebook(user.id, notebook_id)
