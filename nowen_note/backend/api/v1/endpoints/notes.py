"""
Notes API Endpoints.

REST API endpoints for note management. Updates are versioned: the
client sends the version it last read and gets 409 with the current
version when someone else has written in between.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from nowen_note.backend.core.dependencies import CurrentUser, DbSession, RequestId
from nowen_note.backend.core.pagination import (
    PaginationParams,
    create_paginated_response,
    get_pagination_params,
)
from nowen_note.backend.schemas.base import ApiResponse
from nowen_note.backend.schemas.note import (
    DeletedCount,
    NoteCreate,
    NoteListItem,
    NoteResponse,
    NoteUpdate,
    VersionRequest,
)
from nowen_note.backend.services.note import NoteService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
    description="Create a note in a notebook. A blank title becomes the placeholder title.",
)
async def create_note(
    data: NoteCreate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[NoteResponse]:
    """Create a new note."""
    note = await NoteService(db).create_note(user.id, data)
    return ApiResponse(data=NoteResponse.model_validate(note))


@router.get(
    "",
    summary="List notes (paginated)",
    description=(
        "List notes with one filter: search, is_trashed, is_favorite, tag_id or "
        "notebook_id, checked in that order. Pinned notes come first."
    ),
)
async def list_notes(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
    pagination: PaginationParams = Depends(get_pagination_params),
    search: str | None = Query(default=None, max_length=200, description="Full-text query"),
    is_trashed: bool | None = Query(default=None, description="List the trash"),
    is_favorite: bool | None = Query(default=None, description="List favorites"),
    tag_id: str | None = Query(default=None, description="Notes carrying this tag"),
    notebook_id: str | None = Query(default=None, description="Notes in this notebook"),
) -> dict[str, Any]:
    """List notes with full pagination support."""
    notes, total = await NoteService(db).list_notes(
        user.id,
        search=search,
        is_trashed=is_trashed,
        is_favorite=is_favorite,
        tag_id=tag_id,
        notebook_id=notebook_id,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return create_paginated_response(
        items=notes,
        item_schema=NoteListItem,
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        request_id=request_id,
    )


@router.delete(
    "/trash",
    response_model=ApiResponse[DeletedCount],
    summary="Empty trash",
    description="Permanently delete every note in the trash.",
)
async def empty_trash(user: CurrentUser, db: DbSession) -> ApiResponse[DeletedCount]:
    """Empty the trash."""
    deleted = await NoteService(db).empty_trash(user.id)
    return ApiResponse(data=DeletedCount(deleted=deleted))


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
    description="Get a single note with its full body and tags.",
)
async def get_note(
    note_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[NoteResponse]:
    """Get a note by ID."""
    return ApiResponse(data=await NoteService(db).get_note_detail(user.id, note_id))


@router.put(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description=(
        "Versioned partial update. Send the version you last read; a stale "
        "version is rejected with 409 and the current version in error.details."
    ),
)
@router.patch(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    include_in_schema=False,
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[NoteResponse]:
    """Update a note."""
    note = await NoteService(db).update_note(user.id, note_id, data)
    return ApiResponse(data=NoteResponse.model_validate(note))


@router.post(
    "/{note_id}/trash",
    response_model=ApiResponse[NoteResponse],
    summary="Move a note to the trash",
)
async def trash_note(
    note_id: str,
    data: VersionRequest,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[NoteResponse]:
    """Soft-delete a note."""
    note = await NoteService(db).trash_note(user.id, note_id, data.version)
    return ApiResponse(data=NoteResponse.model_validate(note))


@router.post(
    "/{note_id}/restore",
    response_model=ApiResponse[NoteResponse],
    summary="Restore a note from the trash",
)
async def restore_note(
    note_id: str,
    data: VersionRequest,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[NoteResponse]:
    """Restore a trashed note."""
    note = await NoteService(db).restore_note(user.id, note_id, data.version)
    return ApiResponse(data=NoteResponse.model_validate(note))


@router.delete(
    "/{note_id}",
    status_code=204,
    summary="Delete a note",
    description="Permanently delete a note.",
)
async def delete_note(note_id: str, user: CurrentUser, db: DbSession) -> None:
    """Delete a note."""
    await NoteService(db).delete_note(user.id, note_id)
