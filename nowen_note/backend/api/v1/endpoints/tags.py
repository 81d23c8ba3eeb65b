"""
Tags API Endpoints.
"""

from fastapi import APIRouter

from nowen_note.backend.core.dependencies import CurrentUser, DbSession
from nowen_note.backend.schemas.base import ApiResponse, SuccessMessage
from nowen_note.backend.schemas.tag import TagCreate, TagResponse, TagUpdate, TagWithCount
from nowen_note.backend.services.tag import TagService

router = APIRouter()


@router.get("", response_model=ApiResponse[list[TagWithCount]], summary="List tags")
async def list_tags(user: CurrentUser, db: DbSession) -> ApiResponse[list[TagWithCount]]:
    """List tags with their note counts."""
    return ApiResponse(data=await TagService(db).list_tags(user.id))


@router.post("", response_model=ApiResponse[TagResponse], status_code=201, summary="Create a tag")
async def create_tag(data: TagCreate, user: CurrentUser, db: DbSession) -> ApiResponse[TagResponse]:
    """Create a tag. Names are unique per user."""
    tag = await TagService(db).create_tag(user.id, data)
    return ApiResponse(data=TagResponse.model_validate(tag))


@router.patch("/{tag_id}", response_model=ApiResponse[TagResponse], summary="Update a tag")
async def update_tag(
    tag_id: str,
    data: TagUpdate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[TagResponse]:
    """Rename or recolor a tag."""
    tag = await TagService(db).update_tag(user.id, tag_id, data)
    return ApiResponse(data=TagResponse.model_validate(tag))


@router.delete("/{tag_id}", status_code=204, summary="Delete a tag")
async def delete_tag(tag_id: str, user: CurrentUser, db: DbSession) -> None:
    """Delete a tag. Notes that carried it are kept."""
    await TagService(db).delete_tag(user.id, tag_id)


@router.post(
    "/note/{note_id}/tag/{tag_id}",
    response_model=ApiResponse[SuccessMessage],
    summary="Tag a note",
)
async def add_tag_to_note(
    note_id: str,
    tag_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[SuccessMessage]:
    """Attach a tag to a note."""
    await TagService(db).add_tag_to_note(user.id, note_id, tag_id)
    return ApiResponse(data=SuccessMessage(message="Tag added"))


@router.delete(
    "/note/{note_id}/tag/{tag_id}",
    response_model=ApiResponse[SuccessMessage],
    summary="Untag a note",
)
async def remove_tag_from_note(
    note_id: str,
    tag_id: str,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[SuccessMessage]:
    """Detach a tag from a note."""
    await TagService(db).remove_tag_from_note(user.id, note_id, tag_id)
    return ApiResponse(data=SuccessMessage(message="Tag removed"))
