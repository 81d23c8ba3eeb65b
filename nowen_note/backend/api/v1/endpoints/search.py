"""
Search API Endpoint.
"""

from fastapi import APIRouter, Query

from nowen_note.backend.core.dependencies import CurrentUser, DbSession
from nowen_note.backend.schemas.base import ApiResponse
from nowen_note.backend.schemas.search import SearchResult
from nowen_note.backend.services.search import SearchService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[SearchResult]],
    summary="Full-text search",
    description=(
        "Prefix search over titles and note text. Every word must match. "
        "Trashed notes are excluded; at most 50 results, best match first."
    ),
)
async def search_notes(
    user: CurrentUser,
    db: DbSession,
    q: str = Query(default="", max_length=200, description="Search query"),
) -> ApiResponse[list[SearchResult]]:
    """Search notes."""
    hits = await SearchService(db).search(user.id, q)
    return ApiResponse(data=[SearchResult.model_validate(hit) for hit in hits])
