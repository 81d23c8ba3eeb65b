"""
Export and Import API Endpoints.

Conversion to and from Markdown/ZIP happens in the client; these
endpoints only move note data.
"""

from fastapi import APIRouter

from nowen_note.backend.core.dependencies import CurrentUser, DbSession
from nowen_note.backend.schemas.base import ApiResponse
from nowen_note.backend.schemas.export import ExportedNote, ImportRequest, ImportResult
from nowen_note.backend.services.export import ExportService

router = APIRouter()


@router.get("/notes", response_model=ApiResponse[list[ExportedNote]], summary="Export notes")
async def export_notes(user: CurrentUser, db: DbSession) -> ApiResponse[list[ExportedNote]]:
    """All non-trashed notes with full content."""
    return ApiResponse(data=await ExportService(db).export_notes(user.id))


@router.post(
    "/import",
    response_model=ApiResponse[ImportResult],
    status_code=201,
    summary="Import notes",
    description='Store notes in the given notebook, or in "Imported Notes" when none is given.',
)
async def import_notes(
    data: ImportRequest,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[ImportResult]:
    """Import a batch of notes."""
    return ApiResponse(data=await ExportService(db).import_notes(user.id, data))
