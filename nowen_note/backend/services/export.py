"""
Export Service.

Supplies notes to the client-side exporter and stores notes produced
by the client-side importer.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from nowen_note.backend.core.exceptions import NotFoundError, ValidationError
from nowen_note.backend.models.note import EMPTY_DOCUMENT
from nowen_note.backend.repositories.note import NoteRepository
from nowen_note.backend.repositories.notebook import NotebookRepository
from nowen_note.backend.repositories.search import SearchRepository
from nowen_note.backend.schemas.export import (
    ExportedNote,
    ImportedNote,
    ImportRequest,
    ImportResult,
)
from nowen_note.backend.services.base import BaseService
from nowen_note.backend.services.note import normalize_title

IMPORT_NOTEBOOK_NAME = "Imported Notes"
IMPORT_NOTEBOOK_ICON = "📥"


class ExportService(BaseService):
    """Service for bulk export and import."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.notes = NoteRepository(session)
        self.notebooks = NotebookRepository(session)
        self.search = SearchRepository(session)

    async def export_notes(self, user_id: str) -> list[ExportedNote]:
        """Every non-trashed note with full content and its notebook name."""
        rows = await self.notes.list_for_export(user_id)
        self._log_operation("Exporting notes", user_id=user_id, note_count=len(rows))
        return [
            ExportedNote(
                id=note.id,
                title=note.title,
                content=note.content,
                content_text=note.content_text,
                notebook_id=note.notebook_id,
                notebook_name=notebook_name,
                created_at=note.created_at,
                updated_at=note.updated_at,
            )
            for note, notebook_name in rows
        ]

    async def _target_notebook(self, user_id: str, notebook_id: str | None) -> str:
        if notebook_id is not None:
            if not await self.notebooks.owned_exists(user_id, notebook_id):
                raise NotFoundError("Notebook not found")
            return notebook_id

        existing = await self.notebooks.find_by_name(user_id, IMPORT_NOTEBOOK_NAME)
        if existing is not None:
            return existing.id
        created = await self.notebooks.create(
            user_id=user_id,
            name=IMPORT_NOTEBOOK_NAME,
            icon=IMPORT_NOTEBOOK_ICON,
            sort_order=await self.notebooks.next_sort_order(user_id, None),
        )
        return created.id

    async def import_notes(self, user_id: str, data: ImportRequest) -> ImportResult:
        """
        Store imported notes, all in one transaction.

        Raises:
            ValidationError: If there is nothing to import
            NotFoundError: If the given notebook is not owned
        """
        if not data.notes:
            raise ValidationError("No notes to import")

        notebook_id = await self._target_notebook(user_id, data.notebook_id)
        self._log_operation(
            "Importing notes",
            user_id=user_id,
            notebook_id=notebook_id,
            note_count=len(data.notes),
        )

        imported = []
        for item in data.notes:
            note = await self._execute_db_operation(
                "import_note",
                self.notes.create(
                    user_id=user_id,
                    notebook_id=notebook_id,
                    title=normalize_title(item.title),
                    content=item.content or EMPTY_DOCUMENT,
                    content_text=item.content_text or "",
                ),
            )
            await self.search.replace(note.id, note.title, note.content_text)
            imported.append(ImportedNote(id=note.id, title=note.title))

        return ImportResult(count=len(imported), notebook_id=notebook_id, notes=imported)
