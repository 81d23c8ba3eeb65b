"""
Note Service.

Business logic layer for notes. Every write that touches a note's
title or plain-text projection refreshes its search index entry in the
same transaction.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from nowen_note.backend.core.exceptions import (
    NotFoundError,
    ValidationError,
    VersionConflictError,
)
from nowen_note.backend.core.utils import utc_now
from nowen_note.backend.models.note import DEFAULT_NOTE_TITLE, EMPTY_DOCUMENT, Note
from nowen_note.backend.repositories.note import NoteRepository
from nowen_note.backend.repositories.notebook import NotebookRepository
from nowen_note.backend.repositories.search import SearchRepository
from nowen_note.backend.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from nowen_note.backend.schemas.tag import TagResponse
from nowen_note.backend.services.base import BaseService

INDEXED_FIELDS = frozenset({"title", "content_text"})


def normalize_title(title: str | None) -> str:
    """Blank or missing titles fall back to the placeholder title."""
    if title is None or not title.strip():
        return DEFAULT_NOTE_TITLE
    return title.strip()


class NoteService(BaseService):
    """
    Service for note business logic.

    Handles note creation, versioned updates, trash handling and
    permanent deletion.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)
        self.notebooks = NotebookRepository(session)
        self.search = SearchRepository(session)

    async def _require_notebook(self, user_id: str, notebook_id: str) -> None:
        if not await self.notebooks.owned_exists(user_id, notebook_id):
            raise NotFoundError("Notebook not found")

    async def create_note(self, user_id: str, data: NoteCreate) -> Note:
        """
        Create a note at version 1 and index it.

        Raises:
            NotFoundError: If the notebook is not owned by the user
        """
        await self._require_notebook(user_id, data.notebook_id)
        self._log_operation("Creating note", user_id=user_id, notebook_id=data.notebook_id)

        note = await self._execute_db_operation(
            "create_note",
            self.repo.create(
                user_id=user_id,
                notebook_id=data.notebook_id,
                title=normalize_title(data.title),
                content=data.content or EMPTY_DOCUMENT,
                content_text=data.content_text or "",
            ),
        )
        await self.search.replace(note.id, note.title, note.content_text)

        self._log_debug("Note created", note_id=note.id)
        return note

    async def get_note(self, user_id: str, note_id: str) -> Note:
        """
        Get an owned note.

        Raises:
            NotFoundError: If note not found
        """
        return await self.repo.get_owned(user_id, note_id)

    async def get_note_detail(self, user_id: str, note_id: str) -> NoteResponse:
        """Get an owned note together with its tags."""
        note = await self.repo.get_owned(user_id, note_id)
        tags = await self.repo.tags_for_note(note_id)
        detail = NoteResponse.model_validate(note)
        detail.tags = [TagResponse.model_validate(tag) for tag in tags]
        return detail

    async def list_notes(
        self,
        user_id: str,
        search: str | None = None,
        is_trashed: bool | None = None,
        is_favorite: bool | None = None,
        tag_id: str | None = None,
        notebook_id: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Note], int]:
        """
        List notes with at most one filter applied.

        Filters are checked in order (search, trash, favorites, tag,
        notebook) and the first one given wins. Without filters the
        user's non-trashed notes are listed.

        Returns:
            Tuple of (notes list, total count)
        """
        if search is not None and search.strip():
            note_ids = await self.search.matching_note_ids(user_id, search)
            return await self.repo.list_for_user(
                user_id, note_ids=note_ids, limit=limit, offset=offset
            )
        if is_trashed:
            return await self.repo.list_for_user(
                user_id, is_trashed=True, limit=limit, offset=offset
            )
        if is_favorite:
            return await self.repo.list_for_user(
                user_id, is_favorite=True, limit=limit, offset=offset
            )
        if tag_id is not None:
            return await self.repo.list_for_user(
                user_id, tag_id=tag_id, limit=limit, offset=offset
            )
        if notebook_id is not None:
            return await self.repo.list_for_user(
                user_id, notebook_id=notebook_id, limit=limit, offset=offset
            )
        return await self.repo.list_for_user(user_id, limit=limit, offset=offset)

    def _prepare_changes(self, data: NoteUpdate) -> dict[str, Any]:
        changes = data.model_dump(exclude_unset=True, exclude={"version"})
        # Every updatable column is NOT NULL, so an explicit null means "leave as is"
        changes = {key: value for key, value in changes.items() if value is not None}

        if "content" in changes and "content_text" not in changes:
            raise ValidationError(
                "content_text is required when content changes",
                details={"missing_fields": ["content_text"]},
            )
        if "title" in changes:
            changes["title"] = normalize_title(changes["title"])
        if "is_trashed" in changes:
            changes["trashed_at"] = utc_now() if changes["is_trashed"] else None
        return changes

    async def update_note(self, user_id: str, note_id: str, data: NoteUpdate) -> Note:
        """
        Apply a versioned update.

        The write only lands when data.version equals the stored version.
        An accepted write always advances the version by exactly one and
        refreshes updated_at, even if no visible field changes.

        Raises:
            NotFoundError: If the note (or the target notebook) is not owned
            VersionConflictError: If the stored version differs; nothing is written
            ValidationError: If content is sent without content_text
        """
        changes = self._prepare_changes(data)
        if "notebook_id" in changes:
            await self._require_notebook(user_id, changes["notebook_id"])

        self._log_operation(
            "Updating note",
            note_id=note_id,
            expected_version=data.version,
            fields=sorted(changes),
        )
        applied = await self._execute_db_operation(
            "update_note",
            self.repo.compare_and_swap(user_id, note_id, data.version, changes),
        )
        if not applied:
            current = await self.repo.current_version(user_id, note_id)
            if current is None:
                raise NotFoundError("Note not found")
            self._log_debug(
                "Version conflict",
                note_id=note_id,
                current_version=current,
                expected_version=data.version,
            )
            raise VersionConflictError(current_version=current, expected_version=data.version)

        note = await self.repo.reload(user_id, note_id)
        if INDEXED_FIELDS & changes.keys():
            await self.search.replace(note.id, note.title, note.content_text)

        self._log_debug("Note updated", note_id=note_id, version=note.version)
        return note

    async def trash_note(self, user_id: str, note_id: str, version: int) -> Note:
        """Move a note to the trash."""
        return await self.update_note(
            user_id, note_id, NoteUpdate(version=version, is_trashed=True)
        )

    async def restore_note(self, user_id: str, note_id: str, version: int) -> Note:
        """Take a note out of the trash."""
        return await self.update_note(
            user_id, note_id, NoteUpdate(version=version, is_trashed=False)
        )

    async def delete_note(self, user_id: str, note_id: str) -> None:
        """
        Permanently delete a note with its search entry and tag joins.

        Raises:
            NotFoundError: If note not found
        """
        if not await self.repo.owned_exists(user_id, note_id):
            raise NotFoundError("Note not found")

        self._log_operation("Deleting note", note_id=note_id)
        await self.search.remove(note_id)
        await self._execute_db_operation(
            "delete_note",
            self.repo.delete_owned(user_id, note_id),
        )

    async def empty_trash(self, user_id: str) -> int:
        """Permanently delete every trashed note of the user."""
        note_ids = await self.repo.trashed_ids(user_id)
        self._log_operation("Emptying trash", user_id=user_id, note_count=len(note_ids))
        await self.search.remove_many(note_ids)
        return await self._execute_db_operation(
            "empty_trash",
            self.repo.delete_many(user_id, note_ids),
        )
