"""
Note Repository.

Data access layer for notes. Updates go through a compare-and-swap on
the version column: the row only changes when the caller's expected
version still matches, and the version advances by one in the same
statement.
"""

from typing import Any

from sqlalchemy import delete, func, select, update

from nowen_note.backend.core.utils import utc_now
from nowen_note.backend.models.note import Note
from nowen_note.backend.models.notebook import Notebook
from nowen_note.backend.models.tag import Tag, note_tags
from nowen_note.backend.repositories.base import BaseRepository


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits standard CRUD operations from BaseRepository
    and adds note-specific queries.
    """

    model = Note

    async def list_for_user(
        self,
        user_id: str,
        notebook_id: str | None = None,
        is_trashed: bool = False,
        is_favorite: bool | None = None,
        tag_id: str | None = None,
        note_ids: list[str] | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Note], int]:
        """
        List a user's notes, pinned first then most recently updated.

        Returns:
            The page of notes and the total count matching the filters
        """
        stmt = select(Note).where(Note.user_id == user_id, Note.is_trashed == is_trashed)
        if notebook_id is not None:
            stmt = stmt.where(Note.notebook_id == notebook_id)
        if is_favorite is not None:
            stmt = stmt.where(Note.is_favorite == is_favorite)
        if tag_id is not None:
            stmt = stmt.where(
                Note.id.in_(select(note_tags.c.note_id).where(note_tags.c.tag_id == tag_id))
            )
        if note_ids is not None:
            stmt = stmt.where(Note.id.in_(note_ids))

        total = (
            await self.session.execute(select(func.count()).select_from(stmt.subquery()))
        ).scalar_one()
        result = await self.session.execute(
            stmt.order_by(Note.is_pinned.desc(), Note.updated_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all()), total

    async def current_version(self, user_id: str, note_id: str) -> int | None:
        """Version of an owned note, or None when it does not exist."""
        result = await self.session.execute(
            select(Note.version).where(Note.id == note_id, Note.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def compare_and_swap(
        self,
        user_id: str,
        note_id: str,
        expected_version: int,
        values: dict[str, Any],
    ) -> bool:
        """
        Apply values only if the stored version equals expected_version.

        On success the version is incremented by one and updated_at
        refreshed, even when values is empty.

        Returns:
            True if the row was updated, False if the guard did not match
        """
        result = await self.session.execute(
            update(Note)
            .where(
                Note.id == note_id,
                Note.user_id == user_id,
                Note.version == expected_version,
            )
            .values(**values, version=Note.version + 1, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def reload(self, user_id: str, note_id: str) -> Note:
        """Fetch a note again, overwriting any stale copy in the session."""
        result = await self.session.execute(
            select(Note)
            .where(Note.id == note_id, Note.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def delete_owned(self, user_id: str, note_id: str) -> bool:
        """Permanently delete a note; tag joins cascade in the store."""
        result = await self.session.execute(
            delete(Note)
            .where(Note.id == note_id, Note.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def trashed_ids(self, user_id: str) -> list[str]:
        """IDs of every note in the user's trash."""
        result = await self.session.execute(
            select(Note.id).where(Note.user_id == user_id, Note.is_trashed == True)  # noqa: E712
        )
        return list(result.scalars().all())

    async def delete_many(self, user_id: str, note_ids: list[str]) -> int:
        """Permanently delete a batch of owned notes."""
        if not note_ids:
            return 0
        result = await self.session.execute(
            delete(Note)
            .where(Note.user_id == user_id, Note.id.in_(note_ids))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_all_for_user(self, user_id: str) -> int:
        """Delete every note of the user."""
        result = await self.session.execute(
            delete(Note)
            .where(Note.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def tags_for_note(self, note_id: str) -> list[Tag]:
        """Tags attached to a note, ordered by name."""
        result = await self.session.execute(
            select(Tag)
            .join(note_tags, note_tags.c.tag_id == Tag.id)
            .where(note_tags.c.note_id == note_id)
            .order_by(Tag.name)
        )
        return list(result.scalars().all())

    async def list_for_export(self, user_id: str) -> list[tuple[Note, str]]:
        """Every non-trashed note with its notebook name."""
        result = await self.session.execute(
            select(Note, Notebook.name)
            .join(Notebook, Notebook.id == Note.notebook_id)
            .where(Note.user_id == user_id, Note.is_trashed == False)  # noqa: E712
            .order_by(Notebook.name, Note.title)
        )
        return [(note, notebook_name) for note, notebook_name in result.all()]
