"""
Tag Repository.

Data access layer for tags and their attachment to notes.
"""

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from nowen_note.backend.models.tag import Tag, note_tags
from nowen_note.backend.repositories.base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    """Repository for Tag model."""

    model = Tag

    async def list_with_counts(self, user_id: str) -> list[tuple[Tag, int]]:
        """The user's tags ordered by name, each with its note count."""
        result = await self.session.execute(
            select(Tag, func.count(note_tags.c.note_id))
            .outerjoin(note_tags, note_tags.c.tag_id == Tag.id)
            .where(Tag.user_id == user_id)
            .group_by(Tag.id)
            .order_by(Tag.name)
        )
        return [(tag, count) for tag, count in result.all()]

    async def get_by_name(self, user_id: str, name: str) -> Tag | None:
        """The user's tag with this exact name, or None."""
        result = await self.session.execute(
            select(Tag).where(Tag.user_id == user_id, Tag.name == name)
        )
        return result.scalar_one_or_none()

    async def attach(self, note_id: str, tag_id: str) -> None:
        """Attach a tag to a note; attaching twice is a no-op."""
        await self.session.execute(
            sqlite_insert(note_tags)
            .values(note_id=note_id, tag_id=tag_id)
            .on_conflict_do_nothing()
        )

    async def detach(self, note_id: str, tag_id: str) -> None:
        """Detach a tag from a note; detaching twice is a no-op."""
        await self.session.execute(
            delete(note_tags).where(
                note_tags.c.note_id == note_id,
                note_tags.c.tag_id == tag_id,
            )
        )

    async def delete_joins_for_user(self, user_id: str) -> None:
        """Remove every note-tag join that touches one of the user's tags."""
        await self.session.execute(
            delete(note_tags).where(
                note_tags.c.tag_id.in_(select(Tag.id).where(Tag.user_id == user_id))
            )
        )

    async def delete_all_for_user(self, user_id: str) -> int:
        """Delete every tag of the user."""
        result = await self.session.execute(
            delete(Tag)
            .where(Tag.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
