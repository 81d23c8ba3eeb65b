"""
Tag Service.

Business logic for tags and note tagging.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from nowen_note.backend.core.exceptions import ConflictError, NotFoundError
from nowen_note.backend.models.tag import DEFAULT_TAG_COLOR, Tag
from nowen_note.backend.repositories.note import NoteRepository
from nowen_note.backend.repositories.tag import TagRepository
from nowen_note.backend.schemas.tag import TagCreate, TagUpdate, TagWithCount
from nowen_note.backend.services.base import BaseService


class TagService(BaseService):
    """Service for tag business logic."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = TagRepository(session)
        self.notes = NoteRepository(session)

    async def list_tags(self, user_id: str) -> list[TagWithCount]:
        """The user's tags with note counts, ordered by name."""
        rows = await self.repo.list_with_counts(user_id)
        result = []
        for tag, count in rows:
            item = TagWithCount.model_validate(tag)
            item.note_count = count
            result.append(item)
        return result

    async def create_tag(self, user_id: str, data: TagCreate) -> Tag:
        """
        Create a tag.

        Raises:
            ConflictError: If the user already has a tag with this name
        """
        self._validate_required({"name": data.name}, ["name"])
        name = data.name.strip()
        if await self.repo.get_by_name(user_id, name) is not None:
            raise ConflictError("Tag already exists", details={"name": name})

        self._log_operation("Creating tag", user_id=user_id)
        return await self._execute_db_operation(
            "create_tag",
            self.repo.create(user_id=user_id, name=name, color=data.color or DEFAULT_TAG_COLOR),
        )

    async def update_tag(self, user_id: str, tag_id: str, data: TagUpdate) -> Tag:
        """Rename or recolor a tag."""
        tag = await self.repo.get_owned(user_id, tag_id)
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        if "name" in changes:
            self._validate_required(changes, ["name"])
            changes["name"] = changes["name"].strip()
            existing = await self.repo.get_by_name(user_id, changes["name"])
            if existing is not None and existing.id != tag.id:
                raise ConflictError("Tag already exists", details={"name": changes["name"]})

        return await self._execute_db_operation("update_tag", self.repo.apply(tag, **changes))

    async def delete_tag(self, user_id: str, tag_id: str) -> None:
        """Delete a tag; tagged notes keep existing."""
        tag = await self.repo.get_owned(user_id, tag_id)
        self._log_operation("Deleting tag", tag_id=tag_id)
        await self._execute_db_operation("delete_tag", self.repo.remove(tag))

    async def _require_pair(self, user_id: str, note_id: str, tag_id: str) -> None:
        if not await self.notes.owned_exists(user_id, note_id):
            raise NotFoundError("Note not found")
        if not await self.repo.owned_exists(user_id, tag_id):
            raise NotFoundError("Tag not found")

    async def add_tag_to_note(self, user_id: str, note_id: str, tag_id: str) -> None:
        """Attach a tag to a note. Attaching an attached tag is a no-op."""
        await self._require_pair(user_id, note_id, tag_id)
        await self._execute_db_operation("attach_tag", self.repo.attach(note_id, tag_id))

    async def remove_tag_from_note(self, user_id: str, note_id: str, tag_id: str) -> None:
        """Detach a tag from a note."""
        await self._require_pair(user_id, note_id, tag_id)
        await self._execute_db_operation("detach_tag", self.repo.detach(note_id, tag_id))
