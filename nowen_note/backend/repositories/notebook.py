"""
Notebook Repository.

Data access layer for notebooks. Subtree queries use a recursive CTE so
a whole branch is resolved in one round trip.
"""

from sqlalchemy import delete, select

from nowen_note.backend.models.note import Note
from nowen_note.backend.models.notebook import Notebook
from nowen_note.backend.repositories.base import BaseRepository


class NotebookRepository(BaseRepository[Notebook]):
    """Repository for Notebook model."""

    model = Notebook

    async def list_for_user(self, user_id: str) -> list[Notebook]:
        """All notebooks of a user, ordered by sort_order then name."""
        result = await self.session.execute(
            select(Notebook)
            .where(Notebook.user_id == user_id)
            .order_by(Notebook.sort_order, Notebook.name)
        )
        return list(result.scalars().all())

    def _subtree_cte(self, user_id: str, notebook_id: str):
        subtree = (
            select(Notebook.id)
            .where(Notebook.id == notebook_id, Notebook.user_id == user_id)
            .cte("subtree", recursive=True)
        )
        return subtree.union_all(
            select(Notebook.id).where(
                Notebook.parent_id == subtree.c.id,
                Notebook.user_id == user_id,
            )
        )

    async def subtree_ids(self, user_id: str, notebook_id: str) -> list[str]:
        """IDs of the notebook and every notebook below it."""
        subtree = self._subtree_cte(user_id, notebook_id)
        result = await self.session.execute(select(subtree.c.id))
        return list(result.scalars().all())

    async def subtree_note_ids(self, user_id: str, notebook_id: str) -> list[str]:
        """IDs of every note stored anywhere in the notebook's subtree."""
        subtree = self._subtree_cte(user_id, notebook_id)
        result = await self.session.execute(
            select(Note.id).where(
                Note.notebook_id.in_(select(subtree.c.id)),
                Note.user_id == user_id,
            )
        )
        return list(result.scalars().all())

    async def find_by_name(self, user_id: str, name: str) -> Notebook | None:
        """First root or nested notebook of the user with this exact name."""
        result = await self.session.execute(
            select(Notebook)
            .where(Notebook.user_id == user_id, Notebook.name == name)
            .order_by(Notebook.created_at)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def next_sort_order(self, user_id: str, parent_id: str | None) -> int:
        """Sort position after the last sibling under parent_id."""
        stmt = select(Notebook.sort_order).where(Notebook.user_id == user_id)
        if parent_id is None:
            stmt = stmt.where(Notebook.parent_id.is_(None))
        else:
            stmt = stmt.where(Notebook.parent_id == parent_id)
        result = await self.session.execute(stmt.order_by(Notebook.sort_order.desc()).limit(1))
        last = result.scalar_one_or_none()
        return 0 if last is None else last + 1

    async def delete_owned(self, user_id: str, notebook_id: str) -> int:
        """Delete one notebook row; the store cascades to its subtree and notes."""
        result = await self.session.execute(
            delete(Notebook).where(
                Notebook.id == notebook_id,
                Notebook.user_id == user_id,
            )
        )
        return result.rowcount

    async def delete_all_for_user(self, user_id: str) -> int:
        """Delete every notebook of the user."""
        result = await self.session.execute(
            delete(Notebook).where(Notebook.user_id == user_id)
        )
        return result.rowcount
