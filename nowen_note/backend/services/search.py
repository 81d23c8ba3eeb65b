"""
Search Service.

Ranked full-text search over a user's notes, plus index maintenance.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from nowen_note.backend.repositories.search import SearchHit, SearchRepository
from nowen_note.backend.services.base import BaseService


class SearchService(BaseService):
    """Service for full-text search."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = SearchRepository(session)

    async def search(self, user_id: str, query: str) -> list[SearchHit]:
        """
        Search the user's non-trashed notes.

        A blank query returns no results rather than everything.
        """
        if not query or not query.strip():
            return []

        hits = await self._execute_db_operation("search", self.repo.search(user_id, query))
        self._log_debug("Search executed", query_length=len(query), hits=len(hits))
        return hits

    async def rebuild_index(self) -> int:
        """Rebuild the index from the notes table. Returns the number indexed."""
        self._log_operation("Rebuilding search index")
        count = await self._execute_db_operation("rebuild_index", self.repo.rebuild())
        self._log_operation("Search index rebuilt", indexed=count)
        return count
