"""
Search Index Repository.

Keeps the notes_fts table in step with the notes table and runs ranked
full-text queries against it. There are no triggers: every writer calls
replace() or remove() in the same transaction that changes the note.
"""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete, func, insert, literal_column, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from nowen_note.backend.models.note import Note, notes_fts

SEARCH_RESULT_LIMIT = 50
SNIPPET_TOKENS = 40


@dataclass
class SearchHit:
    """One ranked search result."""

    id: str
    title: str
    notebook_id: str
    updated_at: datetime
    is_favorite: bool
    is_pinned: bool
    snippet: str


def build_match_query(raw: str) -> str:
    """
    Turn free text into an FTS5 MATCH expression.

    Each whitespace-separated token becomes a quoted prefix term and all
    terms must match, so "hello wor" finds "hello world". Quoting keeps
    FTS5 operators typed by the user (AND, NEAR, *, :) literal.
    Tokens without a letter or digit are dropped; the tokenizer would
    never index them. Returns an empty string when nothing is left.
    """
    terms = []
    for token in raw.split():
        if not any(ch.isalnum() for ch in token):
            continue
        escaped = token.replace('"', '""')
        terms.append(f'"{escaped}"*')
    return " AND ".join(terms)


class SearchRepository:
    """Repository for the notes_fts full-text index."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def replace(self, note_id: str, title: str, content_text: str) -> None:
        """Replace the index entry of one note."""
        await self.remove(note_id)
        await self.session.execute(
            insert(notes_fts).values(
                note_id=note_id,
                title=title,
                content_text=content_text,
            )
        )

    async def remove(self, note_id: str) -> None:
        """Drop the index entry of one note."""
        await self.session.execute(delete(notes_fts).where(notes_fts.c.note_id == note_id))

    async def remove_many(self, note_ids: list[str]) -> None:
        """Drop the index entries of several notes."""
        if note_ids:
            await self.session.execute(
                delete(notes_fts).where(notes_fts.c.note_id.in_(note_ids))
            )

    async def remove_for_user(self, user_id: str) -> None:
        """Drop the index entries of every note the user owns."""
        await self.session.execute(
            delete(notes_fts).where(
                notes_fts.c.note_id.in_(select(Note.id).where(Note.user_id == user_id))
            )
        )

    async def rebuild(self) -> int:
        """
        Repopulate the whole index from the notes table.

        Returns:
            Number of notes indexed
        """
        await self.session.execute(delete(notes_fts))
        await self.session.execute(
            insert(notes_fts).from_select(
                ["note_id", "title", "content_text"],
                select(Note.id, Note.title, Note.content_text),
            )
        )
        result = await self.session.execute(select(func.count()).select_from(notes_fts))
        return result.scalar_one()

    async def search(self, user_id: str, query: str) -> list[SearchHit]:
        """
        Ranked search over the user's non-trashed notes.

        Best bm25 match first, ties broken by most recent update, at most
        SEARCH_RESULT_LIMIT hits.
        """
        match = build_match_query(query)
        if not match:
            return []

        snippet = func.snippet(
            literal_column("notes_fts"),
            2,
            "<mark>",
            "</mark>",
            "...",
            SNIPPET_TOKENS,
        )
        stmt = (
            select(
                Note.id,
                Note.title,
                Note.notebook_id,
                Note.updated_at,
                Note.is_favorite,
                Note.is_pinned,
                snippet.label("snippet"),
            )
            .select_from(notes_fts)
            .join(Note, Note.id == notes_fts.c.note_id)
            .where(
                text("notes_fts MATCH :query").bindparams(query=match),
                Note.user_id == user_id,
                Note.is_trashed == False,  # noqa: E712
            )
            .order_by(notes_fts.c.rank, Note.updated_at.desc())
            .limit(SEARCH_RESULT_LIMIT)
        )
        result = await self.session.execute(stmt)
        return [SearchHit(**row._mapping) for row in result.all()]

    async def matching_note_ids(self, user_id: str, query: str) -> list[str]:
        """IDs of the user's notes matching the query, trashed ones included."""
        match = build_match_query(query)
        if not match:
            return []
        result = await self.session.execute(
            select(notes_fts.c.note_id)
            .join(Note, Note.id == notes_fts.c.note_id)
            .where(
                text("notes_fts MATCH :query").bindparams(query=match),
                Note.user_id == user_id,
            )
        )
        return list(result.scalars().all())
