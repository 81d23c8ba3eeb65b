"""
User Repository.

Data access layer for user accounts.
"""

from sqlalchemy import func, select

from nowen_note.backend.models.user import User
from nowen_note.backend.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    model = User

    async def get_by_username(self, username: str) -> User | None:
        """Get a user by exact username, or None."""
        result = await self.session.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()

    async def username_taken(self, username: str, exclude_id: str | None = None) -> bool:
        """Check whether another account already uses this username."""
        stmt = select(User.id).where(User.username == username)
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def count(self) -> int:
        """Count user accounts."""
        result = await self.session.execute(select(func.count()).select_from(User))
        return result.scalar_one()

    async def first(self) -> User | None:
        """Return the oldest account, the one a single-user install runs as."""
        result = await self.session.execute(
            select(User).order_by(User.created_at).limit(1)
        )
        return result.scalar_one_or_none()
