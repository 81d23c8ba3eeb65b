"""
Setting Repository.

Key/value access to system_settings.
"""

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from nowen_note.backend.core.utils import utc_now
from nowen_note.backend.models.setting import SystemSetting


class SettingRepository:
    """Repository for SystemSetting model."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_with_prefix(self, prefix: str) -> dict[str, str]:
        """All stored settings whose key starts with prefix."""
        result = await self.session.execute(
            select(SystemSetting.key, SystemSetting.value).where(
                SystemSetting.key.startswith(prefix)
            )
        )
        return {key: value for key, value in result.all()}

    async def upsert(self, key: str, value: str) -> None:
        """Insert or overwrite one setting."""
        now = utc_now()
        stmt = sqlite_insert(SystemSetting).values(key=key, value=value, updated_at=now)
        await self.session.execute(
            stmt.on_conflict_do_update(
                index_elements=[SystemSetting.key],
                set_={"value": stmt.excluded.value, "updated_at": now},
            )
        )
