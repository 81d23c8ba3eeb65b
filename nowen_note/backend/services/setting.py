"""
Setting Service.

Site-wide display settings stored under site_* keys.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from nowen_note.backend.repositories.setting import SettingRepository
from nowen_note.backend.schemas.setting import SiteSettings, SiteSettingsUpdate
from nowen_note.backend.services.base import BaseService

SITE_PREFIX = "site_"
SITE_TITLE_MAX_LENGTH = 20


class SettingService(BaseService):
    """Service for site settings."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = SettingRepository(session)

    async def get_site_settings(self) -> SiteSettings:
        """Defaults overlaid with whatever is stored."""
        stored = await self.repo.get_with_prefix(SITE_PREFIX)
        known = {key: value for key, value in stored.items() if key in SiteSettings.model_fields}
        return SiteSettings(**known)

    async def update_site_settings(self, data: SiteSettingsUpdate) -> SiteSettings:
        """Upsert the supplied settings and return the merged result."""
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        if "site_title" in changes:
            changes["site_title"] = changes["site_title"].strip()[:SITE_TITLE_MAX_LENGTH]

        self._log_operation("Updating site settings", keys=sorted(changes))
        for key, value in changes.items():
            await self._execute_db_operation("upsert_setting", self.repo.upsert(key, value))
        return await self.get_site_settings()
