"""
Site Settings API Endpoints.
"""

from fastapi import APIRouter

from nowen_note.backend.core.dependencies import CurrentUser, DbSession
from nowen_note.backend.schemas.base import ApiResponse
from nowen_note.backend.schemas.setting import SiteSettings, SiteSettingsUpdate
from nowen_note.backend.services.setting import SettingService

router = APIRouter()


@router.get("", response_model=ApiResponse[SiteSettings], summary="Get site settings")
async def get_settings(user: CurrentUser, db: DbSession) -> ApiResponse[SiteSettings]:
    """Site title and favicon, with defaults for anything unset."""
    return ApiResponse(data=await SettingService(db).get_site_settings())


@router.put("", response_model=ApiResponse[SiteSettings], summary="Update site settings")
async def update_settings(
    data: SiteSettingsUpdate,
    user: CurrentUser,
    db: DbSession,
) -> ApiResponse[SiteSettings]:
    """Store site settings and return the merged result."""
    return ApiResponse(data=await SettingService(db).update_site_settings(data))
