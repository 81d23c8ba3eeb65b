"""
Site Settings Schemas.
"""

from pydantic import BaseModel, Field


class SiteSettings(BaseModel):
    """Site-wide display settings."""

    site_title: str = "nowen-note"
    site_favicon: str = ""


class SiteSettingsUpdate(BaseModel):
    """Settings to overwrite. Omitted keys keep their stored value."""

    site_title: str | None = Field(default=None, max_length=200)
    site_favicon: str | None = None
