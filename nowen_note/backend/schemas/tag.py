"""
Tag Schemas.

Pydantic schemas for tag API request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TagCreate(BaseModel):
    """Schema for creating a tag."""

    name: str = Field(..., min_length=1, max_length=100, examples=["重要"])
    color: str | None = Field(default=None, max_length=32, examples=["#f85149"])


class TagUpdate(BaseModel):
    """Schema for renaming or recoloring a tag."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    color: str | None = Field(default=None, max_length=32)


class TagResponse(BaseModel):
    """Schema for a tag in API responses."""

    id: str
    name: str
    color: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TagWithCount(TagResponse):
    """A tag with the number of notes carrying it."""

    note_count: int = 0
