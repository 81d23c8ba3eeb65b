"""
Note Schemas.

Pydantic schemas for note API request/response validation.
The rich-text body (content) is an opaque JSON document string; the
backend never interprets it and relies on the client for content_text.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from nowen_note.backend.schemas.tag import TagResponse


class NoteCreate(BaseModel):
    """Schema for creating a new note."""

    notebook_id: str = Field(..., description="Owning notebook")
    title: str | None = Field(
        default=None,
        max_length=500,
        description="Note title, defaults to a placeholder when blank",
        examples=["My First Note"],
    )
    content: str | None = Field(default=None, description="Rich-text document as JSON")
    content_text: str | None = Field(default=None, description="Plain-text projection")


class NoteUpdate(BaseModel):
    """
    Schema for a versioned note update.

    version is the version the client last read. The write is refused
    with 409 when the stored version has moved on.
    """

    version: int = Field(..., ge=1, description="Expected current version")
    title: str | None = Field(default=None, max_length=500)
    content: str | None = None
    content_text: str | None = None
    notebook_id: str | None = None
    is_pinned: bool | None = None
    is_favorite: bool | None = None
    is_archived: bool | None = None
    is_trashed: bool | None = None
    sort_order: int | None = None


class VersionRequest(BaseModel):
    """Expected version for trash and restore shortcuts."""

    version: int = Field(..., ge=1)


class NoteResponse(BaseModel):
    """Schema for a full note in API responses."""

    id: str = Field(description="Note unique identifier")
    user_id: str
    notebook_id: str
    title: str
    content: str
    content_text: str
    is_pinned: bool
    is_favorite: bool
    is_archived: bool
    is_trashed: bool
    trashed_at: datetime | None
    version: int
    sort_order: int
    created_at: datetime
    updated_at: datetime
    tags: list[TagResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class NoteListItem(BaseModel):
    """Schema for a note in list views, without the rich-text body."""

    id: str
    notebook_id: str
    title: str
    content_text: str
    is_pinned: bool
    is_favorite: bool
    is_trashed: bool
    version: int
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DeletedCount(BaseModel):
    """Number of notes removed by a bulk delete."""

    deleted: int
