"""
Notebook Schemas.

Pydantic schemas for notebook API request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NotebookCreate(BaseModel):
    """Schema for creating a notebook."""

    name: str = Field(..., min_length=1, max_length=255, examples=["工作笔记"])
    parent_id: str | None = None
    description: str | None = None
    icon: str | None = Field(default=None, max_length=32)
    color: str | None = Field(default=None, max_length=32)
    sort_order: int | None = None


class NotebookUpdate(BaseModel):
    """
    Schema for updating a notebook.

    Only fields present in the request are applied. Sending
    "parent_id": null moves the notebook to the root.
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    parent_id: str | None = None
    description: str | None = None
    icon: str | None = Field(default=None, max_length=32)
    color: str | None = Field(default=None, max_length=32)
    sort_order: int | None = None
    is_expanded: bool | None = None


class NotebookResponse(BaseModel):
    """Schema for a notebook in API responses."""

    id: str
    user_id: str
    parent_id: str | None
    name: str
    description: str | None
    icon: str
    color: str | None
    sort_order: int
    is_expanded: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotebookNode(NotebookResponse):
    """A notebook with its nested children, as rendered in the sidebar."""

    children: list["NotebookNode"] = Field(default_factory=list)


NotebookNode.model_rebuild()
