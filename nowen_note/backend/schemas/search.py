"""
Search Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class SearchResult(BaseModel):
    """One ranked full-text hit with a highlighted excerpt."""

    id: str
    title: str
    notebook_id: str
    updated_at: datetime
    is_favorite: bool
    is_pinned: bool
    snippet: str

    model_config = ConfigDict(from_attributes=True)
