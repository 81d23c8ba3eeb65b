"""
Export and Import Schemas.

The data contract between the backend and the client-side Markdown/ZIP
converter.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class ExportedNote(BaseModel):
    """A note as handed to the exporter."""

    id: str
    title: str
    content: str
    content_text: str
    notebook_id: str
    notebook_name: str
    created_at: datetime
    updated_at: datetime


class ImportNote(BaseModel):
    """A note produced by the client-side importer."""

    title: str | None = Field(default=None, max_length=500)
    content: str | None = None
    content_text: str | None = None


class ImportRequest(BaseModel):
    """Batch of notes to import, optionally into an existing notebook."""

    notes: list[ImportNote] = Field(default_factory=list)
    notebook_id: str | None = None


class ImportedNote(BaseModel):
    """Identity of one note created by an import."""

    id: str
    title: str


class ImportResult(BaseModel):
    """Outcome of an import."""

    count: int
    notebook_id: str
    notes: list[ImportedNote]
