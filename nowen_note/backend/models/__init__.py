"""
Database Models.

Importing this package registers every table on Base.metadata, which
create_all and the alembic environment rely on.
"""

from nowen_note.backend.models.base import Base
from nowen_note.backend.models.note import Note, notes_fts
from nowen_note.backend.models.notebook import Notebook
from nowen_note.backend.models.setting import SystemSetting
from nowen_note.backend.models.tag import Tag, note_tags
from nowen_note.backend.models.task import Task
from nowen_note.backend.models.user import User

__all__ = [
    "Base",
    "Note",
    "Notebook",
    "SystemSetting",
    "Tag",
    "Task",
    "User",
    "note_tags",
    "notes_fts",
]
