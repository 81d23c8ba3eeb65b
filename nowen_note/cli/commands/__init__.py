"""
CLI Commands.

Organized by domain/feature area.
"""

from nowen_note.cli.commands.db import app as db_app

__all__ = [
    "db_app",
]
