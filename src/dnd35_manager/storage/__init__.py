"""Storage module for character persistence.

Provides:
- a SQLite database holding characters, their listing profiles and the
  current character pointer
- the async CharacterStorage service built on it
- EditSession, which auto-saves pending edits after a delay
"""

from dnd35_manager.storage.database import (
    CURRENT_CHARACTER_KEY,
    CharacterRecord,
    Database,
    get_database,
)
from dnd35_manager.storage.service import COPY_SUFFIX, CharacterStorage
from dnd35_manager.storage.session import EditSession

__all__ = [
    "CURRENT_CHARACTER_KEY",
    "CharacterRecord",
    "Database",
    "get_database",
    "COPY_SUFFIX",
    "CharacterStorage",
    "EditSession",
]
