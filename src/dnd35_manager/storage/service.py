"""Async character storage.

CharacterStorage is the persistence contract the rest of the application
talks to. Every operation is a coroutine; the blocking SQLite work runs in
a worker thread so an event loop driving the UI or an auto-save timer
never stalls.

Missing characters are not errors: ``load`` returns None and ``delete``
does nothing. Anything that goes wrong underneath (I/O, a locked database,
a stored document that no longer validates) is logged and raised as
StorageError.

Example:
    >>> storage = CharacterStorage(Database("characters.db"))
    >>> await storage.save(character)
    >>> profiles = await storage.list_profiles(most_recent_first=True)
"""

from __future__ import annotations

import asyncio
import sqlite3
from collections.abc import Callable
from datetime import datetime
from functools import partial
from typing import Any, TypeVar

from dnd35_manager.core.exceptions import StorageError, ValidationError
from dnd35_manager.core.logging import get_logger
from dnd35_manager.models.character import Character, CharacterProfile, new_character_id
from dnd35_manager.models.serialization import (
    export_character,
    import_character,
    parse_character,
)
from dnd35_manager.storage.database import (
    CURRENT_CHARACTER_KEY,
    CharacterRecord,
    Database,
    get_database,
)


logger = get_logger(__name__)

T = TypeVar("T")

COPY_SUFFIX = " (Copy)"


class CharacterStorage:
    """Save, load, list and delete characters and track the current one."""

    def __init__(self, database: Database | None = None) -> None:
        """Initialize the storage service.

        Args:
            database: Backing database. Defaults to the global instance.
        """
        self._database = database or get_database()

    @property
    def database(self) -> Database:
        return self._database

    async def _run(
        self,
        operation: str,
        func: Callable[..., T],
        *args: Any,
        character_id: str | None = None,
    ) -> T:
        """Run a blocking database call in a worker thread.

        Raises:
            StorageError: If the database call fails.
        """
        try:
            return await asyncio.to_thread(func, *args)
        except sqlite3.Error as exc:
            logger.error(
                "Storage operation failed",
                operation=operation,
                character_id=character_id,
                error=str(exc),
            )
            raise StorageError(
                f"Failed to {operation} character data",
                operation=operation,
                character_id=character_id,
            ) from exc

    def _decode(self, record: CharacterRecord) -> Character:
        try:
            return parse_character(record.document)
        except ValidationError as exc:
            logger.error("Stored character is corrupt", character_id=record.id)
            raise StorageError(
                "Stored character document is corrupt",
                operation="load",
                character_id=record.id,
            ) from exc

    # =========================================================================
    # Characters
    # =========================================================================

    async def save(self, character: Character) -> Character:
        """Persist a character and its profile.

        The character's ``updated_at`` is refreshed only once the write
        succeeds.

        Args:
            character: Character to save.

        Returns:
            The same character, with ``updated_at`` refreshed.

        Raises:
            ValidationError: If the character has no name.
            StorageError: If the write fails.
        """
        if not character.name.strip():
            raise ValidationError(
                "Please enter a character name before saving.",
                field_name="name",
            )

        saved = character.model_copy(update={"updated_at": datetime.now()})
        record = CharacterRecord(
            id=saved.id,
            name=saved.name,
            document=export_character(saved),
            created_at=saved.created_at,
            updated_at=saved.updated_at,
        )
        await self._run(
            "save",
            self._database.save_character,
            record,
            saved.to_profile(),
            character_id=saved.id,
        )

        character.updated_at = saved.updated_at
        logger.info("Character saved", character_id=character.id, name=character.name)
        return character

    async def load(self, character_id: str) -> Character | None:
        """Load a character by ID, or None if it does not exist."""
        record = await self._run(
            "load", self._database.get_character, character_id, character_id=character_id
        )
        if record is None:
            logger.debug("Character not found", character_id=character_id)
            return None
        return self._decode(record)

    async def list_characters(self) -> list[Character]:
        """Load every stored character."""
        records = await self._run("list", self._database.get_all_characters)
        return [self._decode(record) for record in records]

    async def list_profiles(self, *, most_recent_first: bool = False) -> list[CharacterProfile]:
        """List every character profile.

        Args:
            most_recent_first: Sort by last played, newest first.
        """
        return await self._run(
            "list",
            partial(self._database.get_all_profiles, most_recent_first=most_recent_first),
        )

    async def delete(self, character_id: str) -> bool:
        """Delete a character, its profile and any current pointer to it.

        Returns:
            True if a character was deleted, False if there was none.
        """
        deleted = await self._run(
            "delete", self._database.delete_character, character_id, character_id=character_id
        )
        if deleted:
            logger.info("Character deleted", character_id=character_id)
        return deleted

    async def exists(self, character_id: str) -> bool:
        return await self._run(
            "load", self._database.character_exists, character_id, character_id=character_id
        )

    async def clear_all(self) -> None:
        """Delete every character, profile and the current pointer."""
        await self._run("clear", self._database.clear_all)
        logger.info("All character data cleared")

    # =========================================================================
    # Current Character
    # =========================================================================

    async def get_current(self) -> str | None:
        """Get the ID of the current character, if one is set."""
        return await self._run("load", self._database.get_state, CURRENT_CHARACTER_KEY)

    async def set_current(self, character_id: str) -> None:
        """Mark a character as current."""
        await self._run(
            "save",
            self._database.set_state,
            CURRENT_CHARACTER_KEY,
            character_id,
            character_id=character_id,
        )
        logger.debug("Current character set", character_id=character_id)

    async def clear_current(self) -> None:
        await self._run("save", self._database.delete_state, CURRENT_CHARACTER_KEY)

    async def get_current_character(self) -> Character | None:
        """Load the current character, if one is set and still exists."""
        character_id = await self.get_current()
        if character_id is None:
            return None
        return await self.load(character_id)

    # =========================================================================
    # Export / Import
    # =========================================================================

    async def export_character(self, character_id: str) -> str | None:
        """Export a stored character as JSON, or None if it does not exist."""
        character = await self.load(character_id)
        if character is None:
            return None
        return export_character(character)

    async def import_character(self, document: str | bytes | dict[str, Any]) -> Character:
        """Import a character document as a new saved character.

        The imported character gets an ID no stored character uses and new
        timestamps.

        Raises:
            ValidationError: If the document is malformed or has no name.
            StorageError: If the write fails.
        """
        character = import_character(document, character_id=await self._fresh_id())
        await self.save(character)
        return character

    async def duplicate(self, character_id: str) -> Character | None:
        """Save a copy of a stored character named '<name> (Copy)'.

        Returns:
            The copy, or None if the source does not exist.
        """
        source = await self.load(character_id)
        if source is None:
            return None

        now = datetime.now()
        copy = source.model_copy(
            deep=True,
            update={
                "id": await self._fresh_id(),
                "name": f"{source.name}{COPY_SUFFIX}",
                "created_at": now,
                "updated_at": now,
            },
        )
        await self.save(copy)
        logger.info("Character duplicated", source_id=character_id, character_id=copy.id)
        return copy

    async def _fresh_id(self) -> str:
        character_id = new_character_id()
        while await self.exists(character_id):
            character_id = new_character_id()
        return character_id


__all__ = [
    "COPY_SUFFIX",
    "CharacterStorage",
]
