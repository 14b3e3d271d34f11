"""JSON export and import of character records.

Exports are a faithful, human-readable JSON document of a Character with
ISO-8601 timestamps. Imports always produce a new character: the id and
both timestamps are replaced, so importing the same document twice yields
two distinct records.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from dnd35_manager.core.exceptions import ValidationError
from dnd35_manager.core.logging import get_logger
from dnd35_manager.models.character import Character, new_character_id


logger = get_logger(__name__)


def export_character(character: Character, *, indent: int = 2) -> str:
    """Serialize a character to an indented JSON document with camelCase keys."""
    return character.model_dump_json(indent=indent, by_alias=True)


def parse_character(document: str | bytes | dict[str, Any]) -> Character:
    """Validate a JSON document or mapping into a Character as stored.

    Raises:
        ValidationError: If the document is not JSON or not a character.
    """
    try:
        if isinstance(document, dict):
            return Character.model_validate(document)
        return Character.model_validate_json(document)
    except PydanticValidationError as exc:
        raise ValidationError(
            "Invalid character document",
            details={"errors": exc.error_count()},
        ) from exc


def import_character(
    document: str | bytes | dict[str, Any],
    *,
    character_id: str | None = None,
) -> Character:
    """Build a new character from an exported document.

    Args:
        document: JSON text or an already-decoded mapping.
        character_id: Identifier for the new record; a fresh one is
            generated when omitted.

    Returns:
        The imported character with a new id and new timestamps.

    Raises:
        ValidationError: If the document is malformed.
    """
    if isinstance(document, (str, bytes)):
        try:
            data = json.loads(document)
        except json.JSONDecodeError as exc:
            raise ValidationError("Import document is not valid JSON") from exc
    else:
        data = document

    if not isinstance(data, dict):
        raise ValidationError(
            "Import document must be a JSON object",
            invalid_value=type(data).__name__,
        )

    character = parse_character(data)
    now = datetime.now()
    imported = character.model_copy(
        update={
            "id": character_id or new_character_id(),
            "created_at": now,
            "updated_at": now,
        }
    )
    logger.info(
        "Character imported",
        character_id=imported.id,
        source_id=character.id,
        name=imported.name,
    )
    return imported


__all__ = [
    "export_character",
    "parse_character",
    "import_character",
]
