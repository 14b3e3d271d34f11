"""D&D 3.5e Character Manager.

The core of a character manager for D&D 3.5e: dice, derived statistics,
character generation, a spell catalog and persistent character storage.

Example:
    >>> from dnd35_manager import CharacterGenerator, CharacterStorage, Database
    >>>
    >>> character = CharacterGenerator().create("random")
    >>> character.name = "Krusk"
    >>> storage = CharacterStorage(Database("characters.db"))
    >>> await storage.save(character)

Modules:
    core: Configuration, logging, constants and base exceptions.
    models: Pydantic V2 character schemas, enumerations and rules.
    engine: Dice, spell catalog, character generation and gameplay rolls.
    storage: SQLite persistence, the async storage service and auto-save.
"""

from __future__ import annotations

# Core
from dnd35_manager.core.config import Settings, get_settings
from dnd35_manager.core.exceptions import Dnd35Error
from dnd35_manager.core.logging import configure_logging, get_logger

# Models
from dnd35_manager.models import (
    Ability,
    Character,
    CharacterClass,
    CharacterProfile,
    CreationMode,
    SaveType,
    create_default_character,
)

# Engine
from dnd35_manager.engine import (
    CharacterActions,
    CharacterGenerator,
    CreationOptions,
    DiceRoll,
    DiceRoller,
    RollHistory,
    get_spells_by_class,
)

# Storage
from dnd35_manager.storage import CharacterStorage, Database, EditSession


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "Dnd35Error",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Ability",
    "Character",
    "CharacterClass",
    "CharacterProfile",
    "CreationMode",
    "SaveType",
    "create_default_character",
    # Engine
    "CharacterActions",
    "CharacterGenerator",
    "CreationOptions",
    "DiceRoll",
    "DiceRoller",
    "RollHistory",
    "get_spells_by_class",
    # Storage
    "CharacterStorage",
    "Database",
    "EditSession",
]
