"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        Dnd35Error: Base exception for all application errors.
        ConfigurationError: Configuration-related errors.
        ValidationError: User input validation errors.
        RulesEngineError: Rules and dice failures.
        DiceRollError: Malformed or impossible dice expressions.
        StorageError: Persistence failures.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
        character_context: Tag log events with a character ID.
"""

from __future__ import annotations

from dnd35_manager.core.config import (
    ENV_PREFIX,
    GameSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from dnd35_manager.core.exceptions import (
    ConfigurationError,
    DiceRollError,
    Dnd35Error,
    RulesEngineError,
    StorageError,
    ValidationError,
)
from dnd35_manager.core.logging import (
    bind_context,
    character_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "Dnd35Error",
    "ConfigurationError",
    "ValidationError",
    "RulesEngineError",
    "DiceRollError",
    "StorageError",
    # Configuration
    "ENV_PREFIX",
    "Settings",
    "StorageSettings",
    "GameSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "character_context",
]
