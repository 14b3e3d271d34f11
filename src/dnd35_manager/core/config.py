"""Settings for the character manager, read with pydantic-settings.

Values come from the environment or a ``.env`` file in the working
directory, falling back to the defaults in ``core.constants``. Storage
and game settings are read with their own prefixes:

    DND35_MANAGER_DEBUG                         debug mode (bool)
    DND35_MANAGER_LOG_LEVEL                     DEBUG / INFO / WARNING / ERROR / CRITICAL
    DND35_MANAGER_DATABASE_PATH                 SQLite file for saved characters
    DND35_MANAGER_GAME_ROLL_HISTORY_SIZE        rolls kept per character session
    DND35_MANAGER_GAME_AUTO_SAVE_DELAY_SECONDS  idle time before an auto-save
    DND35_MANAGER_GAME_STARTING_SPELL_COUNT     spells given to randomized casters

Example:
    >>> get_settings().game.auto_save_delay_seconds
    30.0
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError as PydanticValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dnd35_manager.core.constants import (
    DEFAULT_AUTO_SAVE_DELAY_SECONDS,
    ROLL_HISTORY_SIZE,
    STARTING_SPELL_COUNT,
)
from dnd35_manager.core.exceptions import ConfigurationError


ENV_PREFIX = "DND35_MANAGER_"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _env_config(prefix: str = ENV_PREFIX) -> SettingsConfigDict:
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class StorageSettings(BaseSettings):
    """Where characters are saved."""

    model_config = _env_config()

    database_path: Path = Field(
        default=Path("data") / "dnd35_manager.db",
        description="SQLite database file",
    )

    @field_validator("database_path")
    @classmethod
    def expand_home(cls, value: Path) -> Path:
        return value.expanduser()


class GameSettings(BaseSettings):
    """Tunables for play sessions and character generation."""

    model_config = _env_config(f"{ENV_PREFIX}GAME_")

    roll_history_size: int = Field(default=ROLL_HISTORY_SIZE, ge=1, le=100)
    auto_save_delay_seconds: float = Field(default=DEFAULT_AUTO_SAVE_DELAY_SECONDS, gt=0, le=3600)
    starting_spell_count: int = Field(default=STARTING_SPELL_COUNT, ge=0, le=10)


class Settings(BaseSettings):
    """All application settings.

    Attributes:
        debug: Debug mode; also switches logging to console output.
        log_level: Minimum log level.
        storage: Persistence settings.
        game: Gameplay settings.
    """

    model_config = _env_config()

    debug: bool = False
    log_level: LogLevel = "INFO"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    game: GameSettings = Field(default_factory=GameSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once and reuse them.

    Raises:
        ConfigurationError: If a value from the environment is invalid.
    """
    try:
        return Settings()
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        raise ConfigurationError(
            f"Invalid setting: {first['msg']}",
            config_key=".".join(str(part) for part in first["loc"]),
            details={"errors": exc.error_count()},
        ) from exc


def clear_settings_cache() -> None:
    """Forget the loaded settings so the next call re-reads the environment."""
    get_settings.cache_clear()


__all__ = [
    "ENV_PREFIX",
    "StorageSettings",
    "GameSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
