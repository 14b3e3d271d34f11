"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the D&D 3.5e Character Manager test suite.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path

    from dnd35_manager.engine.dice import DiceRoller
    from dnd35_manager.models.character import Character
    from dnd35_manager.storage.database import Database
    from dnd35_manager.storage.service import CharacterStorage


T = TypeVar("T")


class ScriptedRandom:
    """Random source that replays scripted values.

    ``randint`` returns the scripted integers in order. ``choice`` picks
    the scripted index (first element once the script runs out) and
    ``sample`` takes the first ``k`` elements.
    """

    def __init__(self, rolls: Iterable[int] = (), choices: Iterable[int] = ()) -> None:
        self.rolls = deque(rolls)
        self.choices = deque(choices)

    def randint(self, a: int, b: int) -> int:
        value = self.rolls.popleft()
        assert a <= value <= b, f"scripted roll {value} outside [{a}, {b}]"
        return value

    def choice(self, seq: Sequence[T]) -> T:
        index = self.choices.popleft() if self.choices else 0
        return seq[index]

    def sample(self, population: Sequence[T], k: int) -> list[T]:
        return list(population[:k])


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from dnd35_manager.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "DND35_MANAGER_DEBUG": "true",
        "DND35_MANAGER_LOG_LEVEL": "DEBUG",
        "DND35_MANAGER_GAME_ROLL_HISTORY_SIZE": "5",
        "DND35_MANAGER_GAME_AUTO_SAVE_DELAY_SECONDS": "2.5",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def sample_ability_scores() -> dict[str, int]:
    """Provide sample character ability scores."""
    return {
        "strength": 16,
        "dexterity": 14,
        "constitution": 15,
        "intelligence": 10,
        "wisdom": 12,
        "charisma": 8,
    }


@pytest.fixture
def sample_character(sample_ability_scores: dict[str, int]) -> Character:
    """Create a level 3 dwarf fighter for testing."""
    from dnd35_manager.models.character import Attack, Character

    character = Character(
        name="Tordek",
        player_name="Alex",
        race="Dwarf",
        character_class="Fighter",
        level=3,
        alignment="Lawful Neutral",
        ability_scores=sample_ability_scores,
        base_attack_bonus=3,
        saving_throws={"fortitude": 3, "reflex": 1, "will": 1},
        attacks=[
            Attack(name="Dwarven Waraxe", attack_bonus=6, damage="1d10+3", critical="20/x3"),
        ],
    )
    skill = character.get_skill("Climb")
    assert skill is not None
    skill.ranks = 4
    skill.is_class_skill = True
    return character


@pytest.fixture
def sample_export(sample_character: Character) -> dict[str, Any]:
    """Provide an exported character document as a dict."""
    return sample_character.model_dump(mode="json")


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def dice_roller() -> DiceRoller:
    """Create a DiceRoller with a fixed seed for reproducible tests."""
    from dnd35_manager.engine.dice import DiceRoller

    return DiceRoller(seed=42)


@pytest.fixture
def scripted_roller() -> Callable[..., DiceRoller]:
    """Factory for DiceRollers that replay scripted dice and choices.

    Example:
        roller = scripted_roller([4, 5])  # the next two dice come up 4 and 5
    """
    from dnd35_manager.engine.dice import DiceRoller

    def make(rolls: Iterable[int] = (), choices: Iterable[int] = ()) -> DiceRoller:
        return DiceRoller(ScriptedRandom(rolls, choices))

    return make


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def database(tmp_path: Path) -> Database:
    """Create a database in a temporary directory."""
    from dnd35_manager.storage.database import Database

    return Database(tmp_path / "data" / "characters.db")


@pytest.fixture
def storage(database: Database) -> CharacterStorage:
    """Create a storage service over the temporary database."""
    from dnd35_manager.storage.service import CharacterStorage

    return CharacterStorage(database)
