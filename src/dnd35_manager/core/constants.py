"""Application-wide constants for the D&D 3.5e Character Manager.

This module defines the fixed D&D 3.5e rules numbers and the defaults
for the gameplay helpers.
"""

from __future__ import annotations

# =============================================================================
# Ability Scores
# =============================================================================

DEFAULT_ABILITY_SCORE = 10
"""Score every ability starts at for a manually created character."""

ABILITY_ROLL_DICE = 4
"""Dice rolled per ability score (4d6, drop lowest)."""

ABILITY_ROLL_KEEP = 3
"""Highest dice kept from an ability score roll."""

MIN_ROLLED_ABILITY_SCORE = 3
MAX_ROLLED_ABILITY_SCORE = 18

# =============================================================================
# Derived Statistics
# =============================================================================

BASE_ARMOR_CLASS = 10
"""Armor class before any component is added."""

CLASS_SKILL_BONUS = 3
"""Flat bonus on a class skill once at least one rank is invested."""

DEFAULT_HIT_DIE = 8
"""Hit die used for classes missing from the class table."""

MAX_TABULATED_LEVEL = 20
"""Highest level with an experience threshold."""

MAX_SPELL_LEVEL = 9
"""Highest spell level in the catalog."""

# =============================================================================
# Character Generation
# =============================================================================

STARTING_SPELL_COUNT = 3
"""Spells attached to a caster by partial randomization."""

# =============================================================================
# Gameplay Helpers
# =============================================================================

ROLL_HISTORY_SIZE = 10
"""Most recent dice rolls kept in memory."""

DEFAULT_AUTO_SAVE_DELAY_SECONDS = 30.0
"""Idle time before pending edits are saved automatically."""

D20_SIDES = 20
"""Die used for checks, saves, attacks and initiative."""

MAX_DICE_PER_ROLL = 1000
"""Most dice a single damage or dice roll may throw."""

MAX_DIE_SIDES = 1000
"""Most sides a single die may have."""


__all__ = [
    "DEFAULT_ABILITY_SCORE",
    "ABILITY_ROLL_DICE",
    "ABILITY_ROLL_KEEP",
    "MIN_ROLLED_ABILITY_SCORE",
    "MAX_ROLLED_ABILITY_SCORE",
    "BASE_ARMOR_CLASS",
    "CLASS_SKILL_BONUS",
    "DEFAULT_HIT_DIE",
    "MAX_TABULATED_LEVEL",
    "MAX_SPELL_LEVEL",
    "STARTING_SPELL_COUNT",
    "ROLL_HISTORY_SIZE",
    "DEFAULT_AUTO_SAVE_DELAY_SECONDS",
    "D20_SIDES",
    "MAX_DICE_PER_ROLL",
    "MAX_DIE_SIDES",
]
