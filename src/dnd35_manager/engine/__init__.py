"""Game engine module for the D&D 3.5e Character Manager.

Submodules:
    dice: Dice rolling, damage parsing and roll history (d20 library for
        free-form notation)
    spells: The spell catalog and spell-list helpers
    generator: Manual, random and partial character creation
    actions: Labelled checks, saves, attacks and damage for a character

Example:
    >>> from dnd35_manager.engine import CharacterGenerator, CharacterActions
    >>> character = CharacterGenerator().create("random")
    >>> CharacterActions(character).roll_initiative().label
    'Initiative'
"""

from __future__ import annotations

# =============================================================================
# Dice Rolling
# =============================================================================
from dnd35_manager.engine.dice import (
    DAMAGE_PATTERN,
    DamageExpression,
    DiceRoll,
    DiceRoller,
    RandomSource,
    RollHistory,
    format_bonus,
    parse_damage,
)

# =============================================================================
# Spell Catalog
# =============================================================================
from dnd35_manager.engine.spells import (
    SPELL_CATALOG,
    CatalogSpell,
    filter_spells,
    get_spells_by_class,
    has_spell_access,
    sort_spells,
)

# =============================================================================
# Character Generation
# =============================================================================
from dnd35_manager.engine.generator import (
    CharacterGenerator,
    CreationOptions,
    apply_derived_stats,
)

# =============================================================================
# Gameplay Rolls
# =============================================================================
from dnd35_manager.engine.actions import CharacterActions


__all__ = [
    # Dice
    "DAMAGE_PATTERN",
    "DamageExpression",
    "DiceRoll",
    "DiceRoller",
    "RandomSource",
    "RollHistory",
    "format_bonus",
    "parse_damage",
    # Spells
    "SPELL_CATALOG",
    "CatalogSpell",
    "filter_spells",
    "get_spells_by_class",
    "has_spell_access",
    "sort_spells",
    # Generation
    "CharacterGenerator",
    "CreationOptions",
    "apply_derived_stats",
    # Actions
    "CharacterActions",
]
