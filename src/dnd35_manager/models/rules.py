"""D&D 3.5e derived-statistic rules.

Pure functions mapping ability scores, class and level to the numbers on
a character sheet: ability modifiers, hit points, base attack bonus,
saving throws, experience thresholds, armor class and skill totals.

None of these functions keep state or watch a character for changes.
Whenever scores, class or level change, the caller recomputes whatever
depends on them.

Classes outside the core list get explicit fallback traits (d8 hit die,
half attack progression, all-poor saves) instead of failing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dnd35_manager.core.constants import (
    BASE_ARMOR_CLASS,
    CLASS_SKILL_BONUS,
    MAX_SPELL_LEVEL,
    MAX_TABULATED_LEVEL,
)
from dnd35_manager.core.logging import get_logger
from dnd35_manager.models.enums import (
    UNKNOWN_CLASS_TRAITS,
    CharacterClass,
    ClassTraits,
    SaveType,
)


if TYPE_CHECKING:
    from dnd35_manager.models.character import AbilityModifiers, ArmorClass, Skill


logger = get_logger(__name__)


# =============================================================================
# Experience Thresholds (3.5e PHB table 3-2)
# =============================================================================

EXPERIENCE_TABLE: dict[int, int] = {
    1: 0,
    2: 1000,
    3: 3000,
    4: 6000,
    5: 10000,
    6: 15000,
    7: 21000,
    8: 28000,
    9: 36000,
    10: 45000,
    11: 55000,
    12: 66000,
    13: 78000,
    14: 91000,
    15: 105000,
    16: 120000,
    17: 136000,
    18: 153000,
    19: 171000,
    20: 190000,
}


def experience_for_level(level: int) -> int:
    """Get the total experience at which a level is reached.

    Levels outside 1-20 have no threshold and return 0.
    """
    return EXPERIENCE_TABLE.get(level, 0)


def experience_needed(level: int) -> int:
    """Get the experience total required for the level after ``level``.

    Returns 0 at level 20 and above, where the table ends.
    """
    if level >= MAX_TABULATED_LEVEL:
        return 0
    return experience_for_level(level + 1)


# =============================================================================
# Ability Modifiers
# =============================================================================


def ability_modifier(score: int) -> int:
    """Calculate the ability modifier from an ability score.

    The modifier is floor((score - 10) / 2), including for scores below 10.

    Example:
        >>> ability_modifier(18)
        4
        >>> ability_modifier(7)
        -2
    """
    return (score - 10) // 2


# =============================================================================
# Class Lookups
# =============================================================================


def resolve_class(class_name: str | CharacterClass) -> CharacterClass | None:
    """Resolve a class name to a core class, or None if it is not one."""
    if isinstance(class_name, CharacterClass):
        return class_name
    return CharacterClass.from_name(class_name)


def class_traits(class_name: str | CharacterClass) -> ClassTraits:
    """Get the rules constants for a class.

    Args:
        class_name: A core class or any free-form class name.

    Returns:
        The class traits, or the unknown-class fallback traits.
    """
    character_class = resolve_class(class_name)
    if character_class is None:
        logger.debug("Unknown class, using fallback traits", class_name=class_name)
        return UNKNOWN_CLASS_TRAITS
    return character_class.traits


def hit_die(class_name: str | CharacterClass) -> int:
    """Get the hit die size for a class (8 for unknown classes)."""
    return class_traits(class_name).hit_die


# =============================================================================
# Combat Statistics
# =============================================================================


def hit_points(level: int, class_name: str | CharacterClass, constitution_modifier: int) -> int:
    """Calculate maximum hit points.

    First level grants the full hit die plus the Constitution modifier;
    every later level grants half the die plus one plus the modifier.
    The result is never below one hit point per level.

    Args:
        level: Character level.
        class_name: Character class.
        constitution_modifier: Constitution modifier.

    Returns:
        Maximum hit points.

    Example:
        >>> hit_points(2, "Fighter", 0)
        16
    """
    die = hit_die(class_name)
    total = die + constitution_modifier
    for _ in range(2, level + 1):
        total += die // 2 + 1 + constitution_modifier
    return max(total, level)


def base_attack_bonus(class_name: str | CharacterClass, level: int) -> int:
    """Calculate base attack bonus from the class progression tier."""
    return class_traits(class_name).base_attack.bonus(level)


def good_save(level: int) -> int:
    """Saving throw bonus on the good progression."""
    return level // 2 + 2


def poor_save(level: int) -> int:
    """Saving throw bonus on the poor progression."""
    return level // 3


def saving_throws(class_name: str | CharacterClass, level: int) -> dict[SaveType, int]:
    """Calculate base saving throws for a class and level.

    Returns:
        Mapping of each saving throw to its base bonus.

    Example:
        >>> saving_throws("Fighter", 4)[SaveType.FORTITUDE]
        4
    """
    good = class_traits(class_name).good_saves
    return {
        save: good_save(level) if save in good else poor_save(level)
        for save in SaveType
    }


def armor_class_total(armor_class: ArmorClass) -> int:
    """Sum the base armor class and every contributing component."""
    return (
        BASE_ARMOR_CLASS
        + armor_class.armor
        + armor_class.shield
        + armor_class.dex
        + armor_class.size
        + armor_class.natural
        + armor_class.deflection
        + armor_class.misc
    )


def skill_total(skill: Skill, modifiers: AbilityModifiers) -> int:
    """Calculate a skill modifier.

    ranks + governing ability modifier + misc modifier, plus the class
    skill bonus when the skill is a class skill with at least one rank.
    """
    class_bonus = CLASS_SKILL_BONUS if skill.is_class_skill and skill.ranks > 0 else 0
    return skill.ranks + modifiers.get(skill.ability_score) + skill.misc_modifier + class_bonus


# =============================================================================
# Spellcasting
# =============================================================================


def max_spell_level(level: int) -> int:
    """Highest spell level available to a caster of the given level."""
    return min(MAX_SPELL_LEVEL, (level + 1) // 2)


__all__ = [
    "EXPERIENCE_TABLE",
    "experience_for_level",
    "experience_needed",
    "ability_modifier",
    "resolve_class",
    "class_traits",
    "hit_die",
    "hit_points",
    "base_attack_bonus",
    "good_save",
    "poor_save",
    "saving_throws",
    "armor_class_total",
    "skill_total",
    "max_spell_level",
]
