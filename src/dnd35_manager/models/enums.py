"""Enumeration types for the D&D 3.5e Character Manager.

This module defines the fixed rules enumerations: abilities, saving
throws, races, classes, alignments, sizes and spell schools. Character
classes carry their rules constants (hit die, attack progression, good
saves, spell access) so lookups never depend on free-form string keys.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum

from dnd35_manager.core.constants import DEFAULT_HIT_DIE


class Ability(StrEnum):
    """D&D 3.5e ability scores."""

    STR = "strength"
    DEX = "dexterity"
    CON = "constitution"
    INT = "intelligence"
    WIS = "wisdom"
    CHA = "charisma"

    @property
    def full_name(self) -> str:
        """Get the full name of the ability (e.g., 'Strength')."""
        return self.value.capitalize()

    @property
    def abbreviation(self) -> str:
        """Get the three-letter abbreviation (e.g., 'STR')."""
        return self.name


class SaveType(StrEnum):
    """D&D 3.5e saving throws."""

    FORTITUDE = "fortitude"
    REFLEX = "reflex"
    WILL = "will"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class Race(StrEnum):
    """Core D&D 3.5e player races."""

    HUMAN = "Human"
    ELF = "Elf"
    DWARF = "Dwarf"
    HALFLING = "Halfling"
    GNOME = "Gnome"
    HALF_ELF = "Half-Elf"
    HALF_ORC = "Half-Orc"


class Alignment(StrEnum):
    """The nine D&D 3.5e alignments."""

    LAWFUL_GOOD = "Lawful Good"
    NEUTRAL_GOOD = "Neutral Good"
    CHAOTIC_GOOD = "Chaotic Good"
    LAWFUL_NEUTRAL = "Lawful Neutral"
    TRUE_NEUTRAL = "True Neutral"
    CHAOTIC_NEUTRAL = "Chaotic Neutral"
    LAWFUL_EVIL = "Lawful Evil"
    NEUTRAL_EVIL = "Neutral Evil"
    CHAOTIC_EVIL = "Chaotic Evil"


class Size(StrEnum):
    """D&D 3.5e creature sizes, smallest first."""

    FINE = "Fine"
    DIMINUTIVE = "Diminutive"
    TINY = "Tiny"
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    HUGE = "Huge"
    GARGANTUAN = "Gargantuan"
    COLOSSAL = "Colossal"


class SpellSchool(StrEnum):
    """The eight schools of magic."""

    ABJURATION = "Abjuration"
    CONJURATION = "Conjuration"
    DIVINATION = "Divination"
    ENCHANTMENT = "Enchantment"
    EVOCATION = "Evocation"
    ILLUSION = "Illusion"
    NECROMANCY = "Necromancy"
    TRANSMUTATION = "Transmutation"


class CreationMode(StrEnum):
    """How a new character is put together."""

    MANUAL = "manual"
    RANDOM = "random"
    PARTIAL = "partial"


class BabProgression(StrEnum):
    """Base attack bonus progression tiers.

    FULL: bonus equals level (warriors).
    THREE_QUARTER: floor(level * 0.75) (priests, rogues, monks, bards).
    HALF: floor(level * 0.5) (arcane casters, unknown classes).
    """

    FULL = "full"
    THREE_QUARTER = "three_quarter"
    HALF = "half"

    def bonus(self, level: int) -> int:
        """Get the base attack bonus at a given level."""
        if self is BabProgression.FULL:
            return level
        if self is BabProgression.THREE_QUARTER:
            return math.floor(level * 0.75)
        return math.floor(level * 0.5)


@dataclass(frozen=True)
class ClassTraits:
    """Rules constants attached to a character class.

    Attributes:
        hit_die: Sides of the class hit die.
        base_attack: Base attack bonus progression.
        good_saves: Saving throws on the good progression.
        spell_access: Whether the class can draw from the spell catalog.
        starting_spells: Whether randomized characters of this class
            start with spells attached.
    """

    hit_die: int
    base_attack: BabProgression
    good_saves: frozenset[SaveType] = frozenset()
    spell_access: bool = False
    starting_spells: bool = False


class CharacterClass(StrEnum):
    """Core D&D 3.5e character classes."""

    BARBARIAN = "Barbarian"
    BARD = "Bard"
    CLERIC = "Cleric"
    DRUID = "Druid"
    FIGHTER = "Fighter"
    MONK = "Monk"
    PALADIN = "Paladin"
    RANGER = "Ranger"
    ROGUE = "Rogue"
    SORCERER = "Sorcerer"
    WIZARD = "Wizard"

    @property
    def traits(self) -> ClassTraits:
        """Get the rules constants for this class."""
        return CLASS_TRAITS[self]

    @classmethod
    def from_name(cls, name: str) -> CharacterClass | None:
        """Look up a class by its display name.

        Args:
            name: Class name as stored on a character (e.g., 'Wizard').

        Returns:
            The matching class, or None for names outside the core list.
        """
        try:
            return cls(name)
        except ValueError:
            return None


_FORT = frozenset({SaveType.FORTITUDE})
_REF = frozenset({SaveType.REFLEX})
_WILL = frozenset({SaveType.WILL})

CLASS_TRAITS: dict[CharacterClass, ClassTraits] = {
    CharacterClass.BARBARIAN: ClassTraits(12, BabProgression.FULL, _FORT),
    CharacterClass.BARD: ClassTraits(
        6, BabProgression.THREE_QUARTER, _REF | _WILL, spell_access=True, starting_spells=True
    ),
    CharacterClass.CLERIC: ClassTraits(
        8, BabProgression.THREE_QUARTER, _FORT | _WILL, spell_access=True, starting_spells=True
    ),
    CharacterClass.DRUID: ClassTraits(
        8, BabProgression.THREE_QUARTER, _FORT | _WILL, spell_access=True, starting_spells=True
    ),
    CharacterClass.FIGHTER: ClassTraits(10, BabProgression.FULL, _FORT),
    CharacterClass.MONK: ClassTraits(8, BabProgression.THREE_QUARTER, _FORT | _REF | _WILL),
    CharacterClass.PALADIN: ClassTraits(10, BabProgression.FULL, _FORT, spell_access=True),
    CharacterClass.RANGER: ClassTraits(8, BabProgression.FULL, _FORT | _REF, spell_access=True),
    CharacterClass.ROGUE: ClassTraits(6, BabProgression.THREE_QUARTER, _REF),
    CharacterClass.SORCERER: ClassTraits(
        4, BabProgression.HALF, _WILL, spell_access=True, starting_spells=True
    ),
    CharacterClass.WIZARD: ClassTraits(
        4, BabProgression.HALF, _WILL, spell_access=True, starting_spells=True
    ),
}
"""Per-class rules constants."""

UNKNOWN_CLASS_TRAITS = ClassTraits(DEFAULT_HIT_DIE, BabProgression.HALF)
"""Traits applied to classes outside the core list: d8, half BAB, all-poor saves."""


__all__ = [
    "Ability",
    "SaveType",
    "Race",
    "Alignment",
    "Size",
    "SpellSchool",
    "CreationMode",
    "BabProgression",
    "ClassTraits",
    "CharacterClass",
    "CLASS_TRAITS",
    "UNKNOWN_CLASS_TRAITS",
]
