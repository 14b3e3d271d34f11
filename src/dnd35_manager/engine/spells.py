"""Spell catalog and spell-list helpers.

The catalog is a small fixed selection of core 3.5e spells. It is not
split by class: every class with spell-list access sees the same
catalog, capped by the highest spell level its caster level allows.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from dnd35_manager.core.logging import get_logger
from dnd35_manager.models.character import Spell
from dnd35_manager.models.enums import CharacterClass, SpellSchool
from dnd35_manager.models.rules import class_traits, max_spell_level


logger = get_logger(__name__)


@dataclass(frozen=True)
class CatalogSpell:
    """A read-only catalog entry."""

    name: str
    level: int
    school: SpellSchool
    description: str

    def to_spell(self, *, prepared: bool = False) -> Spell:
        """Copy the entry onto a character's spell list."""
        return Spell(
            name=self.name,
            level=self.level,
            school=self.school.value,
            description=self.description,
            prepared=prepared,
        )


SPELL_CATALOG: tuple[CatalogSpell, ...] = (
    CatalogSpell(
        "Detect Magic", 0, SpellSchool.DIVINATION, "Detects spells and magic items within 60 ft."
    ),
    CatalogSpell("Light", 0, SpellSchool.EVOCATION, "Object shines like a torch."),
    CatalogSpell("Mage Hand", 0, SpellSchool.TRANSMUTATION, "Telekinetically move 5-pound object."),
    CatalogSpell("Prestidigitation", 0, SpellSchool.TRANSMUTATION, "Performs minor tricks."),
    CatalogSpell("Read Magic", 0, SpellSchool.DIVINATION, "Read scrolls and spellbooks."),
    CatalogSpell(
        "Magic Missile",
        1,
        SpellSchool.EVOCATION,
        "1d4+1 damage; +1 missile per two levels above 1st (max 5).",
    ),
    CatalogSpell("Shield", 1, SpellSchool.ABJURATION, "+4 AC, immunity to magic missile."),
    CatalogSpell("Burning Hands", 1, SpellSchool.EVOCATION, "1d4/level fire damage (max 5d4)."),
    CatalogSpell(
        "Cure Light Wounds", 1, SpellSchool.CONJURATION, "Cures 1d8 damage +1/level (max +5)."
    ),
    CatalogSpell(
        "Bless",
        1,
        SpellSchool.ENCHANTMENT,
        "Allies gain +1 on attack rolls and saves against fear.",
    ),
    CatalogSpell("Fireball", 3, SpellSchool.EVOCATION, "1d6/level damage, 20-ft. radius."),
    CatalogSpell("Lightning Bolt", 3, SpellSchool.EVOCATION, "1d6/level damage in 120-ft. line."),
    CatalogSpell(
        "Invisibility",
        2,
        SpellSchool.ILLUSION,
        "Subject is invisible for 1 min./level or until it attacks.",
    ),
    CatalogSpell(
        "Web", 2, SpellSchool.CONJURATION, "Fills 20-ft.-radius spread with sticky spiderwebs."
    ),
    CatalogSpell(
        "Haste",
        3,
        SpellSchool.TRANSMUTATION,
        "One creature/level moves faster, +1 on attack rolls, AC, and Reflex saves.",
    ),
    CatalogSpell(
        "Hold Person", 3, SpellSchool.ENCHANTMENT, "Paralyzes one humanoid for 1 round/level."
    ),
    CatalogSpell(
        "Polymorph", 4, SpellSchool.TRANSMUTATION, "Gives one willing subject a new form."
    ),
    CatalogSpell(
        "Teleport",
        5,
        SpellSchool.CONJURATION,
        "Instantly transports you as far as 100 miles/level.",
    ),
    CatalogSpell(
        "Disintegrate",
        6,
        SpellSchool.TRANSMUTATION,
        "Ray deals 2d6 damage/level, destroying one creature or object.",
    ),
    CatalogSpell("Wish", 9, SpellSchool.CONJURATION, "As limited wish, but with fewer limits."),
)
"""The fixed spell catalog, in catalog order."""


def has_spell_access(class_name: str | CharacterClass) -> bool:
    """Whether a class may draw from the spell catalog."""
    return class_traits(class_name).spell_access


def get_spells_by_class(class_name: str | CharacterClass, level: int) -> list[CatalogSpell]:
    """Get the catalog spells available to a class at a given level.

    Args:
        class_name: Character class. Classes without spell-list access
            (including unknown classes) get nothing.
        level: Caster level.

    Returns:
        Catalog spells with ``spell.level <= min(9, (level + 1) // 2)``,
        in catalog order.
    """
    if not has_spell_access(class_name):
        return []
    cap = max_spell_level(level)
    spells = [spell for spell in SPELL_CATALOG if spell.level <= cap]
    logger.debug("Spells available", class_name=str(class_name), level=level, count=len(spells))
    return spells


def sort_spells(spells: Iterable[Spell]) -> list[Spell]:
    """Order spells by level, then by name."""
    return sorted(spells, key=lambda spell: (spell.level, spell.name))


def filter_spells(
    spells: Iterable[Spell],
    *,
    level: int | None = None,
    school: str | SpellSchool | None = None,
) -> list[Spell]:
    """Narrow a spell list by level and/or school. None means no filter."""
    return [
        spell
        for spell in spells
        if (level is None or spell.level == level) and (school is None or spell.school == school)
    ]


__all__ = [
    "CatalogSpell",
    "SPELL_CATALOG",
    "has_spell_access",
    "get_spells_by_class",
    "sort_spells",
    "filter_spells",
]
