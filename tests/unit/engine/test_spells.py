"""Tests for the spell catalog."""

from __future__ import annotations

import pytest

from dnd35_manager.engine.spells import (
    SPELL_CATALOG,
    filter_spells,
    get_spells_by_class,
    has_spell_access,
    sort_spells,
)
from dnd35_manager.models.character import Spell
from dnd35_manager.models.enums import CharacterClass, SpellSchool


class TestCatalog:
    """Tests for the fixed catalog contents."""

    def test_size_and_order(self) -> None:
        names = [spell.name for spell in SPELL_CATALOG]

        assert len(names) == 20
        assert names[0] == "Detect Magic"
        assert names[-1] == "Wish"
        assert len(set(names)) == 20

    def test_to_spell(self) -> None:
        fireball = next(spell for spell in SPELL_CATALOG if spell.name == "Fireball")
        spell = fireball.to_spell(prepared=True)

        assert spell.level == 3
        assert spell.school == "Evocation"
        assert spell.prepared is True


class TestSpellsByClass:
    """Tests for class and level filtering."""

    def test_first_level_wizard(self) -> None:
        names = [spell.name for spell in get_spells_by_class("Wizard", 1)]

        assert names == [
            "Detect Magic",
            "Light",
            "Mage Hand",
            "Prestidigitation",
            "Read Magic",
            "Magic Missile",
            "Shield",
            "Burning Hands",
            "Cure Light Wounds",
            "Bless",
        ]

    def test_fifth_level_cleric(self) -> None:
        spells = get_spells_by_class(CharacterClass.CLERIC, 5)

        assert len(spells) == 16
        assert max(spell.level for spell in spells) == 3

    def test_high_level_gets_everything(self) -> None:
        assert len(get_spells_by_class("Sorcerer", 17)) == 20

    @pytest.mark.parametrize("class_name", ["Fighter", "Barbarian", "Monk", "Rogue", "Artificer"])
    def test_no_spell_access(self, class_name: str) -> None:
        assert get_spells_by_class(class_name, 20) == []
        assert has_spell_access(class_name) is False

    @pytest.mark.parametrize("class_name", ["Paladin", "Ranger", "Bard", "Druid"])
    def test_spell_access(self, class_name: str) -> None:
        assert has_spell_access(class_name) is True
        assert get_spells_by_class(class_name, 1)


class TestSpellListHelpers:
    """Tests for sorting and filtering a character's spells."""

    @pytest.fixture
    def spells(self) -> list[Spell]:
        return [
            Spell(name="Shield", level=1, school="Abjuration"),
            Spell(name="Light", level=0, school="Evocation"),
            Spell(name="Fireball", level=3, school="Evocation"),
            Spell(name="Bless", level=1, school="Enchantment"),
        ]

    def test_sort(self, spells: list[Spell]) -> None:
        assert [spell.name for spell in sort_spells(spells)] == [
            "Light",
            "Bless",
            "Shield",
            "Fireball",
        ]

    def test_filter_by_level(self, spells: list[Spell]) -> None:
        assert [spell.name for spell in filter_spells(spells, level=1)] == ["Shield", "Bless"]

    def test_filter_by_school(self, spells: list[Spell]) -> None:
        result = filter_spells(spells, school=SpellSchool.EVOCATION)
        assert [spell.name for spell in result] == ["Light", "Fireball"]

    def test_no_filter(self, spells: list[Spell]) -> None:
        assert filter_spells(spells) == spells
