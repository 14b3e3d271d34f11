"""Integration tests for the full character lifecycle.

Tests creation, persistence, play and removal working together.
"""

from __future__ import annotations

import pytest

from dnd35_manager.engine.actions import CharacterActions
from dnd35_manager.engine.dice import DiceRoller, RollHistory
from dnd35_manager.engine.generator import CharacterGenerator, CreationOptions
from dnd35_manager.engine.spells import get_spells_by_class
from dnd35_manager.models.enums import Ability, CharacterClass, CreationMode, SaveType
from dnd35_manager.storage.service import CharacterStorage


class TestCharacterLifecycle:
    """Create, save, play, copy and delete characters."""

    @pytest.mark.asyncio
    async def test_random_character_round_trip(self, storage: CharacterStorage) -> None:
        """A generated character survives storage intact."""
        character = CharacterGenerator(DiceRoller(seed=21)).create(CreationMode.RANDOM)
        character.name = "Krusk"

        await storage.save(character)
        await storage.set_current(character.id)
        current = await storage.get_current_character()

        assert current == character
        assert current is not None
        assert current.ability_modifiers == character.ability_modifiers
        assert current.armor_class.total == character.armor_class.total

    @pytest.mark.asyncio
    async def test_partial_caster_flow(self, storage: CharacterStorage) -> None:
        """A partially randomized wizard keeps its spells through storage."""
        generator = CharacterGenerator(DiceRoller(seed=5), starting_spell_count=3)
        base = generator.create_manual()
        base.name = "Mialee"
        base.character_class = CharacterClass.WIZARD.value
        options = CreationOptions(randomize_class=False, randomize_race=False)

        wizard = generator.apply_partial(base, options)
        await storage.save(wizard)
        loaded = await storage.load(wizard.id)

        assert loaded is not None
        assert len(loaded.spells) == 3
        assert loaded.spells[0].prepared is True
        available = {spell.name for spell in get_spells_by_class("Wizard", loaded.level)}
        assert {spell.name for spell in loaded.spells} <= available

        loaded.toggle_spell_prepared(0)
        await storage.save(loaded)
        reloaded = await storage.load(wizard.id)
        assert reloaded is not None
        assert reloaded.spells[0].prepared is False

    @pytest.mark.asyncio
    async def test_play_session(self, storage: CharacterStorage) -> None:
        """Rolls use the stored character's numbers."""
        character = CharacterGenerator(DiceRoller(seed=9)).create(CreationMode.RANDOM)
        character.name = "Jozan"
        await storage.save(character)

        loaded = await storage.load(character.id)
        assert loaded is not None
        actions = CharacterActions(loaded, DiceRoller(seed=2), RollHistory(max_size=3))

        save = actions.roll_saving_throw(SaveType.WILL)
        check = actions.roll_ability_check(Ability.WIS)
        actions.roll_initiative()
        actions.roll_skill_check("Spot")

        assert 1 + loaded.saving_throws.will <= save.result <= 20 + loaded.saving_throws.will
        assert check.natural is not None
        assert check.result == check.natural + loaded.ability_modifiers.wisdom
        assert len(actions.history) == 3
        assert actions.history.latest is not None
        assert actions.history.latest.label == "Spot Check"

    @pytest.mark.asyncio
    async def test_copy_export_import_delete(self, storage: CharacterStorage) -> None:
        """Copies and imports are independent records."""
        character = CharacterGenerator(DiceRoller(seed=4)).create(CreationMode.RANDOM)
        character.name = "Lidda"
        await storage.save(character)
        await storage.set_current(character.id)

        copy = await storage.duplicate(character.id)
        document = await storage.export_character(character.id)
        assert copy is not None
        assert document is not None
        imported = await storage.import_character(document)

        ids = {profile.id for profile in await storage.list_profiles()}
        assert ids == {character.id, copy.id, imported.id}

        await storage.delete(character.id)

        assert await storage.get_current() is None
        remaining = {profile.name for profile in await storage.list_profiles()}
        assert remaining == {"Lidda (Copy)", "Lidda"}
