"""Tests for character gameplay rolls."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from dnd35_manager.core.exceptions import DiceRollError, ValidationError
from dnd35_manager.engine.actions import CharacterActions
from dnd35_manager.engine.dice import DiceRoller, RollHistory
from dnd35_manager.models.character import Attack, Character
from dnd35_manager.models.enums import Ability, SaveType


ScriptedRollerFactory = Callable[..., DiceRoller]


@pytest.fixture
def make_actions(
    sample_character: Character,
    scripted_roller: ScriptedRollerFactory,
) -> Callable[..., CharacterActions]:
    def make(*rolls: int) -> CharacterActions:
        return CharacterActions(sample_character, scripted_roller(rolls), RollHistory())

    return make


class TestChecks:
    """Tests for saves, ability checks, initiative and skills."""

    def test_saving_throw(self, make_actions: Callable[..., CharacterActions]) -> None:
        roll = make_actions(11).roll_saving_throw(SaveType.FORTITUDE)

        assert roll.label == "Fortitude Save"
        assert roll.result == 14
        assert roll.breakdown == "1d20(11) + 3"

    def test_ability_check(self, make_actions: Callable[..., CharacterActions]) -> None:
        roll = make_actions(5).roll_ability_check(Ability.CHA)

        assert roll.label == "Charisma Check"
        assert roll.result == 4
        assert roll.breakdown == "1d20(5) - 1"

    def test_initiative(self, make_actions: Callable[..., CharacterActions]) -> None:
        roll = make_actions(10).roll_initiative()

        assert roll.label == "Initiative"
        assert roll.result == 12

    def test_skill_check(self, make_actions: Callable[..., CharacterActions]) -> None:
        # 4 ranks + 3 strength + 3 class skill
        roll = make_actions(8).roll_skill_check("Climb")

        assert roll.label == "Climb Check"
        assert roll.result == 18

    def test_untrained_skill(self, make_actions: Callable[..., CharacterActions]) -> None:
        roll = make_actions(8).roll_skill_check("Bluff")
        assert roll.result == 7

    def test_unknown_skill(self, make_actions: Callable[..., CharacterActions]) -> None:
        actions = make_actions()

        with pytest.raises(ValidationError):
            actions.roll_skill_check("Basket Weaving")
        assert len(actions.history) == 0

    def test_reads_character_at_roll_time(
        self,
        sample_character: Character,
        make_actions: Callable[..., CharacterActions],
    ) -> None:
        actions = make_actions(10, 10)
        first = actions.roll_ability_check(Ability.STR)
        sample_character.set_ability_score(Ability.STR, 20)
        second = actions.roll_ability_check(Ability.STR)

        assert first.result == 13
        assert second.result == 15


class TestCombat:
    """Tests for attack and damage rolls."""

    def test_attack(
        self,
        sample_character: Character,
        make_actions: Callable[..., CharacterActions],
    ) -> None:
        roll = make_actions(20).roll_attack(sample_character.attacks[0])

        assert roll.label == "Dwarven Waraxe Attack"
        assert roll.result == 26
        assert roll.is_critical

    def test_damage(
        self,
        sample_character: Character,
        make_actions: Callable[..., CharacterActions],
    ) -> None:
        roll = make_actions(7).roll_damage(sample_character.attacks[0])

        assert roll.label == "Dwarven Waraxe Damage"
        assert roll.result == 10
        assert roll.breakdown == "1d10(7) +3"

    def test_malformed_damage(self, make_actions: Callable[..., CharacterActions]) -> None:
        actions = make_actions()

        with pytest.raises(DiceRollError):
            actions.roll_damage(Attack(name="Slap", damage="banana"))
        assert len(actions.history) == 0

    def test_custom_roll(self, sample_character: Character) -> None:
        actions = CharacterActions(sample_character, DiceRoller(seed=4), RollHistory())

        roll = actions.roll_custom("4d6kh3", label="Reroll Strength")

        assert roll.label == "Reroll Strength"
        assert 3 <= roll.result <= 18
        assert actions.history.latest == roll


class TestHistory:
    """Tests for the per-character roll history."""

    def test_rolls_recorded_most_recent_first(
        self,
        make_actions: Callable[..., CharacterActions],
    ) -> None:
        actions = make_actions(1, 2, 3)
        actions.roll_initiative()
        actions.roll_saving_throw(SaveType.WILL)
        actions.roll_ability_check(Ability.WIS)

        labels = [roll.label for roll in actions.history]
        assert labels == ["Wisdom Check", "Will Save", "Initiative"]

    def test_history_bounded(self, sample_character: Character, dice_roller: DiceRoller) -> None:
        actions = CharacterActions(sample_character, dice_roller)

        for _ in range(15):
            actions.roll_initiative()

        assert len(actions.history) == 10
