"""Gameplay rolls for a character.

CharacterActions turns the numbers on a sheet into labelled d20 checks
and damage rolls, and records each one in a bounded roll history. A roll
that fails to parse is never recorded.
"""

from __future__ import annotations

from dnd35_manager.core.config import get_settings
from dnd35_manager.core.exceptions import ValidationError
from dnd35_manager.core.logging import get_logger
from dnd35_manager.engine.dice import DiceRoll, DiceRoller, RollHistory
from dnd35_manager.models.character import Attack, Character
from dnd35_manager.models.enums import Ability, SaveType
from dnd35_manager.models.rules import skill_total


logger = get_logger(__name__)


class CharacterActions:
    """Roll checks, saves, attacks and damage for one character.

    The character is read at roll time, so edits made between rolls are
    always reflected.

    Example:
        >>> actions = CharacterActions(character)
        >>> roll = actions.roll_saving_throw(SaveType.FORTITUDE)
        >>> roll.label
        'Fortitude Save'
    """

    def __init__(
        self,
        character: Character,
        roller: DiceRoller | None = None,
        history: RollHistory | None = None,
    ) -> None:
        self.character = character
        self._roller = roller or DiceRoller()
        if history is None:
            history = RollHistory(get_settings().game.roll_history_size)
        self._history = history

    @property
    def history(self) -> RollHistory:
        return self._history

    def _record(self, roll: DiceRoll) -> DiceRoll:
        self._history.add(roll)
        logger.info(
            "Roll made",
            character_id=self.character.id,
            label=roll.label,
            result=roll.result,
            breakdown=roll.breakdown,
        )
        return roll

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    def roll_saving_throw(self, save: SaveType) -> DiceRoll:
        """Roll a saving throw using the base save bonus."""
        bonus = self.character.saving_throws.get(save)
        return self._record(self._roller.roll_d20(f"{save.display_name} Save", bonus))

    def roll_ability_check(self, ability: Ability) -> DiceRoll:
        """Roll a raw ability check."""
        bonus = self.character.ability_modifiers.get(ability)
        return self._record(self._roller.roll_d20(f"{ability.full_name} Check", bonus))

    def roll_initiative(self) -> DiceRoll:
        """Roll initiative using the Dexterity modifier."""
        bonus = self.character.ability_modifiers.dexterity
        return self._record(self._roller.roll_d20("Initiative", bonus))

    def roll_skill_check(self, skill_name: str) -> DiceRoll:
        """Roll a skill check.

        The bonus is ranks + ability modifier + misc modifier, plus the
        class skill bonus for a class skill with ranks.

        Raises:
            ValidationError: If the character has no such skill.
        """
        skill = self.character.get_skill(skill_name)
        if skill is None:
            raise ValidationError("Unknown skill", field_name="skills", invalid_value=skill_name)
        bonus = skill_total(skill, self.character.ability_modifiers)
        return self._record(self._roller.roll_d20(f"{skill.name} Check", bonus))

    # -------------------------------------------------------------------------
    # Combat
    # -------------------------------------------------------------------------

    def roll_attack(self, attack: Attack) -> DiceRoll:
        """Roll an attack using the attack's own bonus."""
        return self._record(self._roller.roll_d20(f"{attack.name} Attack", attack.attack_bonus))

    def roll_damage(self, attack: Attack) -> DiceRoll:
        """Roll an attack's damage string.

        Raises:
            DiceRollError: If the damage string is malformed.
        """
        roll = self._roller.roll_damage(attack.damage, label=f"{attack.name} Damage")
        return self._record(roll)

    def roll_custom(self, expression: str, label: str | None = None) -> DiceRoll:
        """Roll arbitrary dice notation (e.g., '4d6kh3', '1d20+1d4+2').

        Raises:
            DiceRollError: If the notation is invalid.
        """
        return self._record(self._roller.roll_expression(expression, label=label))


__all__ = [
    "CharacterActions",
]
