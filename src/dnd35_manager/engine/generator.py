"""Character generation.

Three creation modes are supported:

- manual: the all-default record, edited by hand afterwards,
- random: race, class, alignment and ability scores all rolled,
- partial: the caller picks which aspects of an existing record to reroll.

Random and partial generation both finish by recomputing every derived
statistic from the final class, level and ability scores.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from dnd35_manager.core.config import get_settings
from dnd35_manager.core.exceptions import ValidationError
from dnd35_manager.core.logging import get_logger
from dnd35_manager.engine.dice import DiceRoller
from dnd35_manager.engine.spells import get_spells_by_class
from dnd35_manager.models.character import (
    AbilityModifiers,
    AbilityScores,
    Character,
    Experience,
    HitPoints,
    SavingThrows,
    Spell,
    create_default_character,
)
from dnd35_manager.models.enums import (
    Ability,
    Alignment,
    CharacterClass,
    CreationMode,
    Race,
    Size,
)
from dnd35_manager.models.rules import (
    base_attack_bonus,
    class_traits,
    experience_needed,
    hit_points,
    saving_throws,
)


logger = get_logger(__name__)


class CreationOptions(BaseModel):
    """Which aspects partial randomization rerolls.

    Skills and feats are accepted for compatibility but are not
    randomized.
    """

    model_config = ConfigDict(frozen=True)

    randomize_stats: bool = True
    randomize_race: bool = True
    randomize_class: bool = True
    randomize_alignment: bool = True
    randomize_skills: bool = False
    randomize_feats: bool = False


def apply_derived_stats(character: Character) -> None:
    """Recompute derived statistics in place.

    Hit points are reset to full with no temporary hit points. Base attack
    bonus, saves, the Dexterity armor class component and experience
    needed follow from class, level and ability scores. Current
    experience is left alone.
    """
    modifiers = AbilityModifiers.from_scores(character.ability_scores)
    maximum = hit_points(character.level, character.character_class, modifiers.constitution)

    character.hit_points = HitPoints(current=maximum, maximum=maximum, temporary=0)
    character.base_attack_bonus = base_attack_bonus(character.character_class, character.level)
    character.saving_throws = SavingThrows.from_bonuses(
        saving_throws(character.character_class, character.level)
    )
    character.armor_class = character.armor_class.model_copy(update={"dex": modifiers.dexterity})
    character.experience = Experience(
        current=character.experience.current,
        needed=experience_needed(character.level),
    )


class CharacterGenerator:
    """Builds new characters in each creation mode.

    Example:
        >>> generator = CharacterGenerator(DiceRoller(seed=7))
        >>> character = generator.create(CreationMode.RANDOM)
        >>> character.level
        1
    """

    def __init__(
        self,
        roller: DiceRoller | None = None,
        *,
        starting_spell_count: int | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            roller: Dice roller whose random source drives every random
                choice.
            starting_spell_count: Spells attached to casters by partial
                randomization. Defaults to the configured value.
        """
        self._roller = roller or DiceRoller()
        if starting_spell_count is None:
            starting_spell_count = get_settings().game.starting_spell_count
        self._starting_spell_count = starting_spell_count

    @property
    def roller(self) -> DiceRoller:
        return self._roller

    # -------------------------------------------------------------------------
    # Modes
    # -------------------------------------------------------------------------

    def create_manual(self) -> Character:
        return create_default_character()

    def roll_ability_scores(self) -> AbilityScores:
        """Roll all six ability scores with 4d6, drop the lowest."""
        return AbilityScores(
            **{ability.value: self._roller.roll_ability_score() for ability in Ability}
        )

    def generate_random(self) -> Character:
        """Create a fully random level 1 character."""
        rng = self._roller.rng
        character = create_default_character()
        character.ability_scores = self.roll_ability_scores()
        character.race = rng.choice(list(Race)).value
        character.character_class = rng.choice(list(CharacterClass)).value
        character.alignment = rng.choice(list(Alignment)).value
        character.level = 1
        character.size = Size.MEDIUM.value
        apply_derived_stats(character)

        logger.info(
            "Random character generated",
            character_id=character.id,
            race=character.race,
            character_class=character.character_class,
        )
        return character

    def apply_partial(self, character: Character, options: CreationOptions) -> Character:
        """Reroll the chosen aspects of a character.

        The input record is not modified. Derived statistics are always
        recomputed, even when nothing was rerolled. If the resulting class
        starts with spells, its spell list is replaced by a random
        selection of distinct catalog spells with the first one prepared.

        Args:
            character: Starting record.
            options: Aspects to reroll.

        Returns:
            A new record.
        """
        rng = self._roller.rng
        updated = character.model_copy(deep=True)

        if options.randomize_stats:
            updated.ability_scores = self.roll_ability_scores()
        if options.randomize_race:
            updated.race = rng.choice(list(Race)).value
        if options.randomize_class:
            updated.character_class = rng.choice(list(CharacterClass)).value
        if options.randomize_alignment:
            updated.alignment = rng.choice(list(Alignment)).value

        apply_derived_stats(updated)

        if class_traits(updated.character_class).starting_spells:
            updated.spells = self._starting_spells(updated.character_class, updated.level)

        logger.info(
            "Partial randomization applied",
            character_id=updated.id,
            options=options.model_dump(),
            spells=len(updated.spells),
        )
        return updated

    def create(
        self,
        mode: CreationMode | str,
        options: CreationOptions | None = None,
        base: Character | None = None,
    ) -> Character:
        """Create a character in the given mode.

        Args:
            mode: Creation mode.
            options: Partial randomization options (partial mode only).
            base: Record to randomize in partial mode, defaults to the
                manual default.

        Raises:
            ValidationError: If the mode is unknown.
        """
        try:
            mode = CreationMode(mode)
        except ValueError as exc:
            raise ValidationError(
                "Unknown creation mode", field_name="mode", invalid_value=mode
            ) from exc

        if mode is CreationMode.MANUAL:
            return self.create_manual()
        if mode is CreationMode.RANDOM:
            return self.generate_random()
        return self.apply_partial(base or create_default_character(), options or CreationOptions())

    def _starting_spells(self, class_name: str, level: int) -> list[Spell]:
        pool = get_spells_by_class(class_name, level)
        count = min(self._starting_spell_count, len(pool))
        chosen = self._roller.rng.sample(pool, count)
        return [spell.to_spell(prepared=index == 0) for index, spell in enumerate(chosen)]


__all__ = [
    "CreationOptions",
    "CharacterGenerator",
    "apply_derived_stats",
]
