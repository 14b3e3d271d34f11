"""Pydantic V2 schemas for D&D 3.5e character records.

This module defines the Character aggregate root and everything it owns:
ability scores, skills, combat statistics, feats, equipment, attacks,
spells, money and experience, plus the lightweight CharacterProfile used
for listings.

Derived values are never authoritative. Ability modifiers and the armor
class total are computed fields. They appear in exports for display but
are recomputed from their source fields on every access and ignored on
input.

Field names are snake_case. Every model also accepts the camelCase names
used by exported JSON documents (``characterClass``,
``abilityScores``, ...), so such documents can be imported directly.

Example:
    >>> character = create_default_character()
    >>> character.set_ability_score(Ability.STR, 16)
    >>> character.ability_modifiers.strength
    3
"""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel

from dnd35_manager.core.constants import DEFAULT_ABILITY_SCORE
from dnd35_manager.core.exceptions import ValidationError
from dnd35_manager.models.enums import Ability, Alignment, CharacterClass, Race, SaveType, Size
from dnd35_manager.models.rules import (
    ability_modifier,
    armor_class_total,
    experience_needed,
    skill_total,
)


def new_character_id() -> str:
    """Generate a fresh character identifier."""
    return str(uuid4())


class SheetModel(BaseModel):
    """Base configuration shared by every character sheet model."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="ignore",
    )


# =============================================================================
# Abilities
# =============================================================================


class AbilityScores(SheetModel):
    """The six ability scores.

    Scores are unconstrained so any value can be entered by hand; rolled
    scores fall in 3-18. Instances are frozen: an edit replaces the whole
    set, which keeps the derived modifiers in step with the scores.
    """

    model_config = ConfigDict(frozen=True)

    strength: int = DEFAULT_ABILITY_SCORE
    dexterity: int = DEFAULT_ABILITY_SCORE
    constitution: int = DEFAULT_ABILITY_SCORE
    intelligence: int = DEFAULT_ABILITY_SCORE
    wisdom: int = DEFAULT_ABILITY_SCORE
    charisma: int = DEFAULT_ABILITY_SCORE

    def get(self, ability: Ability) -> int:
        """Get the score for a specific ability."""
        return getattr(self, ability.value)

    def with_score(self, ability: Ability, value: int) -> AbilityScores:
        """Return a copy with one score replaced."""
        return AbilityScores.model_validate({**self.model_dump(), ability.value: value})


class AbilityModifiers(SheetModel):
    """Ability modifiers derived from a set of ability scores."""

    model_config = ConfigDict(frozen=True)

    strength: int = 0
    dexterity: int = 0
    constitution: int = 0
    intelligence: int = 0
    wisdom: int = 0
    charisma: int = 0

    @classmethod
    def from_scores(cls, scores: AbilityScores) -> AbilityModifiers:
        """Derive all six modifiers from ability scores."""
        return cls(**{ability.value: ability_modifier(scores.get(ability)) for ability in Ability})

    def get(self, ability: Ability) -> int:
        """Get the modifier for a specific ability."""
        return getattr(self, ability.value)


# =============================================================================
# Skills
# =============================================================================

STANDARD_SKILLS: tuple[tuple[str, Ability], ...] = (
    ("Appraise", Ability.INT),
    ("Balance", Ability.DEX),
    ("Bluff", Ability.CHA),
    ("Climb", Ability.STR),
    ("Concentration", Ability.CON),
    ("Craft", Ability.INT),
    ("Decipher Script", Ability.INT),
    ("Diplomacy", Ability.CHA),
    ("Disable Device", Ability.INT),
    ("Disguise", Ability.CHA),
    ("Escape Artist", Ability.DEX),
    ("Forgery", Ability.INT),
    ("Gather Information", Ability.CHA),
    ("Handle Animal", Ability.CHA),
    ("Heal", Ability.WIS),
    ("Hide", Ability.DEX),
    ("Intimidate", Ability.CHA),
    ("Jump", Ability.STR),
    ("Knowledge", Ability.INT),
    ("Listen", Ability.WIS),
    ("Move Silently", Ability.DEX),
    ("Open Lock", Ability.DEX),
    ("Perform", Ability.CHA),
    ("Profession", Ability.WIS),
    ("Ride", Ability.DEX),
    ("Search", Ability.INT),
    ("Sense Motive", Ability.WIS),
    ("Sleight of Hand", Ability.DEX),
    ("Spellcraft", Ability.INT),
    ("Spot", Ability.WIS),
    ("Survival", Ability.WIS),
    ("Swim", Ability.STR),
    ("Tumble", Ability.DEX),
    ("Use Magic Device", Ability.CHA),
    ("Use Rope", Ability.DEX),
)
"""The 35 core skills and their governing abilities, in sheet order."""


class Skill(SheetModel):
    """A skill entry on the character sheet.

    Attributes:
        name: Skill name, unique within a character.
        ability_score: Governing ability.
        ranks: Ranks invested.
        misc_modifier: Any other bonus or penalty.
        is_class_skill: Whether the skill is a class skill.
        trained: Whether the skill has been trained.
    """

    name: str
    ability_score: Ability
    ranks: int = Field(default=0, ge=0)
    misc_modifier: int = 0
    is_class_skill: bool = False
    trained: bool = False


def default_skills() -> list[Skill]:
    """Build the untrained list of all standard skills."""
    return [Skill(name=name, ability_score=ability) for name, ability in STANDARD_SKILLS]


# =============================================================================
# Combat Statistics
# =============================================================================


class SavingThrows(SheetModel):
    """Base saving throw bonuses."""

    fortitude: int = 0
    reflex: int = 0
    will: int = 0

    @classmethod
    def from_bonuses(cls, bonuses: dict[SaveType, int]) -> SavingThrows:
        return cls(**{save.value: bonus for save, bonus in bonuses.items()})

    def get(self, save: SaveType) -> int:
        return getattr(self, save.value)


class HitPoints(SheetModel):
    """Hit point tracking. Current and temporary change freely in play."""

    current: int = 10
    maximum: int = 10
    temporary: int = 0


class ArmorClass(SheetModel):
    """Armor class components.

    The total is always 10 plus the sum of the components. A total given
    in input is ignored.
    """

    armor: int = 0
    shield: int = 0
    dex: int = 0
    size: int = 0
    natural: int = 0
    deflection: int = 0
    misc: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        return armor_class_total(self)


# =============================================================================
# Owned Records
# =============================================================================


class Feat(SheetModel):
    name: str = "New Feat"
    description: str = ""
    prerequisites: str = ""


class Equipment(SheetModel):
    name: str = "New Item"
    quantity: int = 1
    weight: float = 0
    description: str = ""
    equipped: bool = False


class Attack(SheetModel):
    """A weapon or natural attack.

    Attributes:
        damage: Damage dice in ``NdM[+K|-K]`` form (e.g., '1d8+3').
        critical: Threat range and multiplier (e.g., '19-20/x2').
    """

    name: str = "New Attack"
    attack_bonus: int = 0
    damage: str = "1d4"
    critical: str = "20/x2"
    range: str = "Melee"
    type: str = "Slashing"


class Spell(SheetModel):
    """A spell known or prepared by the character.

    Spells have no identity beyond their position in the character's
    list; two entries may be identical.
    """

    name: str
    level: int = Field(default=0, ge=0)
    school: str = ""
    description: str = ""
    prepared: bool = False


class Money(SheetModel):
    copper: int = 0
    silver: int = 0
    gold: int = 0
    platinum: int = 0


class Experience(SheetModel):
    current: int = 0
    needed: int = Field(default_factory=lambda: experience_needed(1))


# =============================================================================
# Character
# =============================================================================


class CharacterProfile(SheetModel):
    """Lightweight, read-only summary of a character used for listings."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    level: int
    race: str
    character_class: str
    last_played: datetime


class Character(SheetModel):
    """A D&D 3.5e character record, the aggregate root.

    Defaults describe the record manual creation starts from: a level 1
    Human Fighter with every ability at 10.

    Attributes:
        id: Unique identifier.
        name: Character name (required before saving).
        player_name: Name of the player.
        character_class: Class name; classes outside the core list are
            allowed and use fallback rules.
        ability_scores: The six ability scores.
        hit_points: Current, maximum and temporary hit points.
        armor_class: Armor class components and derived total.
        base_attack_bonus: Base attack bonus.
        saving_throws: Base saving throws.
        skills: Skill entries in sheet order.
        feats: Feats in insertion order.
        equipment: Carried items in insertion order.
        attacks: Attacks in insertion order.
        spells: Spells in insertion order.
        experience: Current experience and the total needed to level.
        created_at: When the record was created.
        updated_at: When the record was last saved.
    """

    id: str = Field(default_factory=new_character_id)
    name: str = "New Character"
    player_name: str = ""

    # Basic info
    race: str = Race.HUMAN.value
    character_class: str = CharacterClass.FIGHTER.value
    level: int = Field(default=1, ge=1)
    alignment: str = Alignment.TRUE_NEUTRAL.value
    deity: str = ""
    size: str = Size.MEDIUM.value
    age: int = 25
    gender: str = ""
    height: str = ""
    weight: str = ""
    eyes: str = ""
    hair: str = ""
    skin: str = ""

    # Abilities
    ability_scores: AbilityScores = Field(default_factory=AbilityScores)

    # Combat
    hit_points: HitPoints = Field(default_factory=HitPoints)
    armor_class: ArmorClass = Field(default_factory=ArmorClass)
    base_attack_bonus: int = 1
    spell_resistance: int = 0
    saving_throws: SavingThrows = Field(
        default_factory=lambda: SavingThrows(fortitude=2, reflex=0, will=0)
    )

    # Skills, feats, gear
    skills: list[Skill] = Field(default_factory=default_skills)
    feats: list[Feat] = Field(default_factory=list)
    equipment: list[Equipment] = Field(default_factory=list)
    money: Money = Field(default_factory=Money)
    attacks: list[Attack] = Field(default_factory=list)

    # Magic
    spells: list[Spell] = Field(default_factory=list)
    spells_per_day: dict[int, int] = Field(default_factory=dict)
    spells_known: dict[int, int] = Field(default_factory=dict)

    experience: Experience = Field(default_factory=Experience)
    notes: str = ""

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="after")
    def check_unique_skills(self) -> Character:
        """Reject a skill list that names the same skill twice."""
        seen: set[str] = set()
        for skill in self.skills:
            if skill.name in seen:
                raise ValueError(f"Duplicate skill: {skill.name}")
            seen.add(skill.name)
        return self

    @computed_field(alias="abilityModifiers")  # type: ignore[prop-decorator]
    @property
    def ability_modifiers(self) -> AbilityModifiers:
        """Ability modifiers for the current ability scores."""
        return AbilityModifiers.from_scores(self.ability_scores)

    def set_ability_score(self, ability: Ability, value: int) -> None:
        """Replace one ability score."""
        self.ability_scores = self.ability_scores.with_score(ability, value)

    # -------------------------------------------------------------------------
    # Skills
    # -------------------------------------------------------------------------

    def get_skill(self, name: str) -> Skill | None:
        """Find a skill by name."""
        for skill in self.skills:
            if skill.name == name:
                return skill
        return None

    def skill_total(self, name: str) -> int:
        """Calculate the total modifier for a named skill.

        Raises:
            ValidationError: If the character has no such skill.
        """
        skill = self.get_skill(name)
        if skill is None:
            raise ValidationError("Unknown skill", field_name="skills", invalid_value=name)
        return skill_total(skill, self.ability_modifiers)

    # -------------------------------------------------------------------------
    # Spells
    # -------------------------------------------------------------------------

    def add_spell(self, spell: Spell) -> None:
        """Append a spell to the spell list.

        Raises:
            ValidationError: If the spell has no name.
        """
        if not spell.name.strip():
            raise ValidationError("Please enter a spell name", field_name="name")
        self.spells.append(spell)

    def remove_spell(self, index: int) -> Spell:
        """Remove the spell in a slot and return it."""
        self._check_spell_index(index)
        return self.spells.pop(index)

    def toggle_spell_prepared(self, index: int) -> Spell:
        """Flip the prepared flag of the spell in a slot.

        Spells are addressed by slot index because identical entries may
        appear more than once in the list.
        """
        self._check_spell_index(index)
        spell = self.spells[index]
        spell.prepared = not spell.prepared
        return spell

    def _check_spell_index(self, index: int) -> None:
        if not 0 <= index < len(self.spells):
            raise ValidationError("No spell in that slot", field_name="spells", invalid_value=index)

    # -------------------------------------------------------------------------
    # Projections
    # -------------------------------------------------------------------------

    def to_profile(self, last_played: datetime | None = None) -> CharacterProfile:
        """Build the listing profile for this character."""
        return CharacterProfile(
            id=self.id,
            name=self.name,
            level=self.level,
            race=self.race,
            character_class=self.character_class,
            last_played=last_played or self.updated_at,
        )


def create_default_character() -> Character:
    """Create the all-default character used by manual creation."""
    return Character()


__all__ = [
    "SheetModel",
    "new_character_id",
    "AbilityScores",
    "AbilityModifiers",
    "STANDARD_SKILLS",
    "Skill",
    "default_skills",
    "SavingThrows",
    "HitPoints",
    "ArmorClass",
    "Feat",
    "Equipment",
    "Attack",
    "Spell",
    "Money",
    "Experience",
    "CharacterProfile",
    "Character",
    "create_default_character",
]
