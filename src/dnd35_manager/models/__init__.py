"""Pydantic V2 schemas and rules for D&D 3.5e characters.

Submodules:
    enums: Enumeration types (Ability, CharacterClass, Alignment, ...)
    rules: Derived-statistic calculations (modifiers, HP, BAB, saves, XP)
    character: The Character aggregate and its owned records
    serialization: JSON export and import

Example:
    >>> from dnd35_manager.models import Ability, create_default_character
    >>> character = create_default_character()
    >>> character.set_ability_score(Ability.CON, 14)
    >>> character.ability_modifiers.constitution
    2
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from dnd35_manager.models.enums import (
    CLASS_TRAITS,
    UNKNOWN_CLASS_TRAITS,
    Ability,
    Alignment,
    BabProgression,
    CharacterClass,
    ClassTraits,
    CreationMode,
    Race,
    SaveType,
    Size,
    SpellSchool,
)

# =============================================================================
# Rules
# =============================================================================
from dnd35_manager.models.rules import (
    EXPERIENCE_TABLE,
    ability_modifier,
    armor_class_total,
    base_attack_bonus,
    class_traits,
    experience_for_level,
    experience_needed,
    hit_die,
    hit_points,
    max_spell_level,
    resolve_class,
    saving_throws,
    skill_total,
)

# =============================================================================
# Character
# =============================================================================
from dnd35_manager.models.character import (
    STANDARD_SKILLS,
    AbilityModifiers,
    AbilityScores,
    ArmorClass,
    Attack,
    Character,
    CharacterProfile,
    Equipment,
    Experience,
    Feat,
    HitPoints,
    Money,
    SavingThrows,
    Skill,
    Spell,
    create_default_character,
    default_skills,
    new_character_id,
)

# =============================================================================
# Serialization
# =============================================================================
from dnd35_manager.models.serialization import (
    export_character,
    import_character,
    parse_character,
)


__all__ = [
    # Enumerations
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
    # Rules
    "EXPERIENCE_TABLE",
    "ability_modifier",
    "armor_class_total",
    "base_attack_bonus",
    "class_traits",
    "experience_for_level",
    "experience_needed",
    "hit_die",
    "hit_points",
    "max_spell_level",
    "resolve_class",
    "saving_throws",
    "skill_total",
    # Character
    "STANDARD_SKILLS",
    "AbilityScores",
    "AbilityModifiers",
    "ArmorClass",
    "Attack",
    "Character",
    "CharacterProfile",
    "Equipment",
    "Experience",
    "Feat",
    "HitPoints",
    "Money",
    "SavingThrows",
    "Skill",
    "Spell",
    "create_default_character",
    "default_skills",
    "new_character_id",
    # Serialization
    "export_character",
    "import_character",
    "parse_character",
]
