"""Dice rolling for D&D 3.5e.

This module covers the three kinds of rolls a character sheet needs:

- uniform single dice and dice pools (ability generation uses 4d6,
  drop the lowest),
- damage strings in ``NdM[+K|-K]`` form, rolled with a readable
  breakdown such as ``2d6(4, 5) +3``,
- d20 checks with a flat bonus, keeping the natural roll so criticals and
  fumbles can be spotted.

Free-form dice notation (``4d6kh3``, ``1d20+1d4+2``) is delegated to the
d20 library. Every other roll draws from an injectable random source so
tests can script the dice.
"""

from __future__ import annotations

import random
import re
from collections import deque
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, TypeVar

import d20

from dnd35_manager.core.constants import (
    ABILITY_ROLL_DICE,
    ABILITY_ROLL_KEEP,
    D20_SIDES,
    MAX_DICE_PER_ROLL,
    MAX_DIE_SIDES,
    ROLL_HISTORY_SIZE,
)
from dnd35_manager.core.exceptions import DiceRollError
from dnd35_manager.core.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")

DAMAGE_PATTERN = re.compile(r"(\d+)d(\d+)([+-]\d+)?", re.IGNORECASE)
"""Damage notation. Matched anywhere in the string, so '1d8+2 slashing' parses."""


class RandomSource(Protocol):
    """The subset of ``random.Random`` the dice engine draws from."""

    def randint(self, a: int, b: int) -> int: ...

    def choice(self, seq: Sequence[T]) -> T: ...

    def sample(self, population: Sequence[T], k: int) -> list[T]: ...


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class DiceRoll:
    """The outcome of a labelled roll.

    Attributes:
        label: What was rolled (e.g., 'Fortitude Save', 'Longsword Damage').
        result: Final total.
        breakdown: Human-readable account of the dice and modifiers.
        timestamp: When the roll was made.
        natural: The face of the d20 for checks, None for other rolls.
    """

    label: str
    result: int
    breakdown: str
    timestamp: datetime = field(default_factory=datetime.now)
    natural: int | None = None

    @property
    def is_critical(self) -> bool:
        """Whether the d20 came up a natural 20."""
        return self.natural == D20_SIDES

    @property
    def is_fumble(self) -> bool:
        """Whether the d20 came up a natural 1."""
        return self.natural == 1


@dataclass(frozen=True)
class DamageExpression:
    """A parsed ``NdM[+K|-K]`` damage string.

    Attributes:
        count: Number of dice.
        sides: Sides per die.
        modifier: Flat modifier, 0 when absent.
    """

    count: int
    sides: int
    modifier: int = 0

    @property
    def notation(self) -> str:
        """Canonical notation, e.g. '2d6+3'."""
        if self.modifier:
            return f"{self.count}d{self.sides}{self.modifier:+d}"
        return f"{self.count}d{self.sides}"


def parse_damage(expression: str) -> DamageExpression:
    """Parse a damage string.

    Args:
        expression: Damage notation such as '1d8', '2d6+3' or '1d4-1'.

    Returns:
        The parsed expression.

    Raises:
        DiceRollError: If no ``NdM`` pattern is present, or the dice are
            too many or too large to roll.
    """
    match = DAMAGE_PATTERN.search(expression or "")
    if match is None:
        raise DiceRollError("Invalid damage format", expression=expression)
    count, sides, modifier = match.groups()
    damage = DamageExpression(
        count=int(count),
        sides=int(sides),
        modifier=int(modifier) if modifier else 0,
    )
    _check_dice_size(damage.count, damage.sides)
    return damage


def _check_dice_size(count: int, sides: int) -> None:
    if count > MAX_DICE_PER_ROLL or sides > MAX_DIE_SIDES:
        raise DiceRollError(
            f"Rolls are limited to {MAX_DICE_PER_ROLL} dice of up to {MAX_DIE_SIDES} sides",
            expression=f"{count}d{sides}",
        )


def format_bonus(bonus: int) -> str:
    """Format a flat bonus for a breakdown, e.g. '+ 3' or '- 1'."""
    sign = "-" if bonus < 0 else "+"
    return f"{sign} {abs(bonus)}"


# =============================================================================
# Roller
# =============================================================================


class DiceRoller:
    """Dice rolling with D&D 3.5e conventions.

    Example:
        >>> roller = DiceRoller(seed=42)
        >>> roll = roller.roll_damage("2d6+3", label="Greatsword Damage")
        >>> roll.breakdown  # doctest: +SKIP
        '2d6(4, 5) +3'
    """

    def __init__(self, rng: RandomSource | None = None, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            rng: Random source to draw from. Defaults to a private
                ``random.Random``.
            seed: Seed for the default random source, for reproducible rolls.
        """
        self._rng: RandomSource = rng if rng is not None else random.Random(seed)
        logger.debug("DiceRoller initialized", seed=seed, scripted=rng is not None)

    @property
    def rng(self) -> RandomSource:
        """The random source used for rolls and random choices."""
        return self._rng

    def roll_die(self, sides: int) -> int:
        """Roll a single die.

        Raises:
            DiceRollError: If the die has fewer than one side.
        """
        if sides < 1:
            raise DiceRollError("A die needs at least one side", expression=f"1d{sides}")
        return self._rng.randint(1, sides)

    def roll_dice(self, count: int, sides: int) -> list[int]:
        """Roll several dice, returning the faces in the order rolled.

        Raises:
            DiceRollError: If count is negative or too large, or the die
                is invalid.
        """
        if count < 0:
            raise DiceRollError(
                "Cannot roll a negative number of dice",
                expression=f"{count}d{sides}",
            )
        _check_dice_size(count, sides)
        return [self.roll_die(sides) for _ in range(count)]

    def roll_ability_score(self) -> int:
        """Roll 4d6 and sum the highest three."""
        rolls = self.roll_dice(ABILITY_ROLL_DICE, 6)
        return sum(sorted(rolls, reverse=True)[:ABILITY_ROLL_KEEP])

    def roll_damage(self, expression: str, *, label: str = "Damage") -> DiceRoll:
        """Roll a damage string.

        Args:
            expression: Damage notation, e.g. '2d6+3'.
            label: Label for the resulting roll.

        Returns:
            The roll, with a breakdown like '2d6(4, 5) +3'.

        Raises:
            DiceRollError: If the expression is malformed.
        """
        damage = parse_damage(expression)
        rolls = self.roll_dice(damage.count, damage.sides)
        total = sum(rolls) + damage.modifier

        breakdown = f"{damage.count}d{damage.sides}({', '.join(str(r) for r in rolls)})"
        if damage.modifier > 0:
            breakdown += f" +{damage.modifier}"
        elif damage.modifier < 0:
            breakdown += f" {damage.modifier}"

        logger.debug("Damage rolled", label=label, expression=expression, total=total)
        return DiceRoll(label=label, result=total, breakdown=breakdown)

    def roll_d20(self, label: str, bonus: int = 0) -> DiceRoll:
        """Roll a d20 check with a flat bonus.

        Args:
            label: Label for the roll (e.g., 'Strength Check').
            bonus: Total bonus added to the die.

        Returns:
            The roll, with a breakdown like '1d20(14) + 3'.
        """
        natural = self.roll_die(D20_SIDES)
        total = natural + bonus
        logger.debug("Check rolled", label=label, natural=natural, bonus=bonus, total=total)
        return DiceRoll(
            label=label,
            result=total,
            breakdown=f"1d20({natural}) {format_bonus(bonus)}",
            natural=natural,
        )

    def roll_expression(self, expression: str, *, label: str | None = None) -> DiceRoll:
        """Roll free-form dice notation through the d20 library.

        Args:
            expression: Any notation d20 understands (e.g., '4d6kh3').
            label: Label for the roll, defaults to the expression itself.

        Raises:
            DiceRollError: If the expression is empty or invalid.
        """
        if not expression or not expression.strip():
            raise DiceRollError("Empty dice expression", expression=expression)

        try:
            result = d20.roll(expression)
        except d20.RollError as exc:
            raise DiceRollError(f"Invalid dice expression: {exc}", expression=expression) from exc

        natural = self._natural_d20(result.expr)
        logger.debug("Expression rolled", expression=expression, total=result.total)
        return DiceRoll(
            label=label or expression,
            result=result.total,
            breakdown=result.result,
            natural=natural,
        )

    @staticmethod
    def _natural_d20(expr: Any) -> int | None:
        """Find the kept face of a lone d20 in a d20 expression tree."""
        faces: list[int] = []

        def traverse(node: Any) -> None:
            if isinstance(node, d20.Dice) and node.size == D20_SIDES:
                faces.extend(die.number for die in node.keptset)
            elif hasattr(node, "children"):
                for child in node.children:
                    traverse(child)

        traverse(expr)
        return faces[0] if len(faces) == 1 else None


# =============================================================================
# History
# =============================================================================


class RollHistory:
    """Bounded, most-recent-first list of rolls.

    History lives in memory only and is never persisted.
    """

    def __init__(self, max_size: int = ROLL_HISTORY_SIZE) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._rolls: deque[DiceRoll] = deque(maxlen=max_size)

    @property
    def max_size(self) -> int:
        return self._rolls.maxlen or 0

    @property
    def latest(self) -> DiceRoll | None:
        """The most recent roll, if any."""
        return self._rolls[0] if self._rolls else None

    def add(self, roll: DiceRoll) -> DiceRoll:
        """Record a roll, evicting the oldest when full."""
        self._rolls.appendleft(roll)
        return roll

    def clear(self) -> None:
        self._rolls.clear()

    def to_list(self) -> list[DiceRoll]:
        return list(self._rolls)

    def __iter__(self) -> Iterator[DiceRoll]:
        return iter(self._rolls)

    def __len__(self) -> int:
        return len(self._rolls)


__all__ = [
    "RandomSource",
    "DiceRoll",
    "DamageExpression",
    "DAMAGE_PATTERN",
    "parse_damage",
    "format_bonus",
    "DiceRoller",
    "RollHistory",
]
