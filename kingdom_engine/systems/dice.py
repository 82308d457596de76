"""Dice - the only source of randomness in the engine.

Every roll goes through a roller instance so that tests and replays can
fix outcomes: ``DiceRoller`` wraps a seedable ``random.Random`` and
``ScriptedDiceRoller`` hands out pre-rolled values in order.
"""

from __future__ import annotations
import logging
import random
import re
from typing import Iterable, Optional, Sequence, TypeVar

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

T = TypeVar("T")

DICE_PATTERN = re.compile(r"^\s*([+-])?\s*(\d*)d(\d+)\s*(?:([+-])\s*(\d+))?\s*$", re.IGNORECASE)


class DiceResult(BaseModel):
    """A single resolved roll."""
    notation: str
    rolls: list[int] = Field(default_factory=list)
    modifier: int = 0
    total: int
    reason: str = ""

    def __str__(self) -> str:
        return f"{self.notation} -> {self.rolls} = {self.total}"


class DiceExhaustedError(RuntimeError):
    """A scripted roller ran out of values."""


def parse_notation(notation: str) -> tuple[int, int, int, int]:
    """Split dice notation into (sign, count, sides, modifier).

    Accepts forms like ``1d20``, ``d6``, ``2d6+3`` and ``-1d4``.
    """
    match = DICE_PATTERN.match(notation)
    if not match:
        raise ValueError(f"Invalid dice notation: {notation!r}")
    sign_text, count_text, sides_text, mod_sign, mod_text = match.groups()
    count = int(count_text) if count_text else 1
    sides = int(sides_text)
    if sides < 1:
        raise ValueError(f"Invalid die size in {notation!r}")
    modifier = int(mod_text) if mod_text else 0
    if mod_sign == "-":
        modifier = -modifier
    sign = -1 if sign_text == "-" else 1
    return sign, count, sides, modifier


class DiceRoller:
    """Seedable dice roller with a log of every roll made."""

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self.seed = seed
        self._rng = rng or random.Random(seed)
        self.roll_log: list[DiceResult] = []

    def set_seed(self, seed: int) -> None:
        """Reset the underlying generator for reproducible rolls."""
        self.seed = seed
        self._rng.seed(seed)

    def die(self, sides: int) -> int:
        """Roll one die."""
        return self._rng.randint(1, sides)

    def roll(self, notation: str, reason: str = "") -> DiceResult:
        """Roll dice in standard notation (``2d6``, ``1d20+5``, ``-1d4``)."""
        sign, count, sides, modifier = parse_notation(notation)
        rolls = [self.die(sides) for _ in range(count)]
        total = sign * sum(rolls) + modifier
        result = DiceResult(notation=notation, rolls=rolls, modifier=modifier, total=total, reason=reason)
        self.roll_log.append(result)
        logger.debug("Rolled %s for %s", result, reason or "unspecified")
        return result

    def roll_many(self, count: int, sides: int, reason: str = "") -> list[int]:
        """Roll ``count`` dice of one size and return the individual results."""
        if count <= 0:
            return []
        return self.roll(f"{count}d{sides}", reason).rolls

    def d20(self, reason: str = "") -> int:
        return self.roll("1d20", reason).total

    def weighted_choice(self, items: Sequence[T], weights: Iterable[int], reason: str = "") -> T:
        """Pick one item with probability proportional to its weight."""
        weights = list(weights)
        total = sum(weights)
        if not items or total <= 0:
            raise ValueError("weighted_choice needs at least one positively weighted item")
        point = self.roll(f"1d{total}", reason).total
        running = 0
        for item, weight in zip(items, weights):
            running += weight
            if point <= running:
                return item
        return items[-1]

    def clear_log(self) -> None:
        self.roll_log = []


class ScriptedDiceRoller(DiceRoller):
    """Dice roller that returns pre-rolled values in order.

    Each die consumes one value. Values larger than the die are clamped to
    its size. Once the script runs out, rolls come from ``fallback`` if one
    was given, otherwise ``DiceExhaustedError`` is raised.
    """

    def __init__(self, values: Iterable[int], fallback: Optional[DiceRoller] = None):
        super().__init__(seed=0)
        self._values = list(values)
        self._fallback = fallback

    @property
    def remaining(self) -> int:
        return len(self._values)

    def push(self, *values: int) -> None:
        """Queue more scripted values."""
        self._values.extend(values)

    def die(self, sides: int) -> int:
        if self._values:
            return max(1, min(sides, self._values.pop(0)))
        if self._fallback is not None:
            return self._fallback.die(sides)
        raise DiceExhaustedError(f"No scripted value left for a d{sides}")
