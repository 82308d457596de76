"""Skill check schemas."""

from __future__ import annotations
from enum import Enum
from pydantic import BaseModel


class Degree(str, Enum):
    """Degree of success of a check, worst to best."""
    CRITICAL_FAILURE = "critical_failure"
    FAILURE = "failure"
    SUCCESS = "success"
    CRITICAL_SUCCESS = "critical_success"

    def step_up(self) -> "Degree":
        return DEGREE_ORDER[min(DEGREE_ORDER.index(self) + 1, 3)]

    def step_down(self) -> "Degree":
        return DEGREE_ORDER[max(DEGREE_ORDER.index(self) - 1, 0)]

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()

    @property
    def succeeded(self) -> bool:
        return self in (Degree.SUCCESS, Degree.CRITICAL_SUCCESS)


DEGREE_ORDER = [
    Degree.CRITICAL_FAILURE,
    Degree.FAILURE,
    Degree.SUCCESS,
    Degree.CRITICAL_SUCCESS,
]


class ModifierBreakdown(BaseModel):
    """Every component that makes up a check modifier."""
    skill: str
    ability_mod: int = 0
    proficiency_bonus: int = 0
    leader_bonus: int = 0
    item_bonus: int = 0
    circumstance_bonus: int = 0
    circumstance_penalty: int = 0
    unrest_penalty: int = 0

    @property
    def total(self) -> int:
        return (
            self.ability_mod
            + self.proficiency_bonus
            + self.leader_bonus
            + self.item_bonus
            + self.circumstance_bonus
            - self.circumstance_penalty
            - self.unrest_penalty
        )

    def describe(self) -> str:
        parts = [f"ability {self.ability_mod:+d}"]
        if self.proficiency_bonus:
            parts.append(f"proficiency +{self.proficiency_bonus}")
        if self.leader_bonus:
            parts.append(f"leader +{self.leader_bonus}")
        if self.item_bonus:
            parts.append(f"item +{self.item_bonus}")
        if self.circumstance_bonus:
            parts.append(f"circumstance +{self.circumstance_bonus}")
        if self.circumstance_penalty:
            parts.append(f"circumstance -{self.circumstance_penalty}")
        if self.unrest_penalty:
            parts.append(f"unrest -{self.unrest_penalty}")
        return f"{self.skill} {self.total:+d} ({', '.join(parts)})"


class CheckResult(BaseModel):
    """Outcome of a single d20 check."""
    roll: int
    modifier: int
    total: int
    dc: int
    degree: Degree
    numeric_degree: Degree  # Before the natural 20 / natural 1 adjustment

    @property
    def natural(self) -> int:
        return self.roll

    def summary(self) -> str:
        return f"d20 {self.roll} {self.modifier:+d} = {self.total} vs DC {self.dc}: {self.degree.label}"
