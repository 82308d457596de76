"""Turn bookkeeping schemas - phase flags, activity counters and accumulated deltas."""

from __future__ import annotations
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field


class Phase(str, Enum):
    """Phases of a kingdom turn, in order."""
    UPKEEP = "upkeep"
    COMMERCE = "commerce"
    ACTIVITY = "activity"
    EVENT = "event"


class KingdomDelta(BaseModel):
    """Net change to a kingdom produced by one effect, one operation or one turn."""
    rp: int = 0
    xp: int = 0
    fame: int = 0
    infamy: int = 0
    unrest: int = 0
    ruin: dict[str, int] = Field(default_factory=dict)
    commodities: dict[str, int] = Field(default_factory=dict)
    hexes_claimed: list[str] = Field(default_factory=list)
    hexes_abandoned: list[str] = Field(default_factory=list)
    hexes_explored: list[str] = Field(default_factory=list)
    structures_built: list[str] = Field(default_factory=list)
    structures_demolished: list[str] = Field(default_factory=list)
    settlements_founded: list[str] = Field(default_factory=list)

    def __add__(self, other: "KingdomDelta") -> "KingdomDelta":
        def add_maps(a: dict[str, int], b: dict[str, int]) -> dict[str, int]:
            merged = dict(a)
            for key, value in b.items():
                merged[key] = merged.get(key, 0) + value
            return {k: v for k, v in merged.items() if v != 0}

        return KingdomDelta(
            rp=self.rp + other.rp,
            xp=self.xp + other.xp,
            fame=self.fame + other.fame,
            infamy=self.infamy + other.infamy,
            unrest=self.unrest + other.unrest,
            ruin=add_maps(self.ruin, other.ruin),
            commodities=add_maps(self.commodities, other.commodities),
            hexes_claimed=sorted(self.hexes_claimed + other.hexes_claimed),
            hexes_abandoned=sorted(self.hexes_abandoned + other.hexes_abandoned),
            hexes_explored=sorted(self.hexes_explored + other.hexes_explored),
            structures_built=sorted(self.structures_built + other.structures_built),
            structures_demolished=sorted(self.structures_demolished + other.structures_demolished),
            settlements_founded=sorted(self.settlements_founded + other.settlements_founded),
        )

    def describe(self) -> list[str]:
        """Human-readable lines for every non-zero part of the delta."""
        lines = []
        for label, value in (
            ("RP", self.rp), ("XP", self.xp), ("Fame", self.fame),
            ("Infamy", self.infamy), ("Unrest", self.unrest),
        ):
            if value:
                lines.append(f"{label} {value:+d}")
        for ruin, value in self.ruin.items():
            lines.append(f"{ruin} {value:+d}")
        for commodity, value in self.commodities.items():
            lines.append(f"{commodity} {value:+d}")
        for label, items in (
            ("Claimed", self.hexes_claimed),
            ("Abandoned", self.hexes_abandoned),
            ("Explored", self.hexes_explored),
            ("Built", self.structures_built),
            ("Demolished", self.structures_demolished),
            ("Founded", self.settlements_founded),
        ):
            if items:
                lines.append(f"{label}: {', '.join(items)}")
        return lines


class TurnState(BaseModel):
    """Progress through the current turn."""
    phase: Phase = Phase.UPKEEP

    # Completion flags - set once, never cleared until the turn ends
    upkeep_complete: bool = False
    commerce_complete: bool = False
    activities_complete: bool = False
    event_complete: bool = False

    # Activity slots
    leadership_used: int = 0
    region_used: int = 0
    civic_used: int = 0
    max_leadership: int = 2
    max_region: int = 3
    max_civic: int = 1

    activity_log: list[str] = Field(default_factory=list)
    event_names: list[str] = Field(default_factory=list)
    pending_specials: list[str] = Field(default_factory=list)
    event_check_modifier: int = 0  # From prognostication, consumed by the next event check

    deltas: KingdomDelta = Field(default_factory=KingdomDelta)

    # Phase details for display
    resource_dice: list[int] = Field(default_factory=list)
    taxes_collected: Optional[int] = None
    trades: list[dict[str, Any]] = Field(default_factory=list)
    event_details: Optional[dict[str, Any]] = None


class TurnHistoryEntry(BaseModel):
    """Frozen record of everything a completed turn changed."""
    model_config = {"frozen": True}

    turn: int
    month: str
    year: int
    delta: KingdomDelta
    activities: list[str] = Field(default_factory=list)
    events: list[str] = Field(default_factory=list)

    def summary(self) -> str:
        changes = "; ".join(self.delta.describe()) or "no changes"
        return f"Turn {self.turn} ({self.month} {self.year}): {changes}"
