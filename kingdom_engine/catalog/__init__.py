"""Read-only reference catalogs consulted by the engine."""

from __future__ import annotations
import logging
from functools import lru_cache
from typing import Iterable, Optional

from kingdom_engine.models.kingdom import Ability
from kingdom_engine.models.results import CatalogError
from .activities import ACTIVITIES, ActivityCategory, ActivityDefinition, Prerequisite
from .events import EVENTS, EventDefinition
from .feats import FEATS, FeatDefinition
from .milestones import MILESTONES, MilestoneDefinition
from .reference import (
    CONTROL_DC_BASE,
    SETTLEMENT_TIERS,
    SIZE_TIERS,
    SKILL_ABILITIES,
    SettlementTier,
    SizeTier,
)
from .structures import STRUCTURES, StructureDefinition

logger = logging.getLogger(__name__)


class Catalog:
    """Lookup facade over the static activity, structure, event, feat and milestone tables.

    ``strict`` decides what happens when kingdom state references an id the
    catalog does not know: raise ``CatalogError`` (development) or log a
    warning and carry on without it (production).
    """

    def __init__(
        self,
        activities: Iterable[ActivityDefinition] = (),
        structures: Iterable[StructureDefinition] = (),
        events: Iterable[EventDefinition] = (),
        feats: Iterable[FeatDefinition] = (),
        milestones: Iterable[MilestoneDefinition] = (),
        strict: bool = True,
    ):
        self.activities = {a.id: a for a in activities}
        self.structures = {s.id: s for s in structures}
        self.events = list(events)
        self.feats = {f.id: f for f in feats}
        self.milestones = list(milestones)
        self.strict = strict

    def configured(self, strict: bool) -> "Catalog":
        """Same tables, different corruption policy."""
        return Catalog(
            activities=self.activities.values(),
            structures=self.structures.values(),
            events=self.events,
            feats=self.feats.values(),
            milestones=self.milestones,
            strict=strict,
        )

    def corrupted(self, message: str) -> None:
        """Report a dangling catalog reference."""
        if self.strict:
            raise CatalogError(message)
        logger.warning("Catalog corruption ignored: %s", message)

    # Lookups

    def activity(self, activity_id: str) -> Optional[ActivityDefinition]:
        return self.activities.get(activity_id)

    def structure(self, structure_id: str) -> Optional[StructureDefinition]:
        return self.structures.get(structure_id)

    def feat(self, feat_id: str) -> Optional[FeatDefinition]:
        return self.feats.get(feat_id)

    def event(self, event_id: str) -> Optional[EventDefinition]:
        for event in self.events:
            if event.id == event_id:
                return event
        return None

    def activities_in(self, category: ActivityCategory) -> list[ActivityDefinition]:
        return [a for a in self.activities.values() if a.category == category]

    # Rules tables

    @staticmethod
    def skill_ability(skill: str) -> Optional[Ability]:
        return SKILL_ABILITIES.get(skill)

    @staticmethod
    def skills() -> list[str]:
        return list(SKILL_ABILITIES)

    @staticmethod
    def size_tier(hex_count: int) -> SizeTier:
        """Kingdom size tier for a claimed hex count."""
        for tier in reversed(SIZE_TIERS):
            if hex_count >= tier.min_hexes:
                return tier
        return SIZE_TIERS[0]

    @staticmethod
    def settlement_tier(occupied_blocks: int) -> SettlementTier:
        for tier in reversed(SETTLEMENT_TIERS):
            if occupied_blocks >= tier.min_blocks:
                return tier
        return SETTLEMENT_TIERS[0]

    def control_dc(self, level: int, hex_count: int = 0) -> int:
        """Base DC for kingdom checks: 14 + level + size modifier."""
        return CONTROL_DC_BASE + level + self.size_tier(hex_count).dc_modifier


@lru_cache(maxsize=1)
def default_catalog() -> Catalog:
    """The built-in catalog, shared process-wide."""
    return Catalog(
        activities=ACTIVITIES,
        structures=STRUCTURES,
        events=EVENTS,
        feats=FEATS,
        milestones=MILESTONES,
    )


__all__ = [
    "Catalog",
    "default_catalog",
    "ActivityCategory",
    "ActivityDefinition",
    "Prerequisite",
    "EventDefinition",
    "FeatDefinition",
    "MilestoneDefinition",
    "StructureDefinition",
    "SizeTier",
    "SettlementTier",
]
