"""Activity catalog - leadership, region and civic activities with their outcome tables."""

from __future__ import annotations
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from kingdom_engine.models.checks import Degree
from kingdom_engine.models.effects import (
    Effect,
    AbandonHexEffect,
    AssignLeaderEffect,
    BuildStructureEffect,
    ClaimHexEffect,
    ClearHexEffect,
    CommodityEffect,
    DemolishStructureEffect,
    ExploreHexEffect,
    FameEffect,
    FortifyEffect,
    FoundSettlementEffect,
    RefundEffect,
    RelocateCapitalEffect,
    ReputationEffect,
    RoadEffect,
    RuinEffect,
    SpecialEffect,
    UnrestEffect,
    WorkSiteEffect,
    XPEffect,
)
from kingdom_engine.models.kingdom import Commodity, RuinType, WorkSiteType

CS = Degree.CRITICAL_SUCCESS
S = Degree.SUCCESS
F = Degree.FAILURE
CF = Degree.CRITICAL_FAILURE


class ActivityCategory(str, Enum):
    """Which per-turn activity allowance an activity consumes."""
    LEADERSHIP = "leadership"
    REGION = "region"
    CIVIC = "civic"


class Prerequisite(str, Enum):
    """Predicates an activity's inputs must satisfy before the check is rolled."""
    ADJACENT_EXPLORED_HEX = "adjacent_explored_hex"
    ADJACENT_UNEXPLORED_HEX = "adjacent_unexplored_hex"
    OWNED_HEX = "owned_hex"
    OWNED_HEX_NO_SETTLEMENT = "owned_hex_no_settlement"
    FARMABLE_HEX = "farmable_hex"
    WORKABLE_HEX = "workable_hex"
    HEX_WITH_FARM = "hex_with_farm"
    WATER_ADJACENT_HEX = "water_adjacent_hex"
    MULTIPLE_SETTLEMENTS = "multiple_settlements"
    SETTLEMENT_HAS_ROOM = "settlement_has_room"
    SETTLEMENT_HAS_STRUCTURE = "settlement_has_structure"


class ActivityDefinition(BaseModel):
    """A kingdom activity: who may perform it, what it costs, and what each degree does."""
    id: str
    name: str
    category: ActivityCategory
    skill: Optional[str] = None  # None: always succeeds
    rp_cost: int = 0
    cost_from_structure: bool = False  # Cost and skill come from the chosen structure
    dc_modifier: int = 0
    dc: Optional[int] = None  # Absolute DC, replaces the control DC
    required_inputs: list[str] = Field(default_factory=list)
    prerequisite: Optional[Prerequisite] = None
    outcomes: dict[Degree, list[Effect]] = Field(default_factory=dict)
    description: str = ""

    def effects_for(self, degree: Degree) -> list[Effect]:
        return self.outcomes.get(degree, [])


ACTIVITIES: list[ActivityDefinition] = [
    # Leadership activities
    ActivityDefinition(
        id="celebrate-holiday",
        name="Celebrate Holiday",
        category=ActivityCategory.LEADERSHIP,
        skill="Folklore",
        rp_cost=1,
        description="Hold a festival to lift the people's spirits.",
        outcomes={
            CS: [UnrestEffect(amount=-2), FameEffect(amount=1)],
            S: [UnrestEffect(amount=-1)],
            CF: [UnrestEffect(amount=1)],
        },
    ),
    ActivityDefinition(
        id="craft-luxuries",
        name="Craft Luxuries",
        category=ActivityCategory.LEADERSHIP,
        skill="Industry",
        rp_cost=5,
        description="Commission artisans to produce luxury goods.",
        outcomes={
            CS: [CommodityEffect(commodity=Commodity.LUXURIES, amount=2)],
            S: [CommodityEffect(commodity=Commodity.LUXURIES, amount=1)],
            CF: [RuinEffect(ruin=RuinType.DECAY, amount=1)],
        },
    ),
    ActivityDefinition(
        id="creative-solution",
        name="Creative Solution",
        category=ActivityCategory.LEADERSHIP,
        skill="Scholarship",
        description="Task scholars with solving a problem facing the kingdom.",
        outcomes={
            CS: [
                UnrestEffect(amount=-1),
                SpecialEffect(key="creative-solution-reroll", description="Reroll one failed check this turn"),
            ],
            S: [SpecialEffect(key="creative-solution-reroll", description="Reroll one failed check this turn")],
            CF: [UnrestEffect(amount=1)],
        },
    ),
    ActivityDefinition(
        id="hire-adventurers",
        name="Hire Adventurers",
        category=ActivityCategory.LEADERSHIP,
        skill="Warfare",
        rp_cost=2,
        description="Pay adventurers to deal with a threat.",
        outcomes={
            CS: [
                UnrestEffect(amount=-1),
                SpecialEffect(key="adventurers-resolve-threat", description="A threat is dealt with"),
            ],
            S: [SpecialEffect(key="adventurers-resolve-threat", description="A threat is dealt with")],
            CF: [UnrestEffect(amount=1)],
        },
    ),
    ActivityDefinition(
        id="improve-lifestyle",
        name="Improve Lifestyle",
        category=ActivityCategory.LEADERSHIP,
        skill="Politics",
        description="Spend on public works that make daily life easier.",
        outcomes={
            CS: [UnrestEffect(amount=-2)],
            S: [UnrestEffect(amount=-1)],
            CF: [UnrestEffect(amount=1)],
        },
    ),
    ActivityDefinition(
        id="new-leadership",
        name="New Leadership",
        category=ActivityCategory.LEADERSHIP,
        skill="Politics",
        required_inputs=["role", "leader_name"],
        description="Appoint a leader to a role.",
        outcomes={
            CS: [AssignLeaderEffect(invested=True)],
            S: [AssignLeaderEffect()],
            CF: [UnrestEffect(amount=1)],
        },
    ),
    ActivityDefinition(
        id="prognostication",
        name="Prognostication",
        category=ActivityCategory.LEADERSHIP,
        skill="Magic",
        description="Consult seers about the coming month.",
        outcomes={
            CS: [SpecialEffect(key="forewarning-detailed", description="+2 to the next event check")],
            S: [SpecialEffect(key="forewarning", description="+1 to the next event check")],
            CF: [SpecialEffect(key="false-insight", description="-1 to the next event check")],
        },
    ),
    ActivityDefinition(
        id="provide-care",
        name="Provide Care",
        category=ActivityCategory.LEADERSHIP,
        skill="Defense",
        description="Tend to the sick and needy.",
        outcomes={
            CS: [UnrestEffect(amount=-1)],
            CF: [UnrestEffect(amount=1)],
        },
    ),
    ActivityDefinition(
        id="quell-unrest",
        name="Quell Unrest",
        category=ActivityCategory.LEADERSHIP,
        skill="Intrigue",
        description="Root out agitators and calm the populace.",
        outcomes={
            CS: [UnrestEffect(amount=-2)],
            S: [UnrestEffect(amount=-1)],
            CF: [UnrestEffect(amount=1)],
        },
    ),
    ActivityDefinition(
        id="repair-reputation",
        name="Repair Reputation",
        category=ActivityCategory.LEADERSHIP,
        skill="Politics",
        required_inputs=["target"],
        description="Reduce infamy or one ruin track.",
        outcomes={
            CS: [ReputationEffect(amount=-2)],
            S: [ReputationEffect(amount=-1)],
            CF: [ReputationEffect(amount=1)],
        },
    ),
    ActivityDefinition(
        id="rest-and-relax",
        name="Rest and Relax",
        category=ActivityCategory.LEADERSHIP,
        skill="Arts",
        description="Let the leaders take time away from their duties.",
        outcomes={
            CS: [UnrestEffect(amount=-2), FameEffect(amount=1)],
            S: [UnrestEffect(amount=-1)],
            CF: [UnrestEffect(amount=1)],
        },
    ),
    ActivityDefinition(
        id="supernatural-solution",
        name="Supernatural Solution",
        category=ActivityCategory.LEADERSHIP,
        skill="Magic",
        description="Turn to magic to solve a problem.",
        outcomes={
            CS: [
                UnrestEffect(amount=-1),
                SpecialEffect(key="supernatural-reroll", description="Reroll one failed check this turn"),
            ],
            S: [SpecialEffect(key="supernatural-reroll", description="Reroll one failed check this turn")],
            CF: [RuinEffect(ruin=RuinType.CORRUPTION, amount=1)],
        },
    ),
    # Region activities
    ActivityDefinition(
        id="reconnoiter-hex",
        name="Reconnoiter Hex",
        category=ActivityCategory.REGION,
        skill="Exploration",
        required_inputs=["hex"],
        prerequisite=Prerequisite.ADJACENT_UNEXPLORED_HEX,
        description="Send scouts to map an unexplored hex beside the border.",
        outcomes={
            CS: [ExploreHexEffect(), XPEffect(amount=10)],
            S: [ExploreHexEffect()],
            CF: [UnrestEffect(amount=1)],
        },
    ),
    ActivityDefinition(
        id="claim-hex",
        name="Claim Hex",
        category=ActivityCategory.REGION,
        skill="Exploration",
        rp_cost=1,
        required_inputs=["hex"],
        prerequisite=Prerequisite.ADJACENT_EXPLORED_HEX,
        description="Bring an explored hex next to the border under the kingdom's control.",
        outcomes={
            CS: [ClaimHexEffect(), XPEffect(amount=20)],
            S: [ClaimHexEffect(), XPEffect(amount=10)],
            CF: [UnrestEffect(amount=1)],
        },
    ),
    ActivityDefinition(
        id="abandon-hex",
        name="Abandon Hex",
        category=ActivityCategory.REGION,
        skill="Wilderness",
        required_inputs=["hex"],
        prerequisite=Prerequisite.OWNED_HEX_NO_SETTLEMENT,
        description="Give up control of a hex without a settlement.",
        outcomes={
            CS: [AbandonHexEffect()],
            S: [AbandonHexEffect(), UnrestEffect(amount=1)],
            CF: [UnrestEffect(amount="1d4")],
        },
    ),
    ActivityDefinition(
        id="build-roads",
        name="Build Roads",
        category=ActivityCategory.REGION,
        skill="Engineering",
        rp_cost=1,
        required_inputs=["hex"],
        prerequisite=Prerequisite.OWNED_HEX,
        description="Pave a road through a claimed hex.",
        outcomes={
            CS: [RoadEffect()],
            S: [RoadEffect()],
        },
    ),
    ActivityDefinition(
        id="clear-hex",
        name="Clear Hex",
        category=ActivityCategory.REGION,
        skill="Exploration",
        required_inputs=["hex"],
        prerequisite=Prerequisite.OWNED_HEX,
        description="Remove hazards from a claimed hex.",
        outcomes={
            CS: [ClearHexEffect(), SpecialEffect(key="clear-hex-salvage", description="Useful salvage recovered")],
            S: [ClearHexEffect()],
            CF: [SpecialEffect(key="clear-hex-mishap", description="Workers were hurt; the hazard remains")],
        },
    ),
    ActivityDefinition(
        id="establish-farmland",
        name="Establish Farmland",
        category=ActivityCategory.REGION,
        skill="Agriculture",
        rp_cost=2,
        required_inputs=["hex"],
        prerequisite=Prerequisite.FARMABLE_HEX,
        description="Plant crops on claimed plains or hills.",
        outcomes={
            CS: [WorkSiteEffect(site_type=WorkSiteType.FARM, bonus=True)],
            S: [WorkSiteEffect(site_type=WorkSiteType.FARM)],
        },
    ),
    ActivityDefinition(
        id="establish-work-site",
        name="Establish Work Site",
        category=ActivityCategory.REGION,
        skill="Industry",
        rp_cost=2,
        required_inputs=["hex", "site_type"],
        prerequisite=Prerequisite.WORKABLE_HEX,
        description="Open a lumber camp, mine or quarry.",
        outcomes={
            CS: [WorkSiteEffect(bonus=True)],
            S: [WorkSiteEffect()],
            CF: [UnrestEffect(amount=1)],
        },
    ),
    ActivityDefinition(
        id="fortify-hex",
        name="Fortify Hex",
        category=ActivityCategory.REGION,
        skill="Defense",
        rp_cost=2,
        required_inputs=["hex"],
        prerequisite=Prerequisite.OWNED_HEX,
        description="Build defensive works in a claimed hex.",
        outcomes={
            CS: [FortifyEffect(bonus=2)],
            S: [FortifyEffect(bonus=1)],
        },
    ),
    ActivityDefinition(
        id="go-fishing",
        name="Go Fishing",
        category=ActivityCategory.REGION,
        skill="Wilderness",
        required_inputs=["hex"],
        prerequisite=Prerequisite.WATER_ADJACENT_HEX,
        description="Fish the waters of a claimed hex.",
        outcomes={
            CS: [CommodityEffect(commodity=Commodity.FOOD, amount=2)],
            S: [CommodityEffect(commodity=Commodity.FOOD, amount=1)],
        },
    ),
    ActivityDefinition(
        id="harvest-crops",
        name="Harvest Crops",
        category=ActivityCategory.REGION,
        skill="Agriculture",
        required_inputs=["hex"],
        prerequisite=Prerequisite.HEX_WITH_FARM,
        description="Bring in an extra harvest from a farm.",
        outcomes={
            CS: [CommodityEffect(commodity=Commodity.FOOD, amount=2)],
            S: [CommodityEffect(commodity=Commodity.FOOD, amount=1)],
            CF: [CommodityEffect(commodity=Commodity.FOOD, amount=-1)],
        },
    ),
    # Civic activities
    ActivityDefinition(
        id="build-structure",
        name="Build Structure",
        category=ActivityCategory.CIVIC,
        cost_from_structure=True,
        required_inputs=["settlement_id", "structure_id"],
        prerequisite=Prerequisite.SETTLEMENT_HAS_ROOM,
        description="Construct a structure in a settlement.",
        outcomes={
            CS: [BuildStructureEffect(), RefundEffect(fraction=0.5)],
            S: [BuildStructureEffect()],
            F: [RefundEffect(fraction=0.5)],
            CF: [RuinEffect(ruin=RuinType.DECAY, amount=1)],
        },
    ),
    ActivityDefinition(
        id="demolish",
        name="Demolish",
        category=ActivityCategory.CIVIC,
        required_inputs=["settlement_id", "structure_id"],
        prerequisite=Prerequisite.SETTLEMENT_HAS_STRUCTURE,
        description="Tear down a structure to free its lots.",
        outcomes={
            S: [DemolishStructureEffect()],
        },
    ),
    ActivityDefinition(
        id="establish-settlement",
        name="Establish Settlement",
        category=ActivityCategory.CIVIC,
        skill="Engineering",
        rp_cost=4,
        required_inputs=["hex", "settlement_name"],
        prerequisite=Prerequisite.OWNED_HEX_NO_SETTLEMENT,
        description="Found a new village in a claimed hex.",
        outcomes={
            CS: [FoundSettlementEffect(), XPEffect(amount=40)],
            S: [FoundSettlementEffect(), XPEffect(amount=20)],
            CF: [UnrestEffect(amount=1)],
        },
    ),
    ActivityDefinition(
        id="relocate-capital",
        name="Relocate Capital",
        category=ActivityCategory.CIVIC,
        skill="Statecraft",
        required_inputs=["settlement_id"],
        prerequisite=Prerequisite.MULTIPLE_SETTLEMENTS,
        description="Move the seat of government to another settlement.",
        outcomes={
            CS: [RelocateCapitalEffect()],
            S: [RelocateCapitalEffect(), UnrestEffect(amount=1)],
            CF: [UnrestEffect(amount="1d4")],
        },
    ),
]
