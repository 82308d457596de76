"""Kingdom event table - weighted random events resolved during the event phase."""

from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, Field

from kingdom_engine.models.checks import Degree
from kingdom_engine.models.effects import (
    Effect,
    CommodityEffect,
    FameEffect,
    InfamyEffect,
    RPEffect,
    RuinEffect,
    UnrestEffect,
    XPEffect,
)
from kingdom_engine.models.kingdom import Commodity, RuinType

CS = Degree.CRITICAL_SUCCESS
S = Degree.SUCCESS
F = Degree.FAILURE
CF = Degree.CRITICAL_FAILURE


class EventDefinition(BaseModel):
    """A random event. Shaped like an activity, minus cost and slots."""
    id: str
    name: str
    description: str = ""
    skill: Optional[str] = None
    dc_modifier: int = 0
    weight: int = Field(default=10, ge=1)
    outcomes: dict[Degree, list[Effect]] = Field(default_factory=dict)
    messages: dict[Degree, str] = Field(default_factory=dict)

    def effects_for(self, degree: Degree) -> list[Effect]:
        return self.outcomes.get(degree, [])


EVENTS: list[EventDefinition] = [
    EventDefinition(
        id="bountiful-harvest",
        name="Bountiful Harvest",
        description="Favorable weather and fertile soil have led to an exceptional harvest.",
        skill="Agriculture",
        dc_modifier=-2,
        weight=12,
        outcomes={
            CS: [CommodityEffect(commodity=Commodity.FOOD, amount=3), UnrestEffect(amount=-1)],
            S: [CommodityEffect(commodity=Commodity.FOOD, amount=2)],
            F: [CommodityEffect(commodity=Commodity.FOOD, amount=1)],
            CF: [UnrestEffect(amount=1)],
        },
        messages={
            CS: "The harvest is legendary! Surplus food fills every storehouse.",
            S: "An excellent harvest provides extra food.",
            F: "A decent harvest, nothing special.",
            CF: "The harvest celebration draws criticism for wastefulness.",
        },
    ),
    EventDefinition(
        id="trade-opportunity",
        name="Trade Opportunity",
        description="Merchants from distant lands arrive seeking to establish trade.",
        skill="Trade",
        weight=12,
        outcomes={
            CS: [RPEffect(amount=4), CommodityEffect(commodity=Commodity.LUXURIES, amount=1)],
            S: [RPEffect(amount=2)],
            CF: [RPEffect(amount=-1), UnrestEffect(amount=1)],
        },
        messages={
            CS: "Lucrative trade deals are struck!",
            S: "Fair trade agreements are established.",
            F: "Negotiations stall but no harm done.",
            CF: "Trade talks break down acrimoniously.",
        },
    ),
    EventDefinition(
        id="diplomatic-visit",
        name="Diplomatic Visit",
        description="Envoys from a neighboring nation arrive seeking audience.",
        skill="Politics",
        outcomes={
            CS: [FameEffect(amount=1), UnrestEffect(amount=-1)],
            CF: [InfamyEffect(amount=1), UnrestEffect(amount=1)],
        },
        messages={
            CS: "Your diplomatic prowess impresses the envoys greatly.",
            S: "The visit goes smoothly and goodwill is established.",
            F: "The envoys depart without incident but unimpressed.",
            CF: "A diplomatic incident damages your reputation.",
        },
    ),
    EventDefinition(
        id="bandit-activity",
        name="Bandit Activity",
        description="Bandits have been raiding trade routes and farms.",
        skill="Warfare",
        outcomes={
            CS: [FameEffect(amount=1), XPEffect(amount=20)],
            F: [CommodityEffect(commodity=Commodity.FOOD, amount=-1), UnrestEffect(amount=1)],
            CF: [
                CommodityEffect(commodity=Commodity.FOOD, amount=-2),
                UnrestEffect(amount=2),
                RuinEffect(ruin=RuinType.CRIME, amount=1),
            ],
        },
        messages={
            CS: "Your forces crush the bandits decisively!",
            S: "The bandits are driven off with minimal losses.",
            F: "Bandits escape with stolen goods.",
            CF: "Bandits run rampant, stealing and terrorizing citizens.",
        },
    ),
    EventDefinition(
        id="disease-outbreak",
        name="Disease Outbreak",
        description="A sickness spreads through one of your settlements.",
        skill="Defense",
        dc_modifier=2,
        weight=6,
        outcomes={
            CS: [FameEffect(amount=1), UnrestEffect(amount=-1)],
            F: [UnrestEffect(amount=2)],
            CF: [UnrestEffect(amount=3), RuinEffect(ruin=RuinType.DECAY, amount=1)],
        },
        messages={
            CS: "Swift action contains the outbreak and saves lives.",
            S: "The disease is contained with some effort.",
            F: "The outbreak spreads before being contained.",
            CF: "The plague ravages the population.",
        },
    ),
    EventDefinition(
        id="monster-sighting",
        name="Monster Sighting",
        description="A dangerous creature has been spotted in your territory.",
        skill="Wilderness",
        outcomes={
            CS: [XPEffect(amount=30), FameEffect(amount=1)],
            S: [XPEffect(amount=10)],
            F: [UnrestEffect(amount=1)],
            CF: [UnrestEffect(amount=2), CommodityEffect(commodity=Commodity.FOOD, amount=-1)],
        },
        messages={
            CS: "The beast is slain and becomes a trophy of your might!",
            S: "The creature is driven away from settled areas.",
            F: "The creature escapes, leaving citizens fearful.",
            CF: "The monster attacks livestock and citizens flee in terror.",
        },
    ),
    EventDefinition(
        id="labor-dispute",
        name="Labor Dispute",
        description="Workers are protesting conditions and demanding better treatment.",
        skill="Industry",
        outcomes={
            CS: [UnrestEffect(amount=-2)],
            S: [UnrestEffect(amount=-1)],
            F: [UnrestEffect(amount=1)],
            CF: [UnrestEffect(amount=3), RuinEffect(ruin=RuinType.STRIFE, amount=1)],
        },
        messages={
            CS: "You address their concerns with wisdom, earning loyalty.",
            S: "A fair compromise is reached.",
            F: "The dispute drags on, souring morale.",
            CF: "The protest turns into a riot!",
        },
    ),
    EventDefinition(
        id="natural-disaster",
        name="Natural Disaster",
        description="Floods, storms, or earthquakes threaten your settlements.",
        skill="Engineering",
        dc_modifier=2,
        weight=5,
        outcomes={
            F: [RPEffect(amount=-2), UnrestEffect(amount=1)],
            CF: [RPEffect(amount=-4), UnrestEffect(amount=2), RuinEffect(ruin=RuinType.DECAY, amount=1)],
        },
        messages={
            CS: "Your preparations minimize all damage.",
            S: "Some damage occurs but recovery is swift.",
            F: "Significant damage requires costly repairs.",
            CF: "Devastation! Buildings collapse and resources are lost.",
        },
    ),
    EventDefinition(
        id="religious-festival",
        name="Religious Festival",
        description="A holy day approaches and the faithful expect celebrations.",
        skill="Folklore",
        dc_modifier=-2,
        outcomes={
            CS: [UnrestEffect(amount=-2), FameEffect(amount=1)],
            S: [UnrestEffect(amount=-1)],
            CF: [UnrestEffect(amount=1), RuinEffect(ruin=RuinType.CORRUPTION, amount=1)],
        },
        messages={
            CS: "A magnificent festival that will be remembered for years!",
            S: "The celebration brings joy to the people.",
            F: "A modest observance, neither memorable nor disappointing.",
            CF: "The festival descends into debauchery and scandal.",
        },
    ),
    EventDefinition(
        id="spy-discovered",
        name="Spy Discovered",
        description="A foreign spy has been discovered in your kingdom.",
        skill="Intrigue",
        dc_modifier=2,
        weight=6,
        outcomes={
            CS: [FameEffect(amount=1), XPEffect(amount=20)],
            CF: [InfamyEffect(amount=1), RuinEffect(ruin=RuinType.CRIME, amount=1)],
        },
        messages={
            CS: "The spy is captured and turned into a double agent!",
            S: "The spy is captured and expelled.",
            F: "The spy escapes but causes no immediate harm.",
            CF: "The spy escapes with sensitive information.",
        },
    ),
    EventDefinition(
        id="arcane-discovery",
        name="Arcane Discovery",
        description="Scholars have uncovered an ancient magical artifact or text.",
        skill="Magic",
        weight=6,
        outcomes={
            CS: [CommodityEffect(commodity=Commodity.LUXURIES, amount=2), XPEffect(amount=20)],
            S: [CommodityEffect(commodity=Commodity.LUXURIES, amount=1)],
            CF: [UnrestEffect(amount=1), RuinEffect(ruin=RuinType.CORRUPTION, amount=1)],
        },
        messages={
            CS: "A powerful artifact is safely recovered!",
            S: "The discovery yields valuable magical resources.",
            F: "The discovery proves less significant than hoped.",
            CF: "The artifact releases harmful magical energy!",
        },
    ),
    EventDefinition(
        id="squatters",
        name="Squatters",
        description="Homeless refugees have settled in your territory without permission.",
        skill="Politics",
        outcomes={
            CS: [FameEffect(amount=1), UnrestEffect(amount=-1)],
            F: [UnrestEffect(amount=1)],
            CF: [UnrestEffect(amount=2), RuinEffect(ruin=RuinType.STRIFE, amount=1)],
        },
        messages={
            CS: "You integrate the refugees as productive citizens!",
            S: "The squatters are peacefully relocated.",
            F: "Tensions arise between squatters and citizens.",
            CF: "Conflict erupts between the groups!",
        },
    ),
]
