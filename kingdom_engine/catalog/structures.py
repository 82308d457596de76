"""Structure catalog - buildings that can occupy settlement lots."""

from __future__ import annotations
from pydantic import BaseModel, Field

from kingdom_engine.models.kingdom import Commodity


class StructureDefinition(BaseModel):
    """A buildable structure and the bonuses it grants once placed."""
    id: str
    name: str
    level: int = 1
    lots: int = 1  # Footprint: 1, 2 or 4 lots
    rp_cost: int = 0
    commodity_costs: dict[Commodity, int] = Field(default_factory=dict)
    skill: str = "Engineering"  # Skill used to construct it
    description: str = ""

    # Bonuses
    item_bonus: int = 0
    bonus_targets: list[str] = Field(default_factory=list)  # Activity ids or skill names
    consumption_reduction: int = 0
    reduction_requires_water: bool = False
    storage: dict[Commodity, int] = Field(default_factory=dict)
    leadership_slot: bool = False

    # Placement rules
    requires_water: bool = False

    @property
    def xp_value(self) -> int:
        return self.level * 10

    def grants_bonus_to(self, target: str) -> bool:
        return self.item_bonus > 0 and target in self.bonus_targets


STRUCTURES: list[StructureDefinition] = [
    StructureDefinition(
        id="houses",
        name="Houses",
        rp_cost=3,
        commodity_costs={Commodity.LUMBER: 1},
        skill="Industry",
        description="Cheap dwellings that fill out a block.",
    ),
    StructureDefinition(
        id="inn",
        name="Inn",
        rp_cost=10,
        commodity_costs={Commodity.LUMBER: 2},
        item_bonus=1,
        bonus_targets=["hire-adventurers"],
        description="A place for travellers and adventurers to rest.",
    ),
    StructureDefinition(
        id="shrine",
        name="Shrine",
        rp_cost=8,
        commodity_costs={Commodity.LUMBER: 2, Commodity.STONE: 2},
        skill="Folklore",
        item_bonus=1,
        bonus_targets=["celebrate-holiday"],
        description="A small holy site devoted to a local deity.",
    ),
    StructureDefinition(
        id="granary",
        name="Granary",
        rp_cost=12,
        commodity_costs={Commodity.LUMBER: 2},
        storage={Commodity.FOOD: 1},
        description="Silos that store grain for lean months.",
    ),
    StructureDefinition(
        id="herbalist",
        name="Herbalist",
        rp_cost=10,
        commodity_costs={Commodity.LUMBER: 1},
        skill="Wilderness",
        item_bonus=1,
        bonus_targets=["provide-care"],
        description="A healer's shop stocked with remedies.",
    ),
    StructureDefinition(
        id="mill",
        name="Mill",
        level=2,
        rp_cost=6,
        commodity_costs={Commodity.LUMBER: 2, Commodity.STONE: 1},
        skill="Industry",
        item_bonus=1,
        bonus_targets=["harvest-crops"],
        consumption_reduction=1,
        reduction_requires_water=True,
        description="Grinds grain; reduces consumption when built beside water.",
    ),
    StructureDefinition(
        id="library",
        name="Library",
        level=2,
        rp_cost=6,
        commodity_costs={Commodity.LUMBER: 4},
        skill="Scholarship",
        item_bonus=1,
        bonus_targets=["Scholarship", "creative-solution"],
        description="A collection of books open to scholars.",
    ),
    StructureDefinition(
        id="stonemason",
        name="Stonemason",
        level=2,
        rp_cost=16,
        commodity_costs={Commodity.LUMBER: 2},
        skill="Industry",
        item_bonus=1,
        bonus_targets=["build-roads"],
        storage={Commodity.STONE: 1},
        description="Cuts and stores quarried stone.",
    ),
    StructureDefinition(
        id="town-hall",
        name="Town Hall",
        level=2,
        lots=2,
        rp_cost=22,
        commodity_costs={Commodity.LUMBER: 4, Commodity.STONE: 4},
        skill="Politics",
        item_bonus=1,
        bonus_targets=["improve-lifestyle"],
        leadership_slot=True,
        description="Seat of local government; a capital town hall allows a third leadership activity.",
    ),
    StructureDefinition(
        id="stockyard",
        name="Stockyard",
        level=3,
        lots=4,
        rp_cost=20,
        commodity_costs={Commodity.LUMBER: 4},
        skill="Agriculture",
        item_bonus=1,
        bonus_targets=["establish-farmland"],
        consumption_reduction=1,
        description="Pens and slaughterhouses that reduce food consumption.",
    ),
    StructureDefinition(
        id="lumberyard",
        name="Lumberyard",
        level=3,
        lots=2,
        rp_cost=16,
        commodity_costs={Commodity.LUMBER: 5},
        skill="Industry",
        item_bonus=1,
        bonus_targets=["establish-work-site"],
        storage={Commodity.LUMBER: 1},
        description="Stores and processes timber.",
    ),
    StructureDefinition(
        id="foundry",
        name="Foundry",
        level=3,
        lots=2,
        rp_cost=16,
        commodity_costs={Commodity.LUMBER: 5, Commodity.ORE: 2, Commodity.STONE: 3},
        skill="Industry",
        item_bonus=1,
        bonus_targets=["Industry"],
        storage={Commodity.ORE: 1},
        description="Smelts ore into usable metal.",
    ),
    StructureDefinition(
        id="barracks",
        name="Barracks",
        level=3,
        rp_cost=6,
        commodity_costs={Commodity.LUMBER: 2, Commodity.STONE: 1},
        skill="Warfare",
        item_bonus=1,
        bonus_targets=["Warfare", "quell-unrest"],
        description="Quarters for the kingdom's soldiers.",
    ),
    StructureDefinition(
        id="watchtower",
        name="Watchtower",
        level=3,
        rp_cost=12,
        commodity_costs={Commodity.LUMBER: 4},
        skill="Defense",
        item_bonus=1,
        bonus_targets=["fortify-hex", "Defense"],
        description="A tall tower that watches the surrounding land.",
    ),
    StructureDefinition(
        id="pier",
        name="Pier",
        level=3,
        rp_cost=16,
        commodity_costs={Commodity.LUMBER: 2},
        skill="Boating",
        item_bonus=1,
        bonus_targets=["go-fishing", "Boating"],
        requires_water=True,
        description="Wharves for fishing boats; must border water.",
    ),
    StructureDefinition(
        id="marketplace",
        name="Marketplace",
        level=4,
        lots=2,
        rp_cost=48,
        commodity_costs={Commodity.LUMBER: 4},
        skill="Trade",
        item_bonus=1,
        bonus_targets=["Trade"],
        description="An open square of stalls and shops.",
    ),
    StructureDefinition(
        id="bank",
        name="Bank",
        level=5,
        rp_cost=28,
        commodity_costs={Commodity.ORE: 4, Commodity.STONE: 4},
        skill="Trade",
        item_bonus=1,
        bonus_targets=["collect-taxes"],
        description="A secure vault for the kingdom's treasury.",
    ),
    StructureDefinition(
        id="arcanist-tower",
        name="Arcanist's Tower",
        level=5,
        rp_cost=30,
        commodity_costs={Commodity.STONE: 6},
        skill="Magic",
        item_bonus=1,
        bonus_targets=["Magic", "supernatural-solution", "prognostication"],
        description="A tower where a spellcaster studies and works.",
    ),
    StructureDefinition(
        id="secure-warehouse",
        name="Secure Warehouse",
        level=6,
        lots=2,
        rp_cost=24,
        commodity_costs={Commodity.LUMBER: 6, Commodity.STONE: 6},
        skill="Industry",
        item_bonus=1,
        bonus_targets=["craft-luxuries"],
        storage={Commodity.LUXURIES: 1},
        description="A guarded store for valuable goods.",
    ),
    StructureDefinition(
        id="temple",
        name="Temple",
        level=7,
        lots=2,
        rp_cost=32,
        commodity_costs={Commodity.LUMBER: 6, Commodity.STONE: 6},
        skill="Folklore",
        item_bonus=2,
        bonus_targets=["Folklore", "celebrate-holiday", "provide-care"],
        description="A grand place of worship.",
    ),
    StructureDefinition(
        id="castle",
        name="Castle",
        level=9,
        lots=4,
        rp_cost=54,
        commodity_costs={Commodity.STONE: 12},
        skill="Defense",
        item_bonus=2,
        bonus_targets=["Defense", "new-leadership"],
        leadership_slot=True,
        description="A fortified seat of power.",
    ),
    StructureDefinition(
        id="academy",
        name="Academy",
        level=10,
        lots=2,
        rp_cost=52,
        commodity_costs={Commodity.LUMBER: 12, Commodity.LUXURIES: 6},
        skill="Scholarship",
        item_bonus=2,
        bonus_targets=["Scholarship", "creative-solution"],
        description="An institution of higher learning.",
    ),
    StructureDefinition(
        id="palace",
        name="Palace",
        level=15,
        lots=4,
        rp_cost=108,
        commodity_costs={Commodity.LUMBER: 10, Commodity.STONE: 20, Commodity.LUXURIES: 10},
        skill="Statecraft",
        item_bonus=3,
        bonus_targets=["Statecraft", "Politics"],
        leadership_slot=True,
        description="A magnificent residence for the ruler.",
    ),
]
