"""Starter kingdom - a small, playable first-turn kingdom for the REPL and tests."""

from __future__ import annotations
from typing import Optional

from kingdom_engine.catalog import Catalog, default_catalog
from kingdom_engine.models.kingdom import (
    Ability,
    Commodity,
    Hex,
    HexStatus,
    Kingdom,
    Leader,
    LeaderRole,
    Proficiency,
    Settlement,
    StructurePlacement,
    Terrain,
    WaterBorder,
    WorkSite,
    WorkSiteType,
)
from kingdom_engine.systems.structures import refresh_capacities

CAPITAL_HEX = "c19"

# (coordinate, terrain, status)
STARTING_MAP = [
    ("c19", Terrain.PLAINS, HexStatus.CLAIMED),
    ("c18", Terrain.PLAINS, HexStatus.CLAIMED),
    ("b19", Terrain.FOREST, HexStatus.CLAIMED),
    ("c20", Terrain.RIVER, HexStatus.EXPLORED),
    ("b18", Terrain.HILLS, HexStatus.EXPLORED),
    ("d18", Terrain.FOREST, HexStatus.EXPLORED),
    ("d19", Terrain.MOUNTAINS, HexStatus.UNEXPLORED),
    ("c17", Terrain.SWAMP, HexStatus.UNEXPLORED),
]

STARTING_LEADERS = {
    LeaderRole.RULER: "Jamandi Aldori",
    LeaderRole.COUNSELOR: "Linzi",
    LeaderRole.GENERAL: "Amiri",
    LeaderRole.EMISSARY: "Valerie",
    LeaderRole.MAGISTER: "Ekundayo",
    LeaderRole.TREASURER: "Harrim",
    LeaderRole.VICEROY: "Nok-Nok",
    LeaderRole.WARDEN: "Kesten Garess",
}


def starter_kingdom(name: str = "Stolen Lands", catalog: Optional[Catalog] = None) -> Kingdom:
    """A level 1 kingdom with a village capital, three claimed hexes and a full council."""
    catalog = catalog or default_catalog()
    kingdom = Kingdom(
        name=name,
        rp=12,
        abilities={
            Ability.CULTURE: 12,
            Ability.ECONOMY: 14,
            Ability.LOYALTY: 12,
            Ability.STABILITY: 12,
        },
        skills={
            "Agriculture": Proficiency.TRAINED,
            "Exploration": Proficiency.TRAINED,
            "Industry": Proficiency.TRAINED,
            "Trade": Proficiency.TRAINED,
            "Politics": Proficiency.TRAINED,
            "Wilderness": Proficiency.TRAINED,
        },
        feats=["muddle-through"],
    )

    for coordinate, terrain, status in STARTING_MAP:
        kingdom.hexes[coordinate] = Hex(coordinate=coordinate, terrain=terrain, status=status)
    kingdom.hexes["c18"].work_site = WorkSite(type=WorkSiteType.FARM)

    capital = Settlement(
        name="Tatzlford",
        is_capital=True,
        hex_coordinate=CAPITAL_HEX,
        water_borders=[WaterBorder.SOUTH],
        placements=[
            StructurePlacement(structure_id="houses", block="A", lots=[0]),
            StructurePlacement(structure_id="granary", block="A", lots=[1]),
        ],
    )
    kingdom.settlements.append(capital)
    kingdom.hexes[CAPITAL_HEX].settlement_id = capital.id

    kingdom.leaders = [
        Leader(role=role, name=leader, invested=role in (LeaderRole.TREASURER, LeaderRole.WARDEN))
        for role, leader in STARTING_LEADERS.items()
    ]

    refresh_capacities(kingdom, catalog)
    kingdom.commodities[Commodity.FOOD].amount = 3
    kingdom.commodities[Commodity.LUMBER].amount = 2
    kingdom.commodities[Commodity.STONE].amount = 1
    return kingdom
