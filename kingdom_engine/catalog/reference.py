"""Static rules tables: skills, proficiency, kingdom size, calendar, XP and trade values."""

from __future__ import annotations
from typing import Optional
from pydantic import BaseModel

from kingdom_engine.models.kingdom import Ability, Commodity, LeaderRole, Proficiency, RuinType
from kingdom_engine.models.checks import Degree


SKILL_ABILITIES: dict[str, Ability] = {
    "Arts": Ability.CULTURE,
    "Folklore": Ability.CULTURE,
    "Magic": Ability.CULTURE,
    "Scholarship": Ability.CULTURE,
    "Boating": Ability.ECONOMY,
    "Engineering": Ability.ECONOMY,
    "Exploration": Ability.ECONOMY,
    "Industry": Ability.ECONOMY,
    "Trade": Ability.ECONOMY,
    "Intrigue": Ability.LOYALTY,
    "Politics": Ability.LOYALTY,
    "Statecraft": Ability.LOYALTY,
    "Warfare": Ability.LOYALTY,
    "Agriculture": Ability.STABILITY,
    "Defense": Ability.STABILITY,
    "Wilderness": Ability.STABILITY,
}

# Extra bonus on top of kingdom level; Untrained adds nothing at all
PROFICIENCY_BONUS: dict[Proficiency, int] = {
    Proficiency.UNTRAINED: 0,
    Proficiency.TRAINED: 2,
    Proficiency.EXPERT: 4,
    Proficiency.MASTER: 6,
    Proficiency.LEGENDARY: 8,
}

# RP to train a skill out of its current tier
TRAINING_COSTS: dict[Proficiency, Optional[int]] = {
    Proficiency.UNTRAINED: 10,
    Proficiency.TRAINED: 20,
    Proficiency.EXPERT: 40,
    Proficiency.MASTER: 80,
    Proficiency.LEGENDARY: None,
}

# Leadership roles whose invested leader boosts checks of an ability
ABILITY_ROLES: dict[Ability, list[LeaderRole]] = {
    Ability.CULTURE: [LeaderRole.COUNSELOR, LeaderRole.MAGISTER],
    Ability.ECONOMY: [LeaderRole.TREASURER, LeaderRole.VICEROY],
    Ability.LOYALTY: [LeaderRole.GENERAL, LeaderRole.EMISSARY],
    Ability.STABILITY: [LeaderRole.WARDEN],
}

VACANCY_UNREST: dict[LeaderRole, int] = {role: 1 for role in LeaderRole}
VACANCY_UNREST[LeaderRole.RULER] = 2

# Ability damaged when a ruin track crosses its threshold
RUIN_ABILITY: dict[RuinType, Ability] = {
    RuinType.CORRUPTION: Ability.CULTURE,
    RuinType.CRIME: Ability.ECONOMY,
    RuinType.DECAY: Ability.STABILITY,
    RuinType.STRIFE: Ability.LOYALTY,
}

CONTROL_DC_BASE = 14


class SizeTier(BaseModel):
    """Kingdom size category derived from claimed hex count."""
    name: str
    min_hexes: int
    max_hexes: Optional[int]
    resource_die: int
    dc_modifier: int
    storage: int


SIZE_TIERS: list[SizeTier] = [
    SizeTier(name="Territory", min_hexes=0, max_hexes=9, resource_die=4, dc_modifier=0, storage=4),
    SizeTier(name="Province", min_hexes=10, max_hexes=24, resource_die=6, dc_modifier=1, storage=8),
    SizeTier(name="State", min_hexes=25, max_hexes=49, resource_die=8, dc_modifier=2, storage=12),
    SizeTier(name="Country", min_hexes=50, max_hexes=99, resource_die=10, dc_modifier=3, storage=16),
    SizeTier(name="Dominion", min_hexes=100, max_hexes=None, resource_die=12, dc_modifier=4, storage=20),
]

RESOURCE_DICE = [4, 6, 8, 10, 12]


class SettlementTier(BaseModel):
    """Settlement size category derived from occupied blocks."""
    name: str
    min_blocks: int
    consumption: int


SETTLEMENT_TIERS: list[SettlementTier] = [
    SettlementTier(name="Village", min_blocks=0, consumption=1),
    SettlementTier(name="Town", min_blocks=5, consumption=2),
    SettlementTier(name="City", min_blocks=9, consumption=4),
    SettlementTier(name="Metropolis", min_blocks=17, consumption=6),
]

MONTHS = [
    "Abadius",
    "Calistril",
    "Pharast",
    "Gozran",
    "Desnus",
    "Sarenith",
    "Erastus",
    "Arodus",
    "Rova",
    "Lamashan",
    "Neth",
    "Kuthona",
]

# Cumulative XP needed to reach a level
XP_THRESHOLDS: dict[int, int] = {
    1: 0,
    2: 1000,
    3: 2000,
    4: 3000,
    5: 4000,
    6: 6000,
    7: 8000,
    8: 10000,
    9: 12000,
    10: 14000,
    11: 17000,
    12: 20000,
    13: 23000,
    14: 26000,
    15: 29000,
    16: 33000,
    17: 37000,
    18: 41000,
    19: 45000,
    20: 49000,
}
XP_PER_LEVEL_BEYOND_20 = 4000

COMMODITY_BASE_VALUES: dict[Commodity, int] = {
    Commodity.FOOD: 1,
    Commodity.LUMBER: 2,
    Commodity.ORE: 2,
    Commodity.STONE: 2,
    Commodity.LUXURIES: 4,
}

SELL_MULTIPLIERS: dict[Degree, float] = {
    Degree.CRITICAL_SUCCESS: 1.5,
    Degree.SUCCESS: 1.0,
    Degree.FAILURE: 0.75,
    Degree.CRITICAL_FAILURE: 0.5,
}

BUY_MULTIPLIERS: dict[Degree, float] = {
    Degree.CRITICAL_SUCCESS: 0.75,
    Degree.SUCCESS: 1.0,
    Degree.FAILURE: 1.25,
    Degree.CRITICAL_FAILURE: 1.5,
}
