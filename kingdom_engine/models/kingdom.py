"""Kingdom state schemas - the canonical representation of a kingdom."""

from __future__ import annotations
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field
import uuid

from .turn import TurnState, TurnHistoryEntry


class Ability(str, Enum):
    """The four kingdom ability scores."""
    CULTURE = "Culture"
    ECONOMY = "Economy"
    LOYALTY = "Loyalty"
    STABILITY = "Stability"


class Proficiency(str, Enum):
    """Skill proficiency tiers, in advancement order."""
    UNTRAINED = "Untrained"
    TRAINED = "Trained"
    EXPERT = "Expert"
    MASTER = "Master"
    LEGENDARY = "Legendary"

    @property
    def rank(self) -> int:
        return PROFICIENCY_ORDER.index(self)

    def next(self) -> "Proficiency":
        """The next tier up, capped at Legendary."""
        return PROFICIENCY_ORDER[min(self.rank + 1, len(PROFICIENCY_ORDER) - 1)]


PROFICIENCY_ORDER = [
    Proficiency.UNTRAINED,
    Proficiency.TRAINED,
    Proficiency.EXPERT,
    Proficiency.MASTER,
    Proficiency.LEGENDARY,
]


class Commodity(str, Enum):
    """Stockpiled commodities."""
    FOOD = "Food"
    LUMBER = "Lumber"
    LUXURIES = "Luxuries"
    ORE = "Ore"
    STONE = "Stone"


class RuinType(str, Enum):
    """The four ruin tracks."""
    CORRUPTION = "Corruption"
    CRIME = "Crime"
    DECAY = "Decay"
    STRIFE = "Strife"


class HexStatus(str, Enum):
    """Exploration state of a hex."""
    UNEXPLORED = "unexplored"
    EXPLORED = "explored"
    CLAIMED = "claimed"


class Terrain(str, Enum):
    """Terrain of a hex."""
    PLAINS = "plains"
    FOREST = "forest"
    HILLS = "hills"
    MOUNTAINS = "mountains"
    SWAMP = "swamp"
    WATER = "water"
    LAKE = "lake"
    RIVER = "river"


WATER_TERRAIN = {Terrain.WATER, Terrain.LAKE, Terrain.RIVER}


class WorkSiteType(str, Enum):
    """Production facilities that can be built on a hex."""
    FARM = "farm"
    LUMBER = "lumber"
    MINE = "mine"
    QUARRY = "quarry"


WORK_SITE_COMMODITY = {
    WorkSiteType.FARM: Commodity.FOOD,
    WorkSiteType.LUMBER: Commodity.LUMBER,
    WorkSiteType.MINE: Commodity.ORE,
    WorkSiteType.QUARRY: Commodity.STONE,
}


class LeaderRole(str, Enum):
    """Required leadership roles."""
    RULER = "ruler"
    COUNSELOR = "counselor"
    GENERAL = "general"
    EMISSARY = "emissary"
    MAGISTER = "magister"
    TREASURER = "treasurer"
    VICEROY = "viceroy"
    WARDEN = "warden"


class WaterBorder(str, Enum):
    """Settlement grid edges that can border water."""
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"


BLOCK_KEYS = ["A", "B", "C", "D", "E", "F", "G", "H", "I"]
LOTS_PER_BLOCK = 4


class WorkSite(BaseModel):
    """A production facility on a hex."""
    type: WorkSiteType
    production: int = Field(default=1, ge=1)


class Hex(BaseModel):
    """A single map hex."""
    coordinate: str
    terrain: Terrain = Terrain.PLAINS
    status: HexStatus = HexStatus.UNEXPLORED
    work_site: Optional[WorkSite] = None
    roads: bool = False
    fortified: bool = False
    defense_bonus: int = 0
    hazards: list[str] = Field(default_factory=list)
    cleared: bool = False
    settlement_id: Optional[str] = None

    @property
    def is_claimed(self) -> bool:
        return self.status == HexStatus.CLAIMED


class StructurePlacement(BaseModel):
    """A structure occupying one or more lots of a settlement block."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4())[:8])
    structure_id: str
    block: str
    lots: list[int]
    constructed_turn: int = 1


class Settlement(BaseModel):
    """A settlement founded in a claimed hex."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4())[:8])
    name: str
    is_capital: bool = False
    hex_coordinate: str
    placements: list[StructurePlacement] = Field(default_factory=list)
    water_borders: list[WaterBorder] = Field(default_factory=list)
    sewer_system: bool = False

    @property
    def structure_ids(self) -> list[str]:
        return [p.structure_id for p in self.placements]

    def occupied_lots(self, block: str) -> set[int]:
        """Lots already used in a block."""
        used: set[int] = set()
        for placement in self.placements:
            if placement.block == block:
                used.update(placement.lots)
        return used

    @property
    def occupied_blocks(self) -> int:
        """Number of blocks holding at least one structure."""
        return len({p.block for p in self.placements})

    def block_borders_water(self, block: str) -> bool:
        """Check whether a block lies on a water border of the grid."""
        edges = {
            WaterBorder.NORTH: {"A", "B", "C"},
            WaterBorder.SOUTH: {"G", "H", "I"},
            WaterBorder.WEST: {"A", "D", "G"},
            WaterBorder.EAST: {"C", "F", "I"},
        }
        return any(block in edges[border] for border in self.water_borders)


class Leader(BaseModel):
    """A leader filling one of the leadership roles."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4())[:8])
    role: LeaderRole
    name: str = ""
    invested: bool = False
    vacant: bool = False

    @property
    def is_vacant(self) -> bool:
        return self.vacant or not self.name.strip()


class RuinTrack(BaseModel):
    """Score and threshold of one ruin track."""
    score: int = Field(default=0, ge=0)
    threshold: int = Field(default=10, ge=1)


class CommodityStock(BaseModel):
    """Amount and storage capacity of one commodity."""
    amount: int = Field(default=0, ge=0)
    capacity: int = Field(default=4, ge=0)


class KingdomBonuses(BaseModel):
    """Kingdom-wide modifiers that apply to every check or upkeep roll."""
    bonus_dice: int = 0
    penalty_dice: int = 0
    circumstance_bonus: int = 0
    circumstance_penalty: int = 0


def _default_abilities() -> dict[Ability, int]:
    return {ability: 10 for ability in Ability}


def _default_ruin() -> dict[RuinType, RuinTrack]:
    return {ruin: RuinTrack() for ruin in RuinType}


def _default_commodities() -> dict[Commodity, CommodityStock]:
    return {commodity: CommodityStock() for commodity in Commodity}


class Kingdom(BaseModel):
    """The complete state of a kingdom."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = "New Kingdom"
    level: int = Field(default=1, ge=1)
    xp: int = Field(default=0, ge=0)
    fame: int = Field(default=0, ge=0)
    infamy: int = Field(default=0, ge=0)

    abilities: dict[Ability, int] = Field(default_factory=_default_abilities)
    skills: dict[str, Proficiency] = Field(default_factory=dict)
    unrest: int = Field(default=0, ge=0)
    ruin: dict[RuinType, RuinTrack] = Field(default_factory=_default_ruin)
    commodities: dict[Commodity, CommodityStock] = Field(default_factory=_default_commodities)
    rp: int = Field(default=0, ge=0, description="Resource points")

    hexes: dict[str, Hex] = Field(default_factory=dict)
    settlements: list[Settlement] = Field(default_factory=list)
    leaders: list[Leader] = Field(default_factory=list)
    feats: list[str] = Field(default_factory=list)
    bonuses: KingdomBonuses = Field(default_factory=KingdomBonuses)
    achieved_milestones: list[str] = Field(default_factory=list)

    # Calendar
    turn: int = 1
    month: str = "Pharast"
    year: int = 4710
    event_dc: int = 16

    turn_state: TurnState = Field(default_factory=TurnState)
    history: list[TurnHistoryEntry] = Field(default_factory=list)

    def proficiency(self, skill: str) -> Proficiency:
        """Proficiency tier for a skill (Untrained when never trained)."""
        return self.skills.get(skill, Proficiency.UNTRAINED)

    def get_hex(self, coordinate: Optional[str]) -> Optional[Hex]:
        """Find a hex by coordinate (case-insensitive)."""
        if not coordinate:
            return None
        return self.hexes.get(coordinate.strip().lower())

    def claimed_hexes(self) -> list[Hex]:
        return [h for h in self.hexes.values() if h.is_claimed]

    @property
    def claimed_hex_count(self) -> int:
        return len(self.claimed_hexes())

    def get_settlement(self, id_or_name: Optional[str]) -> Optional[Settlement]:
        """Find a settlement by ID or name."""
        if not id_or_name:
            return None
        for s in self.settlements:
            if s.id == id_or_name or s.name.lower() == id_or_name.lower():
                return s
        return None

    @property
    def capital(self) -> Optional[Settlement]:
        for s in self.settlements:
            if s.is_capital:
                return s
        return None

    def get_leader(self, role: LeaderRole) -> Optional[Leader]:
        for leader in self.leaders:
            if leader.role == role:
                return leader
        return None

    def has_feat(self, feat_id: str) -> bool:
        return feat_id in self.feats

    def commodity_amount(self, commodity: Commodity) -> int:
        return self.commodities[commodity].amount

    def summary(self) -> str:
        """Short human-readable status line."""
        return (
            f"{self.name} (level {self.level}, {self.xp} XP) - turn {self.turn}, "
            f"{self.month} {self.year} - RP {self.rp}, Unrest {self.unrest}, "
            f"{self.claimed_hex_count} hexes, {len(self.settlements)} settlements"
        )
