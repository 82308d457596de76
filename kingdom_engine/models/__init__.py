"""Kingdom data models."""

from .kingdom import (
    Ability,
    Proficiency,
    PROFICIENCY_ORDER,
    Commodity,
    RuinType,
    HexStatus,
    Terrain,
    WATER_TERRAIN,
    WorkSiteType,
    WORK_SITE_COMMODITY,
    LeaderRole,
    WaterBorder,
    BLOCK_KEYS,
    LOTS_PER_BLOCK,
    WorkSite,
    Hex,
    StructurePlacement,
    Settlement,
    Leader,
    RuinTrack,
    CommodityStock,
    KingdomBonuses,
    Kingdom,
)
from .turn import Phase, KingdomDelta, TurnState, TurnHistoryEntry
from .checks import Degree, DEGREE_ORDER, ModifierBreakdown, CheckResult
from .effects import Effect
from .results import (
    ErrorCode,
    CatalogError,
    EngineFailure,
    AppliedEffect,
    ActivityResult,
    TradeEstimate,
    TradeResult,
    TaxResult,
    UpkeepResult,
    EventDetails,
    EventResult,
    LevelUpResult,
    TrainingResult,
    PhaseResult,
)

__all__ = [
    # Kingdom
    "Ability",
    "Proficiency",
    "PROFICIENCY_ORDER",
    "Commodity",
    "RuinType",
    "HexStatus",
    "Terrain",
    "WATER_TERRAIN",
    "WorkSiteType",
    "WORK_SITE_COMMODITY",
    "LeaderRole",
    "WaterBorder",
    "BLOCK_KEYS",
    "LOTS_PER_BLOCK",
    "WorkSite",
    "Hex",
    "StructurePlacement",
    "Settlement",
    "Leader",
    "RuinTrack",
    "CommodityStock",
    "KingdomBonuses",
    "Kingdom",
    # Turns
    "Phase",
    "KingdomDelta",
    "TurnState",
    "TurnHistoryEntry",
    # Checks
    "Degree",
    "DEGREE_ORDER",
    "ModifierBreakdown",
    "CheckResult",
    # Effects
    "Effect",
    # Results
    "ErrorCode",
    "CatalogError",
    "EngineFailure",
    "AppliedEffect",
    "ActivityResult",
    "TradeEstimate",
    "TradeResult",
    "TaxResult",
    "UpkeepResult",
    "EventDetails",
    "EventResult",
    "LevelUpResult",
    "TrainingResult",
    "PhaseResult",
]
