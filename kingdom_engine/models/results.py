"""Operation result schemas - success payloads and typed failures."""

from __future__ import annotations
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field

from .checks import CheckResult, Degree, ModifierBreakdown
from .kingdom import Commodity, Kingdom, Proficiency
from .turn import KingdomDelta, TurnHistoryEntry


class ErrorCode(str, Enum):
    """Recoverable failure categories returned to the caller."""
    INVALID_PHASE = "InvalidPhase"
    UNKNOWN_ACTIVITY = "UnknownActivity"
    UNKNOWN_STRUCTURE = "UnknownStructure"
    UNKNOWN_FEAT = "UnknownFeat"
    INVALID_INPUT = "InvalidInput"
    INSUFFICIENT_RESOURCES = "InsufficientResources"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    INSUFFICIENT_STOCK = "InsufficientStock"
    MAX_PROFICIENCY_REACHED = "MaxProficiencyReached"
    PREREQUISITE_NOT_MET = "PrerequisiteNotMet"


class CatalogError(Exception):
    """A catalog entry references something that does not exist."""


class EngineFailure(BaseModel):
    """An expected, player-facing failure. The input kingdom is untouched."""
    code: ErrorCode
    message: str

    ok: bool = False

    def summary(self) -> str:
        return f"[{self.code.value}] {self.message}"


class AppliedEffect(BaseModel):
    """One line of an effect log together with the exact change it made."""
    kind: str
    message: str
    delta: KingdomDelta = Field(default_factory=KingdomDelta)


class _Success(BaseModel):
    state: Kingdom
    ok: bool = True


class ActivityResult(_Success):
    """Proposed state after performing an activity."""
    activity_id: str
    activity_name: str
    degree: Degree
    check: Optional[CheckResult] = None
    modifier: Optional[ModifierBreakdown] = None
    effect_log: list[AppliedEffect] = Field(default_factory=list)
    rp_cost: int = 0

    @property
    def delta(self) -> KingdomDelta:
        return sum((e.delta for e in self.effect_log), KingdomDelta())

    @property
    def log_lines(self) -> list[str]:
        return [e.message for e in self.effect_log]


class TradeEstimate(BaseModel):
    """Price of a trade at the neutral multiplier."""
    direction: str
    commodity: Commodity
    amount: int
    unit_price: int
    total: int


class TradeResult(_Success):
    """Proposed state after buying or selling a commodity."""
    direction: str
    commodity: Commodity
    requested: int
    units: int
    unit_price: int
    rp_change: int
    degree: Degree
    check: CheckResult
    effect_log: list[AppliedEffect] = Field(default_factory=list)

    @property
    def log_lines(self) -> list[str]:
        return [e.message for e in self.effect_log]


class TaxResult(_Success):
    """Proposed state after collecting taxes."""
    amount: int
    degree: Degree
    check: CheckResult
    effect_log: list[AppliedEffect] = Field(default_factory=list)


class UpkeepResult(_Success):
    """Proposed state after the upkeep phase."""
    resource_dice: list[int] = Field(default_factory=list)
    rp_gained: int = 0
    production: dict[str, int] = Field(default_factory=dict)
    consumption: int = 0
    food_shortage: int = 0
    vacancies: list[str] = Field(default_factory=list)
    ruin_triggered: list[str] = Field(default_factory=list)
    milestones: list[str] = Field(default_factory=list)
    level_up_available: bool = False
    log: list[str] = Field(default_factory=list)


class EventDetails(BaseModel):
    """Resolution of the event drawn this turn."""
    event_id: str
    name: str
    description: str = ""
    degree: Degree
    check: Optional[CheckResult] = None
    effect_log: list[AppliedEffect] = Field(default_factory=list)


class EventResult(_Success):
    """Proposed state after the event phase."""
    event_occurred: bool
    flat_check: int
    event_dc: int
    event_details: Optional[EventDetails] = None


class LevelUpResult(_Success):
    """Proposed state after gaining a level."""
    new_level: int
    ability: str
    skill: str
    new_tier: Proficiency
    feat: Optional[str] = None
    log: list[str] = Field(default_factory=list)


class TrainingResult(_Success):
    """Proposed state after training a skill with RP."""
    skill: str
    new_tier: Proficiency
    cost: int


class PhaseResult(_Success):
    """Proposed state after a bookkeeping phase transition."""
    message: str
    history_entry: Optional[TurnHistoryEntry] = None
    details: dict[str, Any] = Field(default_factory=dict)
