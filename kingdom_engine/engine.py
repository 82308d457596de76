"""Engine facade - the operations exposed to the presentation layer.

Nothing here mutates a kingdom. Every operation returns either a success
result carrying a proposed ``state`` or an ``EngineFailure``; committing is
the caller's job (``KingdomSession.commit`` does it for a single owner).
"""

from __future__ import annotations
import logging
from typing import Any, Callable, Optional, Union, TYPE_CHECKING

from kingdom_engine.catalog import Catalog, default_catalog
from kingdom_engine.catalog.feats import FeatDefinition
from kingdom_engine.catalog.milestones import MilestoneDefinition
from kingdom_engine.models.checks import CheckResult, ModifierBreakdown
from kingdom_engine.models.kingdom import Ability, Commodity, Kingdom, Proficiency
from kingdom_engine.models.results import (
    ActivityResult,
    EngineFailure,
    ErrorCode,
    EventResult,
    LevelUpResult,
    PhaseResult,
    TaxResult,
    TradeEstimate,
    TradeResult,
    TrainingResult,
    UpkeepResult,
)
from kingdom_engine.systems import checks, modifiers, structures
from kingdom_engine.systems.activities import ActivitySystem
from kingdom_engine.systems.commerce import CommerceSystem
from kingdom_engine.systems.dice import DiceRoller
from kingdom_engine.systems.events import EventSystem
from kingdom_engine.systems.progression import ProgressionSystem, get_skill_training_cost
from kingdom_engine.systems.turns import TurnSystem
from kingdom_engine.systems.upkeep import UpkeepSystem

if TYPE_CHECKING:
    from kingdom_engine.config import EngineSettings

logger = logging.getLogger(__name__)


def _parse_ability(value: Union[str, Ability]) -> Optional[Ability]:
    if isinstance(value, Ability):
        return value
    try:
        return Ability(str(value).strip().title())
    except ValueError:
        return None


def _parse_proficiency(value: Union[str, Proficiency]) -> Optional[Proficiency]:
    if isinstance(value, Proficiency):
        return value
    try:
        return Proficiency(str(value).strip().title())
    except ValueError:
        return None


class KingdomEngine:
    """Wires the rules systems to one catalog and one dice roller."""

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        dice: Optional[DiceRoller] = None,
        settings: Optional["EngineSettings"] = None,
    ):
        if catalog is None:
            catalog = default_catalog()
            if settings is not None:
                catalog = catalog.configured(settings.strict_catalog)
        if dice is None:
            dice = DiceRoller(seed=settings.seed if settings else None)
        self.catalog = catalog
        self.dice = dice

        self.progression = ProgressionSystem(catalog)
        self.activities = ActivitySystem(catalog, dice)
        self.commerce_system = CommerceSystem(catalog, dice)
        self.upkeep_system = UpkeepSystem(catalog, dice, self.progression)
        self.event_system = EventSystem(catalog, dice)
        self.turns = TurnSystem(
            catalog,
            activities=self.activities,
            commerce=self.commerce_system,
            upkeep=self.upkeep_system,
            events=self.event_system,
        )

    # Checks and modifiers

    def get_skill_modifier_breakdown(
        self,
        kingdom: Kingdom,
        skill_or_ability: str,
        activity_id: Optional[str] = None,
    ) -> Union[ModifierBreakdown, EngineFailure]:
        name = skill_or_ability
        if self.catalog.skill_ability(name) is None:
            ability = _parse_ability(name)
            if ability is None:
                return EngineFailure(code=ErrorCode.INVALID_INPUT, message=f"Unknown skill or ability: {name}")
            name = ability.value
        return modifiers.get_skill_modifier_breakdown(kingdom, name, self.catalog, activity_id=activity_id)

    def get_item_bonus_for_activity(self, kingdom: Kingdom, activity_id: str, skill: Optional[str] = None) -> int:
        return structures.get_item_bonus_for_activity(kingdom, activity_id, self.catalog, skill=skill)

    def get_invested_leader_bonus(
        self, kingdom: Kingdom, skill_or_ability: Union[str, Ability]
    ) -> Union[int, EngineFailure]:
        """Leader bonus for an ability, or for the ability governing a skill."""
        parsed = None
        if isinstance(skill_or_ability, str):
            parsed = self.catalog.skill_ability(skill_or_ability)
        if parsed is None:
            parsed = _parse_ability(skill_or_ability)
        if parsed is None:
            return EngineFailure(
                code=ErrorCode.INVALID_INPUT, message=f"Unknown skill or ability: {skill_or_ability}"
            )
        return modifiers.get_invested_leader_bonus(kingdom, parsed, self.catalog)

    def control_dc(self, kingdom: Kingdom) -> int:
        return checks.control_dc(kingdom, self.catalog)

    def resolve_check(self, modifier: Union[int, ModifierBreakdown], dc: int, roll: Optional[int] = None) -> CheckResult:
        return checks.resolve_check(modifier, dc, roll=roll, dice=self.dice)

    # Activities and commerce

    def execute_activity(
        self,
        kingdom: Kingdom,
        activity_id: str,
        inputs: Optional[dict[str, Any]] = None,
        roll: Optional[int] = None,
    ) -> Union[ActivityResult, EngineFailure]:
        """Resolve an activity outside the turn structure (no phase or slot checks)."""
        return self.activities.execute_activity(kingdom, activity_id, inputs, roll=roll)

    def estimate_trade(
        self, direction: str, commodity: Union[str, Commodity], amount: int
    ) -> Union[TradeEstimate, EngineFailure]:
        return self.commerce_system.estimate_trade(direction, commodity, amount)

    def trade_commodities(
        self,
        kingdom: Kingdom,
        direction: str,
        commodity: Union[str, Commodity],
        amount: int,
        roll: Optional[int] = None,
    ) -> Union[TradeResult, EngineFailure]:
        return self.commerce_system.trade_commodities(kingdom, direction, commodity, amount, roll=roll)

    def collect_taxes(self, kingdom: Kingdom, roll: Optional[int] = None) -> TaxResult:
        return self.commerce_system.collect_taxes(kingdom, roll=roll)

    # Upkeep and events

    def run_full_upkeep(self, kingdom: Kingdom) -> UpkeepResult:
        return self.upkeep_system.run_full_upkeep(kingdom)

    def run_event_phase(
        self,
        kingdom: Kingdom,
        flat_roll: Optional[int] = None,
        event_id: Optional[str] = None,
        roll: Optional[int] = None,
    ) -> EventResult:
        return self.event_system.run_event_phase(kingdom, flat_roll=flat_roll, event_id=event_id, roll=roll)

    # Progression

    def check_level_up(self, kingdom: Kingdom) -> bool:
        return self.progression.check_level_up(kingdom)

    def xp_to_next_level(self, kingdom: Kingdom) -> int:
        return self.progression.xp_to_next_level(kingdom)

    def check_milestones(self, kingdom: Kingdom) -> list[MilestoneDefinition]:
        return self.progression.check_milestones(kingdom)

    def available_feats(self, kingdom: Kingdom, level: Optional[int] = None) -> list[FeatDefinition]:
        return self.progression.available_feats(kingdom, level)

    def apply_level_up(
        self,
        kingdom: Kingdom,
        ability: Union[str, Ability],
        skill: str,
        feat: Optional[str] = None,
    ) -> Union[LevelUpResult, EngineFailure]:
        return self.progression.apply_level_up(kingdom, ability, skill, feat)

    def train_skill_with_rp(self, kingdom: Kingdom, skill: str) -> Union[TrainingResult, EngineFailure]:
        return self.progression.train_skill_with_rp(kingdom, skill)

    @staticmethod
    def get_skill_training_cost(tier: Union[str, Proficiency]) -> Union[int, None, EngineFailure]:
        """RP to train out of ``tier``; None once Legendary."""
        parsed = _parse_proficiency(tier)
        if parsed is None:
            return EngineFailure(code=ErrorCode.INVALID_INPUT, message=f"Unknown proficiency: {tier}")
        return get_skill_training_cost(parsed)

    # Turn operations

    def upkeep(self, kingdom: Kingdom) -> Union[UpkeepResult, EngineFailure]:
        return self.turns.upkeep(kingdom)

    def trade(
        self,
        kingdom: Kingdom,
        direction: str,
        commodity: Union[str, Commodity],
        amount: int,
        roll: Optional[int] = None,
    ) -> Union[TradeResult, EngineFailure]:
        return self.turns.trade(kingdom, direction, commodity, amount, roll=roll)

    def commerce(self, kingdom: Kingdom, roll: Optional[int] = None) -> Union[TaxResult, EngineFailure]:
        return self.turns.commerce_phase(kingdom, roll=roll)

    def perform_activity(
        self,
        kingdom: Kingdom,
        activity_id: str,
        inputs: Optional[dict[str, Any]] = None,
        roll: Optional[int] = None,
    ) -> Union[ActivityResult, EngineFailure]:
        return self.turns.perform_activity(kingdom, activity_id, inputs, roll=roll)

    def finish_activities(self, kingdom: Kingdom) -> Union[PhaseResult, EngineFailure]:
        return self.turns.finish_activities(kingdom)

    def event(
        self,
        kingdom: Kingdom,
        flat_roll: Optional[int] = None,
        event_id: Optional[str] = None,
        roll: Optional[int] = None,
    ) -> Union[EventResult, EngineFailure]:
        return self.turns.event(kingdom, flat_roll=flat_roll, event_id=event_id, roll=roll)

    def end_turn(self, kingdom: Kingdom) -> Union[PhaseResult, EngineFailure]:
        return self.turns.end_turn(kingdom)


class KingdomSession:
    """Single owner of a canonical kingdom.

    ``preview`` runs any engine operation against the canonical kingdom and
    hands back the result untouched; ``commit`` adopts a successful result's
    state. A result previewed before the last commit is stale and refused.
    """

    def __init__(self, engine: KingdomEngine, kingdom: Kingdom):
        self.engine = engine
        self.kingdom = kingdom
        self._previews: list[Any] = []  # results computed against the current kingdom

    def preview(self, operation: str, *args: Any, **kwargs: Any) -> Any:
        method: Optional[Callable[..., Any]] = getattr(self.engine, operation, None)
        if method is None or not callable(method) or operation.startswith("_"):
            return EngineFailure(code=ErrorCode.INVALID_INPUT, message=f"Unknown operation: {operation}")
        result = method(self.kingdom, *args, **kwargs)
        if getattr(result, "ok", False):
            self._previews.append(result)
        return result

    def commit(self, result: Any) -> bool:
        """Replace the canonical kingdom with ``result.state``.

        Returns False (and changes nothing) for failures and for results
        previewed before the last commit.
        """
        if not getattr(result, "ok", False):
            return False
        if not any(result is p for p in self._previews):
            logger.warning("Refusing to commit a result not previewed against the current kingdom")
            return False
        self.kingdom = result.state
        self._previews = []
        logger.debug("Committed new kingdom state (turn %d)", self.kingdom.turn)
        return True
