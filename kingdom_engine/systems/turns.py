"""Turn system - the upkeep -> commerce -> activity -> event phase machine."""

from __future__ import annotations
import logging
from typing import Any, Optional, Union, TYPE_CHECKING

from kingdom_engine.catalog.activities import ActivityCategory
from kingdom_engine.catalog.reference import MONTHS
from kingdom_engine.models.kingdom import Commodity, Kingdom
from kingdom_engine.models.results import (
    ActivityResult,
    EngineFailure,
    ErrorCode,
    EventResult,
    PhaseResult,
    TaxResult,
    TradeResult,
    UpkeepResult,
)
from kingdom_engine.models.turn import Phase, TurnHistoryEntry, TurnState
from kingdom_engine.systems.accounting import diff_kingdoms
from kingdom_engine.systems.structures import max_leadership_activities

if TYPE_CHECKING:
    from kingdom_engine.catalog import Catalog
    from kingdom_engine.systems.activities import ActivitySystem
    from kingdom_engine.systems.commerce import CommerceSystem
    from kingdom_engine.systems.events import EventSystem
    from kingdom_engine.systems.upkeep import UpkeepSystem

logger = logging.getLogger(__name__)


def _wrong_phase(kingdom: Kingdom, operation: str) -> EngineFailure:
    ts = kingdom.turn_state
    return EngineFailure(
        code=ErrorCode.INVALID_PHASE,
        message=f"Cannot {operation} during the {ts.phase.value} phase of turn {kingdom.turn}",
    )


def next_month(month: str, year: int) -> tuple[str, int]:
    """Month after ``month``; the year turns over when Kuthona wraps to Abadius."""
    index = MONTHS.index(month) if month in MONTHS else 0
    if index == len(MONTHS) - 1:
        return MONTHS[0], year + 1
    return MONTHS[index + 1], year


class TurnSystem:
    """Gates each phase operation on the turn state and records what it changed.

    Every operation returns the subsystem's result with the turn bookkeeping
    already applied to ``result.state``; the caller commits it or drops it.
    """

    def __init__(
        self,
        catalog: "Catalog",
        activities: "ActivitySystem",
        commerce: "CommerceSystem",
        upkeep: "UpkeepSystem",
        events: "EventSystem",
    ):
        self.catalog = catalog
        self.activities = activities
        self.commerce = commerce
        self.upkeep_system = upkeep
        self.events = events

    @staticmethod
    def _record(before: Kingdom, after: Kingdom) -> None:
        """Fold the operation's net change into the turn's running delta."""
        ts = after.turn_state
        ts.deltas = ts.deltas + diff_kingdoms(before, after)

    # Upkeep

    def upkeep(self, kingdom: Kingdom) -> Union[UpkeepResult, EngineFailure]:
        ts = kingdom.turn_state
        if ts.phase != Phase.UPKEEP or ts.upkeep_complete:
            return _wrong_phase(kingdom, "run upkeep")

        result = self.upkeep_system.run_full_upkeep(kingdom)
        state = result.state
        new_ts = state.turn_state
        new_ts.upkeep_complete = True
        new_ts.phase = Phase.COMMERCE
        new_ts.resource_dice = list(result.resource_dice)
        new_ts.max_leadership = max_leadership_activities(state, self.catalog)
        new_ts.max_civic = max(1, len(state.settlements))
        self._record(kingdom, state)
        logger.info("Turn %d: upkeep complete", state.turn)
        return result

    # Commerce

    def trade(
        self,
        kingdom: Kingdom,
        direction: str,
        commodity: Union[str, Commodity],
        amount: int,
        roll: Optional[int] = None,
    ) -> Union[TradeResult, EngineFailure]:
        ts = kingdom.turn_state
        if ts.phase != Phase.COMMERCE or ts.commerce_complete:
            return _wrong_phase(kingdom, "trade")

        result = self.commerce.trade_commodities(kingdom, direction, commodity, amount, roll=roll)
        if isinstance(result, EngineFailure):
            return result
        result.state.turn_state.trades.append({
            "direction": result.direction,
            "commodity": result.commodity.value,
            "units": result.units,
            "unit_price": result.unit_price,
            "rp": result.rp_change,
            "degree": result.degree.value,
        })
        self._record(kingdom, result.state)
        return result

    def commerce_phase(self, kingdom: Kingdom, roll: Optional[int] = None) -> Union[TaxResult, EngineFailure]:
        """Collect taxes and close the commerce phase."""
        ts = kingdom.turn_state
        if ts.phase != Phase.COMMERCE or ts.commerce_complete:
            return _wrong_phase(kingdom, "collect taxes")

        result = self.commerce.collect_taxes(kingdom, roll=roll)
        new_ts = result.state.turn_state
        new_ts.taxes_collected = result.amount
        new_ts.commerce_complete = True
        new_ts.phase = Phase.ACTIVITY
        self._record(kingdom, result.state)
        logger.info("Turn %d: commerce complete, %d RP in taxes", kingdom.turn, result.amount)
        return result

    # Activities

    def perform_activity(
        self,
        kingdom: Kingdom,
        activity_id: str,
        inputs: Optional[dict[str, Any]] = None,
        roll: Optional[int] = None,
    ) -> Union[ActivityResult, EngineFailure]:
        ts = kingdom.turn_state
        if ts.phase != Phase.ACTIVITY or ts.activities_complete:
            return _wrong_phase(kingdom, "perform activities")

        definition = self.catalog.activity(activity_id)
        if definition is None:
            return EngineFailure(code=ErrorCode.UNKNOWN_ACTIVITY, message=f"Unknown activity: {activity_id}")
        used, limit = self._slots(ts, definition.category)
        if used >= limit:
            return EngineFailure(
                code=ErrorCode.INVALID_INPUT,
                message=f"All {limit} {definition.category.value} activities have been used this turn",
            )

        result = self.activities.execute_activity(kingdom, activity_id, inputs, roll=roll)
        if isinstance(result, EngineFailure):
            return result
        new_ts = result.state.turn_state
        self._use_slot(new_ts, definition.category)
        new_ts.activity_log.append(f"{definition.name} ({result.degree.label})")
        self._record(kingdom, result.state)
        return result

    @staticmethod
    def _slots(ts: TurnState, category: ActivityCategory) -> tuple[int, int]:
        if category == ActivityCategory.LEADERSHIP:
            return ts.leadership_used, ts.max_leadership
        if category == ActivityCategory.REGION:
            return ts.region_used, ts.max_region
        return ts.civic_used, ts.max_civic

    @staticmethod
    def _use_slot(ts: TurnState, category: ActivityCategory) -> None:
        if category == ActivityCategory.LEADERSHIP:
            ts.leadership_used += 1
        elif category == ActivityCategory.REGION:
            ts.region_used += 1
        else:
            ts.civic_used += 1

    def finish_activities(self, kingdom: Kingdom) -> Union[PhaseResult, EngineFailure]:
        ts = kingdom.turn_state
        if ts.phase != Phase.ACTIVITY or ts.activities_complete:
            return _wrong_phase(kingdom, "finish activities")

        state = kingdom.model_copy(deep=True)
        state.turn_state.activities_complete = True
        state.turn_state.phase = Phase.EVENT
        count = len(state.turn_state.activity_log)
        logger.info("Turn %d: activity phase complete (%d activities)", state.turn, count)
        return PhaseResult(state=state, message=f"Activity phase complete: {count} activities performed")

    # Events and end of turn

    def event(
        self,
        kingdom: Kingdom,
        flat_roll: Optional[int] = None,
        event_id: Optional[str] = None,
        roll: Optional[int] = None,
    ) -> Union[EventResult, EngineFailure]:
        ts = kingdom.turn_state
        if ts.phase != Phase.EVENT or ts.event_complete:
            return _wrong_phase(kingdom, "resolve events")

        result = self.events.run_event_phase(kingdom, flat_roll=flat_roll, event_id=event_id, roll=roll)
        new_ts = result.state.turn_state
        new_ts.event_complete = True
        details = result.event_details
        if details is not None:
            new_ts.event_names.append(details.name)
            new_ts.event_details = {
                "event_id": details.event_id,
                "name": details.name,
                "degree": details.degree.value,
                "effects": [e.message for e in details.effect_log],
            }
        self._record(kingdom, result.state)
        return result

    def end_turn(self, kingdom: Kingdom) -> Union[PhaseResult, EngineFailure]:
        """Close the turn: append its history entry and advance the calendar."""
        ts = kingdom.turn_state
        if not (ts.upkeep_complete and ts.commerce_complete and ts.activities_complete and ts.event_complete):
            return _wrong_phase(kingdom, "end the turn")

        state = kingdom.model_copy(deep=True)
        closing = state.turn_state
        entry = TurnHistoryEntry(
            turn=state.turn,
            month=state.month,
            year=state.year,
            delta=closing.deltas.model_copy(deep=True),
            activities=list(closing.activity_log),
            events=list(closing.event_names),
        )
        state.history.append(entry)
        state.turn += 1
        state.month, state.year = next_month(state.month, state.year)
        state.turn_state = TurnState()
        logger.info("Turn %d ended; now %s %d", entry.turn, state.month, state.year)
        return PhaseResult(
            state=state,
            message=f"Turn {entry.turn} complete. It is now {state.month} {state.year}.",
            history_entry=entry,
        )
