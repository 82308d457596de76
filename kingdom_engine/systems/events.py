"""Event resolver - the random kingdom event at the end of each turn."""

from __future__ import annotations
import logging
from typing import Optional, TYPE_CHECKING

from kingdom_engine.models.checks import Degree
from kingdom_engine.models.kingdom import Kingdom
from kingdom_engine.models.results import EventDetails, EventResult
from kingdom_engine.systems.checks import control_dc, resolve_check
from kingdom_engine.systems.effects import EffectApplier, EffectContext
from kingdom_engine.systems.modifiers import get_skill_modifier_breakdown

if TYPE_CHECKING:
    from kingdom_engine.catalog import Catalog
    from kingdom_engine.catalog.events import EventDefinition
    from kingdom_engine.systems.dice import DiceRoller

logger = logging.getLogger(__name__)

DEFAULT_EVENT_DC = 16
QUIET_TURN_DC_DROP = 5


class EventSystem:
    """Decides whether an event happens and resolves it like an activity."""

    def __init__(self, catalog: "Catalog", dice: "DiceRoller"):
        self.catalog = catalog
        self.dice = dice
        self.effects = EffectApplier(catalog, dice)

    def draw_event(self) -> "EventDefinition":
        events = self.catalog.events
        return self.dice.weighted_choice(events, [e.weight for e in events], "Event table")

    def run_event_phase(
        self,
        kingdom: Kingdom,
        flat_roll: Optional[int] = None,
        event_id: Optional[str] = None,
        roll: Optional[int] = None,
    ) -> EventResult:
        """Roll the event flat check and resolve the drawn event, if any.

        An event happens when a d20 meets the kingdom's event DC. A quiet
        turn lowers that DC for next time; an event resets it.
        """
        state = kingdom.model_copy(deep=True)
        dc = kingdom.event_dc
        flat = flat_roll if flat_roll is not None else self.dice.d20("Event flat check")
        circumstance = state.turn_state.event_check_modifier
        state.turn_state.event_check_modifier = 0

        if flat < dc:
            state.event_dc = max(1, dc - QUIET_TURN_DC_DROP)
            logger.info("No event this turn (flat check %d vs %d)", flat, dc)
            return EventResult(state=state, event_occurred=False, flat_check=flat, event_dc=dc)

        state.event_dc = DEFAULT_EVENT_DC
        event = self.catalog.event(event_id) if event_id else self.draw_event()
        if event is None:
            self.catalog.corrupted(f"Unknown event: {event_id}")
            return EventResult(state=state, event_occurred=False, flat_check=flat, event_dc=dc)

        check = None
        if event.skill:
            breakdown = get_skill_modifier_breakdown(
                state, event.skill, self.catalog, activity_id=event.id, circumstance=circumstance
            )
            event_dc = control_dc(state, self.catalog) + event.dc_modifier
            check = resolve_check(breakdown, event_dc, roll=roll, dice=self.dice, reason=event.name)
            degree = check.degree
        else:
            degree = Degree.SUCCESS

        context = EffectContext(source=event.id)
        effect_log = self.effects.apply_all(state, event.effects_for(degree), context)
        details = EventDetails(
            event_id=event.id,
            name=event.name,
            description=event.messages.get(degree, event.description),
            degree=degree,
            check=check,
            effect_log=effect_log,
        )
        logger.info("Event %s: %s", event.name, degree.label)
        return EventResult(state=state, event_occurred=True, flat_check=flat, event_dc=dc, event_details=details)
