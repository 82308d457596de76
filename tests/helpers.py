"""Shared helpers for driving a kingdom through a turn in tests."""

from kingdom_engine.engine import KingdomEngine
from kingdom_engine.models.kingdom import Kingdom


def advance_to_activities(engine: KingdomEngine, kingdom: Kingdom) -> Kingdom:
    """Run upkeep (all resource dice 1s) and taxes (roll 10); return the activity-phase kingdom."""
    engine.dice.push(*[1] * 5)
    kingdom = engine.upkeep(kingdom).state
    return engine.commerce(kingdom, roll=10).state


def finish_turn(engine: KingdomEngine, kingdom: Kingdom, flat_roll: int = 5) -> Kingdom:
    """Close the activity phase, resolve a quiet event phase and end the turn."""
    kingdom = engine.finish_activities(kingdom).state
    kingdom = engine.event(kingdom, flat_roll=flat_roll).state
    return engine.end_turn(kingdom).state
