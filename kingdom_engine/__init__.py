"""Kingdom turn engine: skill checks, activities, upkeep, commerce, events and progression."""

from .engine import KingdomEngine, KingdomSession

__all__ = ["KingdomEngine", "KingdomSession"]
