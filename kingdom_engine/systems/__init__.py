"""Core rules systems: checks, activities, commerce, upkeep, events, progression and turns."""

from .dice import DiceRoller, ScriptedDiceRoller, DiceExhaustedError
from .activities import ActivitySystem
from .commerce import CommerceSystem
from .events import EventSystem
from .progression import ProgressionSystem
from .upkeep import UpkeepSystem
from .turns import TurnSystem

__all__ = [
    "DiceRoller",
    "ScriptedDiceRoller",
    "DiceExhaustedError",
    "ActivitySystem",
    "CommerceSystem",
    "EventSystem",
    "ProgressionSystem",
    "UpkeepSystem",
    "TurnSystem",
]
