"""
Pytest fixtures for the kingdom engine test suite.

The starter kingdom is level 1 with three claimed hexes (control DC 15),
Economy 14 and an invested treasurer, so Trade, Exploration and Industry
checks are all at +6 and Agriculture and Wilderness at +5.
"""

import pytest

from kingdom_engine.bootstrap import starter_kingdom
from kingdom_engine.catalog import default_catalog
from kingdom_engine.engine import KingdomEngine
from kingdom_engine.systems.dice import DiceRoller, ScriptedDiceRoller
from tests.helpers import advance_to_activities


# =============================================================================
# DICE FIXTURES
# =============================================================================


@pytest.fixture
def seeded_dice():
    """A seeded roller for reproducible random rolls."""
    return DiceRoller(seed=42)


@pytest.fixture
def scripted_dice():
    """An empty scripted roller; tests push the values they need."""
    return ScriptedDiceRoller([])


# =============================================================================
# ENGINE FIXTURES
# =============================================================================


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def engine(catalog, scripted_dice):
    """Engine whose every random roll comes from ``scripted_dice``."""
    return KingdomEngine(catalog=catalog, dice=scripted_dice)


@pytest.fixture
def kingdom(catalog):
    """Fresh starter kingdom at the start of turn 1."""
    return starter_kingdom("Test Realm", catalog)


@pytest.fixture
def activity_kingdom(engine, kingdom):
    """Starter kingdom moved into the activity phase of turn 1."""
    return advance_to_activities(engine, kingdom)
