"""
Unit tests for the engine facade and the preview/commit session.

Tests wiring from settings, KingdomSession preview and commit, and the
catalog corruption policy.
"""

import logging

import pytest

from kingdom_engine.catalog import ActivityCategory, default_catalog
from kingdom_engine.config import EngineSettings
from kingdom_engine.engine import KingdomEngine, KingdomSession
from kingdom_engine.models.results import CatalogError, EngineFailure, ErrorCode
from kingdom_engine.models.kingdom import StructurePlacement
from kingdom_engine.models.turn import Phase


@pytest.fixture
def session(engine, kingdom):
    return KingdomSession(engine, kingdom)


class TestEngineConstruction:
    """Tests for building an engine from settings."""

    def test_defaults(self):
        engine = KingdomEngine()
        assert engine.catalog.strict
        assert engine.catalog.activity("claim-hex") is not None

    def test_settings_seed_dice(self):
        settings = EngineSettings(seed=11)
        first = KingdomEngine(settings=settings)
        second = KingdomEngine(settings=settings)
        assert [first.dice.d20() for _ in range(5)] == [second.dice.d20() for _ in range(5)]

    def test_settings_catalog_policy(self):
        engine = KingdomEngine(settings=EngineSettings(strict_catalog=False))
        assert not engine.catalog.strict
        assert default_catalog().strict

    def test_control_dc(self, engine, kingdom):
        assert engine.control_dc(kingdom) == 15

    def test_resolve_check(self, engine):
        assert engine.resolve_check(6, 15, roll=9).total == 15


class TestKingdomSession:
    """Tests for preview and commit."""

    def test_preview_does_not_change_kingdom(self, session):
        before = session.kingdom
        result = session.preview("execute_activity", "claim-hex", {"hex": "b18"}, roll=10)
        assert result.ok
        assert session.kingdom is before
        assert before.get_hex("b18").status.value == "explored"

    def test_commit(self, session):
        result = session.preview("execute_activity", "claim-hex", {"hex": "b18"}, roll=10)
        assert session.commit(result)
        assert session.kingdom is result.state
        assert session.kingdom.get_hex("b18").is_claimed

    def test_commit_failure_is_refused(self, session):
        failure = session.preview("execute_activity", "claim-hex", {"hex": "d19"}, roll=10)
        assert isinstance(failure, EngineFailure)
        assert not session.commit(failure)

    def test_stale_result_is_refused(self, session, caplog):
        first = session.preview("execute_activity", "claim-hex", {"hex": "b18"}, roll=10)
        second = session.preview("execute_activity", "claim-hex", {"hex": "d18"}, roll=10)
        assert session.commit(first)
        with caplog.at_level(logging.WARNING):
            assert not session.commit(second)
        assert "not previewed" in caplog.text
        assert not session.kingdom.get_hex("d18").is_claimed

    def test_result_from_outside_is_refused(self, session, engine):
        result = engine.execute_activity(session.kingdom, "claim-hex", {"hex": "b18"}, roll=10)
        assert not session.commit(result)

    @pytest.mark.parametrize("operation", ["explode", "_record", "__init__", "catalog"])
    def test_unknown_operation(self, session, operation):
        result = session.preview(operation)
        assert result.code == ErrorCode.INVALID_INPUT

    def test_turn_through_session(self, session, scripted_dice):
        scripted_dice.push(1, 1, 1, 1, 1)
        assert session.commit(session.preview("upkeep"))
        assert session.commit(session.preview("commerce", roll=10))
        assert session.kingdom.turn_state.phase == Phase.ACTIVITY
        assert session.commit(session.preview("finish_activities"))
        assert session.commit(session.preview("event", flat_roll=2))
        assert session.commit(session.preview("end_turn"))
        assert session.kingdom.turn == 2
        assert len(session.kingdom.history) == 1


class TestCatalogLookups:
    """Tests for catalog queries used by the console."""

    @pytest.mark.parametrize("category", list(ActivityCategory))
    def test_activities_in_category(self, catalog, category):
        listed = catalog.activities_in(category)
        assert listed
        assert all(a.category == category for a in listed)

    def test_categories_cover_catalog(self, catalog):
        total = sum(len(catalog.activities_in(c)) for c in ActivityCategory)
        assert total == len(catalog.activities)


class TestCatalogPolicy:
    """Dangling catalog ids raise in strict mode and are logged otherwise."""

    def test_strict_raises(self, engine, kingdom):
        kingdom.feats.append("dragon-riders")
        with pytest.raises(CatalogError):
            engine.execute_activity(kingdom, "claim-hex", {"hex": "b18"}, roll=10)

    def test_lenient_logs(self, scripted_dice, kingdom, caplog):
        engine = KingdomEngine(catalog=default_catalog().configured(False), dice=scripted_dice)
        kingdom.feats.append("dragon-riders")
        with caplog.at_level(logging.WARNING, logger="kingdom_engine"):
            result = engine.execute_activity(kingdom, "claim-hex", {"hex": "b18"}, roll=10)
        assert result.ok
        assert "dragon-riders" in caplog.text

    def test_unknown_placement_skipped(self, scripted_dice, kingdom, caplog):
        engine = KingdomEngine(catalog=default_catalog().configured(False), dice=scripted_dice)
        kingdom.settlements[0].placements.append(
            StructurePlacement(structure_id="moon-base", block="C", lots=[0])
        )
        with caplog.at_level(logging.WARNING, logger="kingdom_engine"):
            assert engine.get_item_bonus_for_activity(kingdom, "quell-unrest") == 0
        assert "moon-base" in caplog.text
