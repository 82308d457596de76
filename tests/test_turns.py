"""
Unit tests for the turn state machine.

Tests phase gating, activity slots, turn history and the calendar from
kingdom_engine/systems/turns.py.
"""

import pytest

from kingdom_engine.models.kingdom import Commodity, StructurePlacement
from kingdom_engine.models.results import EngineFailure, ErrorCode
from kingdom_engine.models.turn import Phase
from kingdom_engine.systems.accounting import diff_kingdoms
from kingdom_engine.systems.turns import next_month
from tests.helpers import advance_to_activities, finish_turn


class TestPhaseGating:
    """Operations out of order come back as InvalidPhase."""

    def test_commerce_before_upkeep(self, engine, kingdom):
        result = engine.commerce(kingdom, roll=10)
        assert isinstance(result, EngineFailure)
        assert result.code == ErrorCode.INVALID_PHASE

    def test_upkeep_twice(self, engine, kingdom, scripted_dice):
        scripted_dice.push(1, 1, 1, 1, 1)
        after = engine.upkeep(kingdom).state
        assert after.turn_state.phase == Phase.COMMERCE
        assert engine.upkeep(after).code == ErrorCode.INVALID_PHASE

    def test_activity_during_upkeep(self, engine, kingdom):
        result = engine.perform_activity(kingdom, "claim-hex", {"hex": "b18"}, roll=10)
        assert result.code == ErrorCode.INVALID_PHASE

    def test_trade_after_commerce(self, engine, activity_kingdom):
        result = engine.trade(activity_kingdom, "sell", "Food", 1, roll=10)
        assert result.code == ErrorCode.INVALID_PHASE

    def test_end_turn_before_event(self, engine, activity_kingdom):
        after = engine.finish_activities(activity_kingdom).state
        assert engine.end_turn(after).code == ErrorCode.INVALID_PHASE

    def test_event_before_activities_finish(self, engine, activity_kingdom):
        assert engine.event(activity_kingdom, flat_roll=5).code == ErrorCode.INVALID_PHASE

    def test_failed_operation_leaves_phase(self, engine, activity_kingdom):
        result = engine.perform_activity(activity_kingdom, "claim-hex", {"hex": "d19"}, roll=10)
        assert result.code == ErrorCode.INVALID_INPUT
        assert activity_kingdom.turn_state.region_used == 0


class TestCommercePhase:
    """Tests for trades and taxes inside the turn."""

    def test_trades_are_recorded(self, engine, kingdom, scripted_dice):
        scripted_dice.push(1, 1, 1, 1, 1)
        after = engine.upkeep(kingdom).state
        traded = engine.trade(after, "sell", "Food", 1, roll=10).state
        assert traded.turn_state.trades[0]["commodity"] == "Food"
        assert traded.turn_state.phase == Phase.COMMERCE

    def test_taxes_close_commerce(self, engine, activity_kingdom):
        ts = activity_kingdom.turn_state
        assert ts.commerce_complete
        assert ts.taxes_collected == 1
        assert ts.phase == Phase.ACTIVITY


class TestActivitySlots:
    """Tests for per-category activity allowances."""

    def test_region_limit(self, engine, activity_kingdom):
        kingdom = activity_kingdom
        for _ in range(3):
            result = engine.perform_activity(kingdom, "go-fishing", {"hex": "c19"}, roll=10)
            assert result.ok
            kingdom = result.state
        assert kingdom.turn_state.region_used == 3
        fourth = engine.perform_activity(kingdom, "go-fishing", {"hex": "c19"}, roll=10)
        assert fourth.code == ErrorCode.INVALID_INPUT

    def test_leadership_limit(self, engine, activity_kingdom):
        kingdom = activity_kingdom
        for _ in range(2):
            kingdom = engine.perform_activity(kingdom, "improve-lifestyle", roll=10).state
        result = engine.perform_activity(kingdom, "improve-lifestyle", roll=10)
        assert result.code == ErrorCode.INVALID_INPUT

    def test_civic_limit_per_settlement(self, engine, activity_kingdom):
        kingdom = engine.perform_activity(
            activity_kingdom, "demolish", {"settlement_id": "Tatzlford", "structure_id": "granary"}
        ).state
        result = engine.perform_activity(
            kingdom, "build-structure", {"settlement_id": "Tatzlford", "structure_id": "houses"}, roll=10
        )
        assert result.code == ErrorCode.INVALID_INPUT

    def test_town_hall_adds_leadership_slot(self, engine, kingdom, scripted_dice):
        kingdom.settlements[0].placements.append(
            StructurePlacement(structure_id="town-hall", block="B", lots=[0, 1])
        )
        scripted_dice.push(1, 1, 1, 1, 1)
        after = engine.upkeep(kingdom).state
        assert after.turn_state.max_leadership == 3

    def test_activity_log(self, engine, activity_kingdom):
        result = engine.perform_activity(activity_kingdom, "claim-hex", {"hex": "b18"}, roll=10)
        assert result.state.turn_state.activity_log == ["Claim Hex (Success)"]


class TestEventPhase:
    """Tests for the event phase inside the turn."""

    def test_event_resolves(self, engine, activity_kingdom):
        kingdom = engine.finish_activities(activity_kingdom).state
        result = engine.event(kingdom, flat_roll=18, event_id="bountiful-harvest", roll=10)
        assert result.event_occurred
        assert result.state.commodity_amount(Commodity.FOOD) == kingdom.commodity_amount(Commodity.FOOD) + 2
        assert result.state.turn_state.event_names == ["Bountiful Harvest"]
        assert result.state.turn_state.event_details["degree"] == "success"

    def test_prognostication_modifier_applies(self, engine, activity_kingdom):
        """Agriculture +5 and a 6 misses DC 13; a +2 forewarning makes it."""
        activity_kingdom.turn_state.event_check_modifier = 2
        kingdom = engine.finish_activities(activity_kingdom).state
        result = engine.event(kingdom, flat_roll=18, event_id="bountiful-harvest", roll=6)
        assert result.event_details.degree.value == "success"
        assert result.state.turn_state.event_check_modifier == 0


class TestEndTurn:
    """Tests for history and the calendar."""

    def test_full_turn(self, engine, kingdom):
        start = kingdom
        current = advance_to_activities(engine, kingdom)
        current = engine.perform_activity(current, "claim-hex", {"hex": "b18"}, roll=10).state
        end = finish_turn(engine, current)

        assert end.turn == 2
        assert end.month == "Gozran"
        assert end.turn_state.phase == Phase.UPKEEP
        assert len(end.history) == 1
        entry = end.history[0]
        assert entry.turn == 1
        assert entry.month == "Pharast"
        assert entry.activities == ["Claim Hex (Success)"]
        assert entry.delta == diff_kingdoms(start, end)
        assert entry.delta.hexes_claimed == ["b18"]

    def test_history_entry_is_independent(self, engine, activity_kingdom):
        """The recorded delta is a copy; later changes to either kingdom leave the other alone."""
        closing = engine.event(engine.finish_activities(activity_kingdom).state, flat_roll=5).state
        end = engine.end_turn(closing).state
        recorded = end.history[-1].delta
        assert recorded == closing.turn_state.deltas
        assert recorded is not closing.turn_state.deltas
        closing.turn_state.deltas.rp += 100
        closing.turn_state.deltas.hexes_claimed.append("z99")
        assert recorded.rp != closing.turn_state.deltas.rp
        assert "z99" not in recorded.hexes_claimed

    def test_history_is_append_only(self, engine, kingdom):
        first = finish_turn(engine, advance_to_activities(engine, kingdom))
        second = finish_turn(engine, advance_to_activities(engine, first))
        assert [h.turn for h in second.history] == [1, 2]
        assert second.history[0] == first.history[0]

    @pytest.mark.parametrize("month,year,expected", [
        ("Pharast", 4710, ("Gozran", 4710)),
        ("Kuthona", 4710, ("Abadius", 4711)),
        ("Abadius", 4711, ("Calistril", 4711)),
    ])
    def test_next_month(self, month, year, expected):
        assert next_month(month, year) == expected

    def test_year_rolls_over(self, engine, kingdom):
        kingdom.month = "Kuthona"
        end = finish_turn(engine, advance_to_activities(engine, kingdom))
        assert (end.month, end.year) == ("Abadius", 4711)
