"""
Unit tests for the activity executor.

Tests validation order, effect application, cost deduction and delta
accounting from kingdom_engine/systems/activities.py and effects.py.
"""

import pytest

from kingdom_engine.models.checks import Degree
from kingdom_engine.models.kingdom import Commodity, HexStatus, LeaderRole, WorkSiteType
from kingdom_engine.models.results import ActivityResult, EngineFailure, ErrorCode
from kingdom_engine.models.turn import KingdomDelta
from kingdom_engine.systems.accounting import diff_kingdoms


class TestActivityFailures:
    """Expected failures come back as EngineFailure and leave the kingdom alone."""

    def test_unknown_activity(self, engine, kingdom):
        result = engine.execute_activity(kingdom, "juggle-torches")
        assert isinstance(result, EngineFailure)
        assert result.code == ErrorCode.UNKNOWN_ACTIVITY

    def test_insufficient_rp_does_not_mutate(self, engine, kingdom):
        """Houses cost 3 RP; with 1 RP the activity is refused."""
        kingdom.rp = 1
        before = kingdom.model_dump()
        result = engine.execute_activity(
            kingdom, "build-structure", {"settlement_id": "Tatzlford", "structure_id": "houses"}, roll=15
        )
        assert isinstance(result, EngineFailure)
        assert result.code == ErrorCode.INSUFFICIENT_RESOURCES
        assert not hasattr(result, "state")
        assert kingdom.model_dump() == before

    def test_insufficient_commodities(self, engine, kingdom):
        kingdom.commodities[Commodity.LUMBER].amount = 0
        result = engine.execute_activity(
            kingdom, "build-structure", {"settlement_id": "Tatzlford", "structure_id": "houses"}, roll=15
        )
        assert result.code == ErrorCode.INSUFFICIENT_RESOURCES

    def test_unknown_structure(self, engine, kingdom):
        result = engine.execute_activity(
            kingdom, "build-structure", {"settlement_id": "Tatzlford", "structure_id": "moon-base"}
        )
        assert result.code == ErrorCode.UNKNOWN_STRUCTURE

    def test_missing_required_input(self, engine, kingdom):
        result = engine.execute_activity(kingdom, "build-structure", {"structure_id": "houses"})
        assert result.code == ErrorCode.INVALID_INPUT
        assert "settlement_id" in result.message

    def test_structure_above_kingdom_level(self, engine, kingdom):
        kingdom.rp = 100
        kingdom.commodities[Commodity.LUMBER].amount = 4
        result = engine.execute_activity(
            kingdom, "build-structure", {"settlement_id": "Tatzlford", "structure_id": "marketplace"}
        )
        assert result.code == ErrorCode.INVALID_INPUT

    def test_claim_unexplored_hex(self, engine, kingdom):
        result = engine.execute_activity(kingdom, "claim-hex", {"hex": "d19"}, roll=15)
        assert result.code == ErrorCode.INVALID_INPUT

    def test_claim_already_claimed(self, engine, kingdom):
        result = engine.execute_activity(kingdom, "claim-hex", {"hex": "c18"}, roll=15)
        assert result.code == ErrorCode.INVALID_INPUT

    def test_farmland_needs_farmable_terrain(self, engine, kingdom):
        result = engine.execute_activity(kingdom, "establish-farmland", {"hex": "b19"}, roll=15)
        assert result.code == ErrorCode.INVALID_INPUT

    def test_work_site_terrain(self, engine, kingdom):
        result = engine.execute_activity(
            kingdom, "establish-work-site", {"hex": "b19", "site_type": "quarry"}, roll=15
        )
        assert result.code == ErrorCode.INVALID_INPUT

    def test_unknown_site_type(self, engine, kingdom):
        result = engine.execute_activity(
            kingdom, "establish-work-site", {"hex": "b19", "site_type": "spaceport"}, roll=15
        )
        assert result.code == ErrorCode.INVALID_INPUT

    def test_reconnoiter_far_hex(self, engine, kingdom):
        result = engine.execute_activity(kingdom, "reconnoiter-hex", {"hex": "h3"}, roll=15)
        assert result.code == ErrorCode.INVALID_INPUT

    def test_relocate_needs_second_settlement(self, engine, kingdom):
        result = engine.execute_activity(kingdom, "relocate-capital", {"settlement_id": "Tatzlford"}, roll=15)
        assert result.code == ErrorCode.INVALID_INPUT

    def test_duplicate_settlement_name(self, engine, kingdom):
        result = engine.execute_activity(
            kingdom, "establish-settlement", {"hex": "b19", "settlement_name": "tatzlford"}, roll=15
        )
        assert result.code == ErrorCode.INVALID_INPUT

    @pytest.mark.parametrize("block", [2, "Z", "AB"])
    def test_unknown_block(self, engine, kingdom, block):
        result = engine.execute_activity(
            kingdom, "build-structure",
            {"settlement_id": "Tatzlford", "structure_id": "houses", "block": block}, roll=10,
        )
        assert isinstance(result, EngineFailure)
        assert result.code == ErrorCode.INVALID_INPUT
        assert "Unknown block" in result.message


class TestActivityOutcomes:
    """Tests for resolved activities."""

    def test_claim_hex_success(self, engine, kingdom):
        """Exploration +6 and a 10 against DC 15 is a success."""
        result = engine.execute_activity(kingdom, "claim-hex", {"hex": "b18"}, roll=10)
        assert isinstance(result, ActivityResult)
        assert result.degree == Degree.SUCCESS
        assert result.state.get_hex("b18").status == HexStatus.CLAIMED
        assert result.state.xp == 10
        assert result.state.rp == kingdom.rp - 1
        assert result.rp_cost == 1
        # Input untouched
        assert kingdom.get_hex("b18").status == HexStatus.EXPLORED

    def test_cost_is_last_effect(self, engine, kingdom):
        result = engine.execute_activity(kingdom, "claim-hex", {"hex": "b18"}, roll=10)
        assert result.effect_log[-1].kind == "cost"
        assert result.effect_log[-1].delta.rp == -1

    def test_critical_failure(self, engine, kingdom):
        """A natural 1 turns a failure into a critical failure."""
        result = engine.execute_activity(kingdom, "claim-hex", {"hex": "b18"}, roll=1)
        assert result.degree == Degree.CRITICAL_FAILURE
        assert result.state.unrest == 1
        assert result.state.get_hex("b18").status == HexStatus.EXPLORED
        assert result.state.rp == kingdom.rp - 1

    def test_frontier_mentality_makes_claims_free(self, engine, kingdom):
        kingdom.feats.append("frontier-mentality")
        result = engine.execute_activity(kingdom, "claim-hex", {"hex": "b18"}, roll=10)
        assert result.rp_cost == 0
        assert result.state.rp == kingdom.rp

    def test_reconnoiter_new_hex(self, engine, kingdom):
        result = engine.execute_activity(kingdom, "reconnoiter-hex", {"hex": "B20", "terrain": "hills"}, roll=12)
        assert result.degree == Degree.SUCCESS
        explored = result.state.get_hex("b20")
        assert explored.status == HexStatus.EXPLORED
        assert explored.terrain.value == "hills"
        assert "b20" not in kingdom.hexes

    def test_work_site(self, engine, kingdom):
        result = engine.execute_activity(
            kingdom, "establish-work-site", {"hex": "b19", "site_type": "Lumber"}, roll=10
        )
        site = result.state.get_hex("b19").work_site
        assert site.type == WorkSiteType.LUMBER
        assert site.production == 1

    def test_critical_farmland_has_bonus_production(self, engine, kingdom):
        kingdom.hexes["c18"].work_site = None
        result = engine.execute_activity(kingdom, "establish-farmland", {"hex": "c18"}, roll=20)
        assert result.degree == Degree.CRITICAL_SUCCESS
        assert result.state.get_hex("c18").work_site.production == 2

    def test_build_structure(self, engine, kingdom):
        """Houses are built with Industry (+6)."""
        result = engine.execute_activity(
            kingdom, "build-structure", {"settlement_id": "Tatzlford", "structure_id": "houses"}, roll=10
        )
        assert result.degree == Degree.SUCCESS
        capital = result.state.get_settlement("Tatzlford")
        assert capital.structure_ids.count("houses") == 2
        assert result.state.rp == kingdom.rp - 3
        assert result.state.commodity_amount(Commodity.LUMBER) == 1
        assert result.state.xp == 10

    def test_build_in_chosen_block(self, engine, kingdom):
        result = engine.execute_activity(
            kingdom, "build-structure",
            {"settlement_id": "Tatzlford", "structure_id": "houses", "block": " b "}, roll=10,
        )
        assert result.degree == Degree.SUCCESS
        assert result.state.settlements[0].placements[-1].block == "B"

    def test_failed_build_refunds_half(self, engine, kingdom):
        result = engine.execute_activity(
            kingdom, "build-structure", {"settlement_id": "Tatzlford", "structure_id": "herbalist"}, roll=5
        )
        assert result.degree == Degree.FAILURE
        assert result.state.rp == kingdom.rp - 10 + 5
        assert len(result.state.settlements[0].placements) == 2

    def test_build_raises_storage(self, engine, kingdom):
        kingdom.rp = 20
        before = kingdom.commodities[Commodity.FOOD].capacity
        result = engine.execute_activity(
            kingdom, "build-structure", {"settlement_id": "Tatzlford", "structure_id": "granary"}, roll=15
        )
        assert result.degree == Degree.SUCCESS
        assert result.state.commodities[Commodity.FOOD].capacity == before + 1

    def test_demolish_has_no_check(self, engine, kingdom):
        """Demolish has no skill, so no dice are needed (the scripted roller is empty)."""
        result = engine.execute_activity(kingdom, "demolish", {"settlement_id": "Tatzlford", "structure_id": "granary"})
        assert result.degree == Degree.SUCCESS
        assert result.check is None
        assert "granary" not in result.state.settlements[0].structure_ids
        assert result.state.commodities[Commodity.FOOD].capacity == kingdom.commodities[Commodity.FOOD].capacity - 1

    def test_establish_settlement(self, engine, kingdom):
        result = engine.execute_activity(
            kingdom, "establish-settlement", {"hex": "c18", "settlement_name": "Oleg's"}, roll=18
        )
        founded = result.state.get_settlement("Oleg's")
        assert founded is not None
        assert not founded.is_capital
        assert result.state.get_hex("c18").settlement_id == founded.id

    def test_new_leadership(self, engine, kingdom):
        kingdom.get_leader(LeaderRole.VICEROY).vacant = True
        result = engine.execute_activity(
            kingdom, "new-leadership", {"role": "viceroy", "leader_name": "Tartuk"}, roll=19
        )
        assert result.degree.succeeded
        leader = result.state.get_leader(LeaderRole.VICEROY)
        assert leader.name == "Tartuk"
        assert not leader.is_vacant

    def test_dice_amounts_are_rolled(self, engine, kingdom, scripted_dice):
        """Abandon Hex on a critical failure adds 1d4 Unrest."""
        scripted_dice.push(3)
        result = engine.execute_activity(kingdom, "abandon-hex", {"hex": "b19"}, roll=1)
        assert result.degree == Degree.CRITICAL_FAILURE
        assert result.state.unrest == 3

    def test_prognostication_sets_event_modifier(self, engine, kingdom):
        result = engine.execute_activity(kingdom, "prognostication", roll=20)
        assert result.state.turn_state.event_check_modifier > 0
        assert result.state.turn_state.pending_specials


class TestDeltaAccounting:
    """Logged effect deltas reproduce the state diff."""

    @pytest.mark.parametrize("activity_id,inputs,roll", [
        ("claim-hex", {"hex": "b18"}, 10),
        ("claim-hex", {"hex": "b18"}, 1),
        ("build-structure", {"settlement_id": "Tatzlford", "structure_id": "houses"}, 20),
        ("reconnoiter-hex", {"hex": "d19"}, 20),
        ("harvest-crops", {"hex": "c18"}, 20),
        ("establish-settlement", {"hex": "b19", "settlement_name": "Brevoy Gate"}, 15),
        ("demolish", {"settlement_id": "Tatzlford", "structure_id": "granary"}, None),
    ])
    def test_round_trip(self, engine, kingdom, activity_id, inputs, roll):
        result = engine.execute_activity(kingdom, activity_id, inputs, roll=roll)
        assert isinstance(result, ActivityResult)
        assert diff_kingdoms(kingdom, result.state) == result.delta

    def test_delta_addition(self):
        total = KingdomDelta(rp=2, commodities={"Food": 1}) + KingdomDelta(rp=-2, commodities={"Food": -1, "Ore": 2})
        assert total.rp == 0
        assert total.commodities == {"Ore": 2}
