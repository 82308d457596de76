"""
Unit tests for the upkeep phase.

Tests leadership vacancies, ruin, resource dice, production, consumption
and milestone awards from kingdom_engine/systems/upkeep.py.
"""

from kingdom_engine.models.kingdom import Ability, Commodity, LeaderRole, RuinType
from kingdom_engine.models.results import UpkeepResult

# A Territory rolls 5d4 at level 1
QUIET_DICE = [1, 1, 1, 1, 1]


class TestResourcesAndFood:
    """Tests for resource dice, production and consumption."""

    def test_baseline(self, engine, kingdom, scripted_dice):
        scripted_dice.push(1, 2, 3, 4, 1)
        result = engine.run_full_upkeep(kingdom)
        assert isinstance(result, UpkeepResult)
        assert result.resource_dice == [1, 2, 3, 4, 1]
        assert result.rp_gained == 11
        assert result.state.rp == 23
        assert result.production == {"Food": 1}
        assert result.consumption == 1
        assert result.state.commodity_amount(Commodity.FOOD) == 3
        assert kingdom.rp == 12

    def test_milestones_on_first_upkeep(self, engine, kingdom, scripted_dice):
        scripted_dice.push(*QUIET_DICE)
        result = engine.run_full_upkeep(kingdom)
        assert set(result.milestones) == {"first-settlement", "zero-unrest", "all-leadership"}
        assert result.state.xp == 160

    def test_milestones_awarded_once(self, engine, kingdom, scripted_dice):
        scripted_dice.push(*QUIET_DICE, *QUIET_DICE)
        first = engine.run_full_upkeep(kingdom)
        second = engine.run_full_upkeep(first.state)
        assert second.milestones == []
        assert second.state.xp == 160

    def test_production_limited_by_storage(self, engine, kingdom, scripted_dice):
        scripted_dice.push(*QUIET_DICE)
        kingdom.commodities[Commodity.FOOD].amount = 5
        result = engine.run_full_upkeep(kingdom)
        assert result.production == {"Food": 0}
        assert any("lost to storage limits" in line for line in result.log)

    def test_food_shortage(self, engine, kingdom, scripted_dice):
        """Muddle Through rolls 1d3 per missing Food."""
        kingdom.commodities[Commodity.FOOD].amount = 0
        kingdom.hexes["c18"].work_site = None
        scripted_dice.push(*QUIET_DICE, 3)
        result = engine.run_full_upkeep(kingdom)
        assert result.food_shortage == 1
        assert result.state.unrest == 3
        assert "zero-unrest" not in result.milestones

    def test_bonus_rp_from_feats(self, engine, kingdom, scripted_dice):
        kingdom.feats.append("capital-investment")
        scripted_dice.push(*QUIET_DICE)
        assert engine.run_full_upkeep(kingdom).rp_gained == 7

    def test_resource_die_step(self, engine, kingdom, scripted_dice):
        """Vast Territory raises the d4 to a d6."""
        kingdom.feats.append("vast-territory")
        scripted_dice.push(6, 6, 6, 6, 6)
        result = engine.run_full_upkeep(kingdom)
        assert result.resource_dice == [6, 6, 6, 6, 6]
        assert result.rp_gained == 30

    def test_penalty_dice(self, engine, kingdom, scripted_dice):
        kingdom.bonuses.penalty_dice = 2
        scripted_dice.push(2, 2, 2)
        result = engine.run_full_upkeep(kingdom)
        assert len(result.resource_dice) == 3


class TestUnrestAndRuin:
    """Tests for vacancies and ruin bookkeeping."""

    def test_vacant_leaders(self, engine, kingdom, scripted_dice):
        kingdom.get_leader(LeaderRole.RULER).vacant = True
        kingdom.get_leader(LeaderRole.VICEROY).vacant = True
        scripted_dice.push(*QUIET_DICE)
        result = engine.run_full_upkeep(kingdom)
        assert set(result.vacancies) == {"ruler", "viceroy"}
        assert result.state.unrest == 3
        assert "all-leadership" not in result.milestones

    def test_ruin_threshold(self, engine, kingdom, scripted_dice):
        kingdom.ruin[RuinType.CORRUPTION].score = 10
        scripted_dice.push(4, *QUIET_DICE)
        result = engine.run_full_upkeep(kingdom)
        assert result.ruin_triggered == ["Corruption"]
        assert result.state.abilities[Ability.CULTURE] == 11
        assert result.state.ruin[RuinType.CORRUPTION].threshold == 11
        assert result.state.unrest == 4

    def test_high_unrest_feeds_ruin(self, engine, kingdom, scripted_dice):
        kingdom.unrest = 10
        scripted_dice.push(*QUIET_DICE)
        result = engine.run_full_upkeep(kingdom)
        assert all(track.score == 1 for track in result.state.ruin.values())

    def test_no_unrest_lets_ruin_recede(self, engine, kingdom, scripted_dice):
        kingdom.ruin[RuinType.CRIME].score = 3
        scripted_dice.push(*QUIET_DICE)
        result = engine.run_full_upkeep(kingdom)
        assert result.state.ruin[RuinType.CRIME].score == 2

    def test_unrest_cap(self, engine, kingdom, scripted_dice):
        """National Spirit caps Unrest at 10 and converts the overflow to Fame."""
        kingdom.feats.append("national-spirit")
        kingdom.unrest = 10
        kingdom.get_leader(LeaderRole.RULER).vacant = True
        scripted_dice.push(*QUIET_DICE)
        result = engine.run_full_upkeep(kingdom)
        assert result.state.unrest == 10
        assert result.state.fame == kingdom.fame + 1


class TestLevelUpFlag:
    """Upkeep flags a level-up but never applies it."""

    def test_flag(self, engine, kingdom, scripted_dice):
        kingdom.xp = 990
        scripted_dice.push(*QUIET_DICE)
        result = engine.run_full_upkeep(kingdom)
        assert result.level_up_available
        assert result.state.level == 1

    def test_no_flag(self, engine, kingdom, scripted_dice):
        scripted_dice.push(*QUIET_DICE)
        assert not engine.run_full_upkeep(kingdom).level_up_available
