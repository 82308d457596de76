"""
Unit tests for the modifier calculator.

Tests ability modifiers, proficiency, unrest penalties, leader and item
bonuses from kingdom_engine/systems/modifiers.py.
"""

import pytest

from kingdom_engine.models.kingdom import Ability, LeaderRole, Proficiency, StructurePlacement
from kingdom_engine.models.results import EngineFailure, ErrorCode
from kingdom_engine.systems.modifiers import (
    ability_modifier,
    get_invested_leader_bonus,
    get_skill_modifier_breakdown,
    proficiency_bonus,
    unrest_penalty,
)


class TestAbilityModifier:
    """Tests for floor((score - 10) / 2)."""

    @pytest.mark.parametrize("score,expected", [(10, 0), (18, 4), (8, -1), (7, -2), (11, 0), (1, -5)])
    def test_ability_modifier(self, score, expected):
        assert ability_modifier(score) == expected


class TestUnrestPenalty:
    """Tests for the unrest step function."""

    @pytest.mark.parametrize("unrest,expected", [(0, 0), (1, 1), (4, 1), (5, 2), (9, 2), (10, 3), (14, 3), (15, 4), (40, 4)])
    def test_penalty_steps(self, unrest, expected):
        assert unrest_penalty(unrest) == expected

    def test_penalty_never_decreases(self):
        """Higher unrest never gives a smaller penalty."""
        penalties = [unrest_penalty(u) for u in range(0, 30)]
        assert penalties == sorted(penalties)


class TestProficiencyBonus:
    """Tests for level plus tier bonus."""

    def test_untrained_adds_nothing(self):
        assert proficiency_bonus(Proficiency.UNTRAINED, 5) == 0

    @pytest.mark.parametrize("tier,expected", [
        (Proficiency.TRAINED, 5),
        (Proficiency.EXPERT, 7),
        (Proficiency.MASTER, 9),
        (Proficiency.LEGENDARY, 11),
    ])
    def test_trained_tiers_add_level(self, tier, expected):
        assert proficiency_bonus(tier, 3) == expected


class TestSkillModifierBreakdown:
    """Tests for the full modifier breakdown."""

    def test_starter_trade_breakdown(self, kingdom, catalog):
        """Economy 14, Trained at level 1 and an invested treasurer."""
        breakdown = get_skill_modifier_breakdown(kingdom, "Trade", catalog)
        assert breakdown.ability_mod == 2
        assert breakdown.proficiency_bonus == 3
        assert breakdown.leader_bonus == 1
        assert breakdown.item_bonus == 0
        assert breakdown.unrest_penalty == 0
        assert breakdown.total == 6

    def test_untrained_skill(self, kingdom, catalog):
        breakdown = get_skill_modifier_breakdown(kingdom, "Arts", catalog)
        assert breakdown.proficiency_bonus == 0
        assert breakdown.leader_bonus == 0
        assert breakdown.total == 1

    def test_ability_check_has_no_proficiency_or_leader(self, kingdom, catalog):
        breakdown = get_skill_modifier_breakdown(kingdom, "Economy", catalog)
        assert breakdown.proficiency_bonus == 0
        assert breakdown.leader_bonus == 0
        assert breakdown.total == 2

    def test_unrest_penalty_reduces_total(self, kingdom, catalog):
        kingdom.unrest = 5
        breakdown = get_skill_modifier_breakdown(kingdom, "Trade", catalog)
        assert breakdown.unrest_penalty == 2
        assert breakdown.total == 4

    def test_kingdom_circumstance_scalars(self, kingdom, catalog):
        """Kingdom-wide circumstance bonus and penalty apply to every check."""
        kingdom.bonuses.circumstance_bonus = 2
        kingdom.bonuses.circumstance_penalty = 1
        breakdown = get_skill_modifier_breakdown(kingdom, "Trade", catalog)
        assert breakdown.total == 7

    def test_one_off_circumstance(self, kingdom, catalog):
        bonus = get_skill_modifier_breakdown(kingdom, "Trade", catalog, circumstance=2)
        penalty = get_skill_modifier_breakdown(kingdom, "Trade", catalog, circumstance=-1)
        assert bonus.circumstance_bonus == 2
        assert penalty.circumstance_penalty == 1
        assert bonus.total == 8
        assert penalty.total == 5


class TestLeaderBonus:
    """Tests for invested leader bonuses."""

    def test_invested_leader(self, kingdom, catalog):
        assert get_invested_leader_bonus(kingdom, Ability.ECONOMY, catalog) == 1
        assert get_invested_leader_bonus(kingdom, Ability.STABILITY, catalog) == 1

    def test_not_invested(self, kingdom, catalog):
        assert get_invested_leader_bonus(kingdom, Ability.CULTURE, catalog) == 0

    def test_vacant_leader_gives_nothing(self, kingdom, catalog):
        kingdom.get_leader(LeaderRole.TREASURER).vacant = True
        assert get_invested_leader_bonus(kingdom, Ability.ECONOMY, catalog) == 0

    def test_consolidated_leadership_doubles_bonus(self, kingdom, catalog):
        kingdom.feats.append("consolidated-leadership")
        assert get_invested_leader_bonus(kingdom, Ability.ECONOMY, catalog) == 2


class TestItemBonus:
    """Tests for max-of-bonuses item stacking."""

    def test_structure_bonus_to_skill(self, kingdom, catalog, engine):
        kingdom.settlements[0].placements.append(
            StructurePlacement(structure_id="marketplace", block="B", lots=[0, 1])
        )
        assert engine.get_item_bonus_for_activity(kingdom, "collect-taxes", skill="Trade") == 1

    def test_bonuses_do_not_stack(self, kingdom, catalog):
        """A marketplace and Insider Trading both give +1 Trade; only one counts."""
        kingdom.settlements[0].placements.append(
            StructurePlacement(structure_id="marketplace", block="B", lots=[0, 1])
        )
        kingdom.feats.append("insider-trading")
        breakdown = get_skill_modifier_breakdown(kingdom, "Trade", catalog)
        assert breakdown.item_bonus == 1

    def test_largest_bonus_wins(self, kingdom, catalog):
        kingdom.settlements[0].placements.append(
            StructurePlacement(structure_id="library", block="B", lots=[0])
        )
        kingdom.feats.append("famous-scholars")
        breakdown = get_skill_modifier_breakdown(kingdom, "Scholarship", catalog, activity_id="creative-solution")
        assert breakdown.item_bonus == 2

    def test_activity_bonus(self, kingdom, engine):
        kingdom.settlements[0].placements.append(
            StructurePlacement(structure_id="shrine", block="B", lots=[0])
        )
        assert engine.get_item_bonus_for_activity(kingdom, "celebrate-holiday") == 1
        assert engine.get_item_bonus_for_activity(kingdom, "quell-unrest") == 0


class TestEngineModifierQueries:
    """Tests for the engine's validation of names."""

    def test_unknown_skill(self, engine, kingdom):
        result = engine.get_skill_modifier_breakdown(kingdom, "Juggling")
        assert isinstance(result, EngineFailure)
        assert result.code == ErrorCode.INVALID_INPUT

    def test_ability_name_case_insensitive(self, engine, kingdom):
        result = engine.get_skill_modifier_breakdown(kingdom, "economy")
        assert result.total == 2

    def test_unknown_ability_for_leader_bonus(self, engine, kingdom):
        result = engine.get_invested_leader_bonus(kingdom, "Charisma")
        assert isinstance(result, EngineFailure)
        assert engine.get_invested_leader_bonus(kingdom, "stability") == 1

    def test_leader_bonus_by_skill(self, engine, kingdom):
        """Skills resolve to their governing ability."""
        assert engine.get_invested_leader_bonus(kingdom, "Trade") == 1
        assert engine.get_invested_leader_bonus(kingdom, "Wilderness") == 1
        assert engine.get_invested_leader_bonus(kingdom, "Arts") == 0
