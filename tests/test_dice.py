"""
Unit tests for the dice rollers.

Tests DiceRoller and ScriptedDiceRoller from kingdom_engine/systems/dice.py.
"""

import pytest

from kingdom_engine.systems.dice import (
    DiceExhaustedError,
    DiceResult,
    DiceRoller,
    ScriptedDiceRoller,
    parse_notation,
)


class TestParseNotation:
    """Tests for dice notation parsing."""

    @pytest.mark.parametrize("notation,expected", [
        ("1d20", (1, 1, 20, 0)),
        ("d6", (1, 1, 6, 0)),
        ("2d6+3", (1, 2, 6, 3)),
        ("1d8-2", (1, 1, 8, -2)),
        ("-1d4", (-1, 1, 4, 0)),
    ])
    def test_valid(self, notation, expected):
        assert parse_notation(notation) == expected

    @pytest.mark.parametrize("notation", ["", "abc", "2x6", "1d0"])
    def test_invalid(self, notation):
        with pytest.raises(ValueError):
            parse_notation(notation)


class TestDiceRoller:
    """Tests for the seedable roller."""

    def test_roll_within_range(self, seeded_dice):
        result = seeded_dice.roll("3d6", "test roll")
        assert isinstance(result, DiceResult)
        assert len(result.rolls) == 3
        assert all(1 <= r <= 6 for r in result.rolls)
        assert result.total == sum(result.rolls)

    def test_negative_notation(self, seeded_dice):
        result = seeded_dice.roll("-1d4")
        assert -4 <= result.total <= -1

    def test_same_seed_same_rolls(self):
        first = DiceRoller(seed=7)
        second = DiceRoller(seed=7)
        assert [first.d20() for _ in range(10)] == [second.d20() for _ in range(10)]

    def test_set_seed_restarts_sequence(self, seeded_dice):
        before = [seeded_dice.die(20) for _ in range(5)]
        seeded_dice.set_seed(42)
        assert [seeded_dice.die(20) for _ in range(5)] == before

    def test_roll_log(self, seeded_dice):
        seeded_dice.roll("1d6", "first")
        seeded_dice.roll("1d6", "second")
        assert [r.reason for r in seeded_dice.roll_log] == ["first", "second"]
        seeded_dice.clear_log()
        assert seeded_dice.roll_log == []

    def test_roll_many_zero(self, seeded_dice):
        assert seeded_dice.roll_many(0, 6) == []


class TestScriptedDiceRoller:
    """Tests for pre-rolled dice."""

    def test_values_in_order(self):
        dice = ScriptedDiceRoller([3, 5, 1])
        assert dice.roll_many(3, 6) == [3, 5, 1]
        assert dice.remaining == 0

    def test_values_clamped_to_die(self):
        dice = ScriptedDiceRoller([12, 0])
        assert dice.die(4) == 4
        assert dice.die(4) == 1

    def test_exhausted_raises(self):
        dice = ScriptedDiceRoller([])
        with pytest.raises(DiceExhaustedError):
            dice.d20()

    def test_fallback(self):
        dice = ScriptedDiceRoller([], fallback=DiceRoller(seed=1))
        assert 1 <= dice.d20() <= 20

    def test_push(self):
        dice = ScriptedDiceRoller([])
        dice.push(4, 2)
        assert dice.remaining == 2
        assert dice.roll("2d6").total == 6


class TestWeightedChoice:
    """Tests for weighted selection."""

    def test_point_selects_item(self):
        items = ["a", "b", "c"]
        assert ScriptedDiceRoller([1]).weighted_choice(items, [2, 3, 5]) == "a"
        assert ScriptedDiceRoller([3]).weighted_choice(items, [2, 3, 5]) == "b"
        assert ScriptedDiceRoller([6]).weighted_choice(items, [2, 3, 5]) == "c"

    def test_needs_positive_weight(self):
        with pytest.raises(ValueError):
            ScriptedDiceRoller([1]).weighted_choice(["a"], [0])
