"""
Unit tests for hex grid helpers.

Tests coordinate parsing and offset-grid adjacency from
kingdom_engine/systems/hexes.py.
"""

import pytest

from kingdom_engine.models.kingdom import Hex, Terrain
from kingdom_engine.systems.hexes import (
    adjacent_to_claimed,
    are_adjacent,
    format_coordinate,
    is_water_adjacent,
    neighbors,
    parse_coordinate,
)


class TestCoordinates:
    """Tests for parsing and formatting coordinates."""

    @pytest.mark.parametrize("text,expected", [
        ("a1", (0, 1)),
        ("c19", (2, 19)),
        ("C19", (2, 19)),
        (" d7 ", (3, 7)),
        ("aa3", (26, 3)),
    ])
    def test_parse(self, text, expected):
        assert parse_coordinate(text) == expected

    @pytest.mark.parametrize("text", ["", "19c", "c", "c-1", "c 19"])
    def test_parse_invalid(self, text):
        assert parse_coordinate(text) is None

    @pytest.mark.parametrize("column,row", [(0, 1), (2, 19), (25, 4), (26, 3)])
    def test_format_inverts_parse(self, column, row):
        assert parse_coordinate(format_coordinate(column, row)) == (column, row)


class TestNeighbors:
    """Tests for pointy-top offset adjacency."""

    def test_even_column(self):
        """Column c is index 2, an even column."""
        assert set(neighbors("c19")) == {"b18", "b19", "c18", "c20", "d18", "d19"}

    def test_odd_column(self):
        assert set(neighbors("b19")) == {"a19", "a20", "b18", "b20", "c19", "c20"}

    def test_map_edge(self):
        assert set(neighbors("a1")) == {"a2", "b1"}

    def test_invalid_has_no_neighbors(self):
        assert neighbors("nowhere!") == []

    def test_adjacency_is_symmetric(self):
        for coordinate in ("c19", "b19", "f7", "a2"):
            for other in neighbors(coordinate):
                assert are_adjacent(other, coordinate)


class TestKingdomAdjacency:
    """Tests for adjacency against a kingdom's map."""

    def test_adjacent_to_claimed(self, kingdom):
        assert adjacent_to_claimed(kingdom, "d19")
        assert adjacent_to_claimed(kingdom, "b20")
        assert not adjacent_to_claimed(kingdom, "h3")

    def test_water_adjacent(self, kingdom):
        """c19 borders the river in c20; c18 does not."""
        assert is_water_adjacent(kingdom, kingdom.get_hex("c19"))
        assert not is_water_adjacent(kingdom, kingdom.get_hex("c18"))

    def test_water_hex_itself(self, kingdom):
        assert is_water_adjacent(kingdom, Hex(coordinate="m5", terrain=Terrain.LAKE))
