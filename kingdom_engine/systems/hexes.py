"""Hex grid helpers - coordinate parsing and pointy-top offset adjacency.

Coordinates are a column letter (or letters) followed by a row number,
e.g. ``c19``. Columns are zero-indexed from ``a`` and rows start at 1;
even and odd columns have different neighbor offsets.
"""

from __future__ import annotations
import re
from typing import Optional

from kingdom_engine.models.kingdom import WATER_TERRAIN, Hex, HexStatus, Kingdom

COORDINATE_PATTERN = re.compile(r"^([a-z]+)(\d+)$")

# (column delta, row delta)
EVEN_COLUMN_NEIGHBORS = [(-1, -1), (-1, 0), (0, -1), (0, 1), (1, -1), (1, 0)]
ODD_COLUMN_NEIGHBORS = [(-1, 0), (-1, 1), (0, -1), (0, 1), (1, 0), (1, 1)]


def normalize(coordinate: str) -> str:
    return coordinate.strip().lower()


def parse_coordinate(coordinate: str) -> Optional[tuple[int, int]]:
    """Split ``c19`` into (column index, row). None when malformed."""
    match = COORDINATE_PATTERN.match(normalize(coordinate))
    if not match:
        return None
    letters, row = match.groups()
    column = 0
    for ch in letters:
        column = column * 26 + (ord(ch) - ord("a") + 1)
    return column - 1, int(row)


def format_coordinate(column: int, row: int) -> str:
    letters = ""
    column += 1
    while column > 0:
        column, remainder = divmod(column - 1, 26)
        letters = chr(ord("a") + remainder) + letters
    return f"{letters}{row}"


def neighbors(coordinate: str) -> list[str]:
    """The six coordinates adjacent to a hex (off-map ones excluded)."""
    parsed = parse_coordinate(coordinate)
    if parsed is None:
        return []
    column, row = parsed
    offsets = EVEN_COLUMN_NEIGHBORS if column % 2 == 0 else ODD_COLUMN_NEIGHBORS
    result = []
    for dc, dr in offsets:
        c, r = column + dc, row + dr
        if c >= 0 and r >= 1:
            result.append(format_coordinate(c, r))
    return result


def are_adjacent(a: str, b: str) -> bool:
    return normalize(b) in neighbors(a)


def adjacent_to_claimed(kingdom: Kingdom, coordinate: str) -> bool:
    """Whether any neighbor of the hex is claimed by the kingdom."""
    for neighbor in neighbors(coordinate):
        hex_ = kingdom.get_hex(neighbor)
        if hex_ is not None and hex_.status == HexStatus.CLAIMED:
            return True
    return False


def is_water_adjacent(kingdom: Kingdom, hex_: Hex) -> bool:
    """A water hex, or a hex with a known water hex beside it."""
    if hex_.terrain in WATER_TERRAIN:
        return True
    for neighbor in neighbors(hex_.coordinate):
        other = kingdom.get_hex(neighbor)
        if other is not None and other.terrain in WATER_TERRAIN:
            return True
    return False
