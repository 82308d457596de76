"""Delta accounting - what changed between two kingdom states."""

from __future__ import annotations

from kingdom_engine.models.kingdom import HexStatus, Kingdom
from kingdom_engine.models.turn import KingdomDelta


def diff_kingdoms(before: Kingdom, after: Kingdom) -> KingdomDelta:
    """Net change from ``before`` to ``after`` in the tracked quantities.

    Applying a list of effects and summing their logged deltas gives the
    same result as diffing the states on either side.
    """
    ruin = {
        ruin_type.value: after.ruin[ruin_type].score - before.ruin[ruin_type].score
        for ruin_type in after.ruin
    }
    commodities = {
        commodity.value: after.commodities[commodity].amount - before.commodities[commodity].amount
        for commodity in after.commodities
    }

    claimed, abandoned, explored = [], [], []
    for coordinate in set(before.hexes) | set(after.hexes):
        old = before.hexes.get(coordinate)
        new = after.hexes.get(coordinate)
        old_status = old.status if old else HexStatus.UNEXPLORED
        new_status = new.status if new else HexStatus.UNEXPLORED
        if new_status == HexStatus.CLAIMED and old_status != HexStatus.CLAIMED:
            claimed.append(coordinate)
        if old_status == HexStatus.CLAIMED and new_status != HexStatus.CLAIMED:
            abandoned.append(coordinate)
        if old_status == HexStatus.UNEXPLORED and new_status != HexStatus.UNEXPLORED:
            explored.append(coordinate)

    old_placements = {
        p.id: p.structure_id for s in before.settlements for p in s.placements
    }
    new_placements = {
        p.id: p.structure_id for s in after.settlements for p in s.placements
    }
    built = [sid for pid, sid in new_placements.items() if pid not in old_placements]
    demolished = [sid for pid, sid in old_placements.items() if pid not in new_placements]

    old_settlements = {s.id for s in before.settlements}
    founded = [s.name for s in after.settlements if s.id not in old_settlements]

    return KingdomDelta(
        rp=after.rp - before.rp,
        xp=after.xp - before.xp,
        fame=after.fame - before.fame,
        infamy=after.infamy - before.infamy,
        unrest=after.unrest - before.unrest,
        ruin={k: v for k, v in ruin.items() if v},
        commodities={k: v for k, v in commodities.items() if v},
        hexes_claimed=sorted(claimed),
        hexes_abandoned=sorted(abandoned),
        hexes_explored=sorted(explored),
        structures_built=sorted(built),
        structures_demolished=sorted(demolished),
        settlements_founded=sorted(founded),
    )
