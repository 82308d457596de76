"""Structure bonus resolver - what built structures and feats contribute to the kingdom."""

from __future__ import annotations
import logging
from typing import Iterator, Optional, TYPE_CHECKING

from kingdom_engine.models.kingdom import (
    BLOCK_KEYS,
    LOTS_PER_BLOCK,
    Commodity,
    Kingdom,
    Settlement,
    StructurePlacement,
)

if TYPE_CHECKING:
    from kingdom_engine.catalog import Catalog
    from kingdom_engine.catalog.feats import FeatDefinition
    from kingdom_engine.catalog.structures import StructureDefinition

logger = logging.getLogger(__name__)

# Contiguous lot pairs inside a 2x2 block
LOT_PAIRS = [(0, 1), (2, 3), (0, 2), (1, 3)]


def settlement_structures(
    settlement: Settlement, catalog: "Catalog"
) -> Iterator[tuple[StructurePlacement, "StructureDefinition"]]:
    """Placements of a settlement paired with their catalog definitions."""
    for placement in settlement.placements:
        definition = catalog.structure(placement.structure_id)
        if definition is None:
            catalog.corrupted(
                f"Settlement {settlement.name} references unknown structure {placement.structure_id!r}"
            )
            continue
        yield placement, definition


def kingdom_structures(
    kingdom: Kingdom, catalog: "Catalog"
) -> Iterator[tuple[Settlement, StructurePlacement, "StructureDefinition"]]:
    for settlement in kingdom.settlements:
        for placement, definition in settlement_structures(settlement, catalog):
            yield settlement, placement, definition


def acquired_feats(kingdom: Kingdom, catalog: "Catalog") -> list["FeatDefinition"]:
    """Definitions of the kingdom's feats, skipping (or raising on) unknown ids."""
    feats = []
    for feat_id in kingdom.feats:
        feat = catalog.feat(feat_id)
        if feat is None:
            catalog.corrupted(f"Kingdom has unknown feat {feat_id!r}")
            continue
        feats.append(feat)
    return feats


def best_item_bonus(
    kingdom: Kingdom,
    catalog: "Catalog",
    activity_id: Optional[str] = None,
    skill: Optional[str] = None,
) -> tuple[int, Optional[str]]:
    """Largest single item bonus for an activity or skill, with its source.

    Item bonuses never stack: structures in every settlement and acquired
    feats are all candidates, and only the biggest counts.
    """
    best, source = 0, None
    targets = [t for t in (activity_id, skill) if t]
    if not targets:
        return best, source

    for _, _, definition in kingdom_structures(kingdom, catalog):
        if any(definition.grants_bonus_to(t) for t in targets) and definition.item_bonus > best:
            best, source = definition.item_bonus, definition.name

    for feat in acquired_feats(kingdom, catalog):
        bonus = max(
            feat.activity_bonuses.get(activity_id, 0) if activity_id else 0,
            feat.skill_bonuses.get(skill, 0) if skill else 0,
        )
        if bonus > best:
            best, source = bonus, feat.name

    return best, source


def get_item_bonus_for_activity(
    kingdom: Kingdom, activity_id: str, catalog: "Catalog", skill: Optional[str] = None
) -> int:
    """Item bonus that applies to an activity (and optionally its skill)."""
    return best_item_bonus(kingdom, catalog, activity_id=activity_id, skill=skill)[0]


def storage_capacity(kingdom: Kingdom, commodity: Commodity, catalog: "Catalog") -> int:
    """Storage for one commodity: size tier base + storage structures + feats."""
    capacity = catalog.size_tier(kingdom.claimed_hex_count).storage
    for _, _, definition in kingdom_structures(kingdom, catalog):
        capacity += definition.storage.get(commodity, 0)
    for feat in acquired_feats(kingdom, catalog):
        capacity += feat.storage_bonus
    return capacity


def refresh_capacities(kingdom: Kingdom, catalog: "Catalog") -> None:
    """Recompute every commodity capacity in place. Amounts above capacity are discarded."""
    for commodity, stock in kingdom.commodities.items():
        stock.capacity = storage_capacity(kingdom, commodity, catalog)
        stock.amount = min(stock.amount, stock.capacity)


def settlement_consumption(settlement: Settlement, catalog: "Catalog") -> int:
    """Food a settlement eats per turn after structure reductions."""
    consumption = catalog.settlement_tier(settlement.occupied_blocks).consumption
    for placement, definition in settlement_structures(settlement, catalog):
        if not definition.consumption_reduction:
            continue
        if definition.reduction_requires_water and not settlement.block_borders_water(placement.block):
            continue
        consumption -= definition.consumption_reduction
    return max(0, consumption)


def kingdom_consumption(kingdom: Kingdom, catalog: "Catalog") -> int:
    total = sum(settlement_consumption(s, catalog) for s in kingdom.settlements)
    total += sum(f.consumption_modifier for f in acquired_feats(kingdom, catalog))
    return max(0, total)


def capital_has_leadership_structure(kingdom: Kingdom, catalog: "Catalog") -> bool:
    capital = kingdom.capital
    if capital is None:
        return False
    return any(d.leadership_slot for _, d in settlement_structures(capital, catalog))


def max_leadership_activities(kingdom: Kingdom, catalog: "Catalog") -> int:
    """2 per turn, 3 with a town hall, castle or palace in the capital, plus feats."""
    maximum = 3 if capital_has_leadership_structure(kingdom, catalog) else 2
    maximum += sum(f.extra_leadership_activities for f in acquired_feats(kingdom, catalog))
    return maximum


def built_structure_count(kingdom: Kingdom) -> int:
    return sum(len(s.placements) for s in kingdom.settlements)


def find_free_lots(
    settlement: Settlement,
    definition: "StructureDefinition",
    block: Optional[str] = None,
) -> Optional[tuple[str, list[int]]]:
    """First block and lot run that can hold a structure, or None when the settlement is full."""
    blocks = [str(block).strip().upper()] if block else BLOCK_KEYS
    for key in blocks:
        if key not in BLOCK_KEYS:
            return None
        if definition.requires_water and not settlement.block_borders_water(key):
            continue
        used = settlement.occupied_lots(key)
        if definition.lots >= LOTS_PER_BLOCK:
            if not used:
                return key, list(range(LOTS_PER_BLOCK))
        elif definition.lots == 2:
            for pair in LOT_PAIRS:
                if not used.intersection(pair):
                    return key, list(pair)
        else:
            for lot in range(LOTS_PER_BLOCK):
                if lot not in used:
                    return key, [lot]
    return None
