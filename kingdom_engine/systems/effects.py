"""Effect applier - turns outcome effects into changes on a (copied) kingdom.

Each handler mutates the kingdom it is given and reports the exact change
it made as a ``KingdomDelta``. Callers are responsible for handing in a
copy; nothing here copies state.
"""

from __future__ import annotations
import logging
from typing import Any, Callable, Optional, TYPE_CHECKING

from kingdom_engine.models.effects import (
    AbandonHexEffect,
    AssignLeaderEffect,
    BuildStructureEffect,
    ClaimHexEffect,
    ClearHexEffect,
    CommodityEffect,
    DemolishStructureEffect,
    ExploreHexEffect,
    FameEffect,
    FortifyEffect,
    FoundSettlementEffect,
    InfamyEffect,
    RefundEffect,
    RelocateCapitalEffect,
    ReputationEffect,
    RoadEffect,
    RPEffect,
    RuinEffect,
    SpecialEffect,
    UnrestEffect,
    WorkSiteEffect,
    XPEffect,
)
from kingdom_engine.models.kingdom import (
    Commodity,
    Hex,
    HexStatus,
    Kingdom,
    Leader,
    LeaderRole,
    RuinType,
    Settlement,
    StructurePlacement,
    Terrain,
    WaterBorder,
    WorkSite,
    WorkSiteType,
)
from kingdom_engine.models.results import AppliedEffect
from kingdom_engine.models.turn import KingdomDelta
from kingdom_engine.systems.structures import acquired_feats, find_free_lots

if TYPE_CHECKING:
    from kingdom_engine.catalog import Catalog
    from kingdom_engine.systems.dice import DiceRoller

logger = logging.getLogger(__name__)

# Next-event circumstance modifier granted by prognostication outcomes
FORESIGHT_MODIFIERS = {
    "forewarning-detailed": 2,
    "forewarning": 1,
    "false-insight": -1,
}


def _signed(value: int) -> str:
    return f"{value:+d}"


class EffectContext:
    """Per-invocation data effects may read: player inputs and the activity's RP cost."""

    def __init__(self, inputs: Optional[dict[str, Any]] = None, rp_cost: int = 0, source: str = ""):
        self.inputs = inputs or {}
        self.rp_cost = rp_cost
        self.source = source

    def get(self, key: str) -> Any:
        value = self.inputs.get(key)
        if isinstance(value, str):
            value = value.strip()
        return value


class EffectApplier:
    """Applies effects from the closed effect union, one handler per kind."""

    def __init__(self, catalog: "Catalog", dice: "DiceRoller"):
        self.catalog = catalog
        self.dice = dice
        self._handlers: dict[type, Callable[[Kingdom, Any, EffectContext], tuple[str, KingdomDelta]]] = {
            RPEffect: self._apply_rp,
            RefundEffect: self._apply_refund,
            CommodityEffect: self._apply_commodity,
            UnrestEffect: self._apply_unrest,
            RuinEffect: self._apply_ruin,
            FameEffect: self._apply_fame,
            InfamyEffect: self._apply_infamy,
            XPEffect: self._apply_xp,
            ReputationEffect: self._apply_reputation,
            ClaimHexEffect: self._apply_claim_hex,
            AbandonHexEffect: self._apply_abandon_hex,
            ExploreHexEffect: self._apply_explore_hex,
            WorkSiteEffect: self._apply_work_site,
            RoadEffect: self._apply_road,
            FortifyEffect: self._apply_fortify,
            ClearHexEffect: self._apply_clear_hex,
            FoundSettlementEffect: self._apply_found_settlement,
            RelocateCapitalEffect: self._apply_relocate_capital,
            BuildStructureEffect: self._apply_build_structure,
            DemolishStructureEffect: self._apply_demolish_structure,
            AssignLeaderEffect: self._apply_assign_leader,
            SpecialEffect: self._apply_special,
        }

    def apply(self, kingdom: Kingdom, effect: Any, context: EffectContext) -> Optional[AppliedEffect]:
        """Apply one effect in place. Unknown effect kinds are catalog corruption."""
        handler = self._handlers.get(type(effect))
        if handler is None:
            self.catalog.corrupted(
                f"{context.source or 'Outcome'} has an effect of unknown kind {getattr(effect, 'kind', effect)!r}"
            )
            return None
        message, delta = handler(kingdom, effect, context)
        logger.debug("Applied %s effect: %s", effect.kind, message)
        return AppliedEffect(kind=effect.kind, message=message, delta=delta)

    def apply_all(self, kingdom: Kingdom, effects: list[Any], context: EffectContext) -> list[AppliedEffect]:
        applied = []
        for effect in effects:
            result = self.apply(kingdom, effect, context)
            if result is not None:
                applied.append(result)
        return applied

    def pay(self, kingdom: Kingdom, rp: int, commodities: Optional[dict[Commodity, int]] = None) -> AppliedEffect:
        """Deduct an already-validated cost and log it like any other effect."""
        delta = KingdomDelta(rp=-rp)
        parts = [f"{rp} RP"] if rp else []
        kingdom.rp -= rp
        for commodity, amount in (commodities or {}).items():
            if not amount:
                continue
            kingdom.commodities[commodity].amount -= amount
            delta.commodities[commodity.value] = -amount
            parts.append(f"{amount} {commodity.value}")
        return AppliedEffect(kind="cost", message=f"Paid {', '.join(parts) or 'nothing'}", delta=delta)

    def resolve_amount(self, amount: int | str, reason: str = "") -> int:
        """Integer amounts pass through; dice notation is rolled."""
        if isinstance(amount, int):
            return amount
        return self.dice.roll(amount, reason).total

    # Numeric tracks

    def _apply_rp(self, kingdom: Kingdom, effect: RPEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        amount = self.resolve_amount(effect.amount, "RP")
        old = kingdom.rp
        kingdom.rp = max(0, old + amount)
        change = kingdom.rp - old
        return f"RP {_signed(change)} (now {kingdom.rp})", KingdomDelta(rp=change)

    def _apply_refund(self, kingdom: Kingdom, effect: RefundEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        refund = int(ctx.rp_cost * effect.fraction)
        kingdom.rp += refund
        return f"Refunded {refund} RP", KingdomDelta(rp=refund)

    def _apply_commodity(self, kingdom: Kingdom, effect: CommodityEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        amount = self.resolve_amount(effect.amount, effect.commodity.value)
        stock = kingdom.commodities[effect.commodity]
        old = stock.amount
        stock.amount = max(0, min(stock.capacity, old + amount))
        change = stock.amount - old
        message = f"{effect.commodity.value} {_signed(change)} (now {stock.amount}/{stock.capacity})"
        if change != amount and amount > 0:
            message += f", {amount - change} lost to storage limits"
        delta = KingdomDelta(commodities={effect.commodity.value: change} if change else {})
        return message, delta

    def change_unrest(self, kingdom: Kingdom, amount: int) -> KingdomDelta:
        """Shift unrest, never below 0, honoring feat caps (overflow becomes Fame)."""
        old_unrest, old_fame = kingdom.unrest, kingdom.fame
        new = max(0, old_unrest + amount)
        caps = [f.unrest_cap for f in acquired_feats(kingdom, self.catalog) if f.unrest_cap is not None]
        if caps and amount > 0 and new > min(caps):
            new = max(min(caps), old_unrest)
            kingdom.fame += 1
        kingdom.unrest = new
        return KingdomDelta(unrest=kingdom.unrest - old_unrest, fame=kingdom.fame - old_fame)

    def _apply_unrest(self, kingdom: Kingdom, effect: UnrestEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        amount = self.resolve_amount(effect.amount, "Unrest")
        delta = self.change_unrest(kingdom, amount)
        message = f"Unrest {_signed(delta.unrest)} (now {kingdom.unrest})"
        if delta.fame:
            message += f"; capped, Fame +{delta.fame}"
        return message, delta

    def _apply_ruin(self, kingdom: Kingdom, effect: RuinEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        amount = self.resolve_amount(effect.amount, effect.ruin.value)
        return self._shift_ruin(kingdom, effect.ruin, amount)

    def _shift_ruin(self, kingdom: Kingdom, ruin: RuinType, amount: int) -> tuple[str, KingdomDelta]:
        track = kingdom.ruin[ruin]
        old = track.score
        track.score = max(0, old + amount)
        change = track.score - old
        return (
            f"{ruin.value} {_signed(change)} (now {track.score}/{track.threshold})",
            KingdomDelta(ruin={ruin.value: change} if change else {}),
        )

    def _apply_fame(self, kingdom: Kingdom, effect: FameEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        amount = self.resolve_amount(effect.amount, "Fame")
        old = kingdom.fame
        kingdom.fame = max(0, old + amount)
        return f"Fame {_signed(kingdom.fame - old)}", KingdomDelta(fame=kingdom.fame - old)

    def _apply_infamy(self, kingdom: Kingdom, effect: InfamyEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        amount = self.resolve_amount(effect.amount, "Infamy")
        old = kingdom.infamy
        kingdom.infamy = max(0, old + amount)
        return f"Infamy {_signed(kingdom.infamy - old)}", KingdomDelta(infamy=kingdom.infamy - old)

    def _apply_xp(self, kingdom: Kingdom, effect: XPEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        amount = self.resolve_amount(effect.amount, "XP")
        old = kingdom.xp
        kingdom.xp = max(0, old + amount)
        return f"XP {_signed(kingdom.xp - old)} (now {kingdom.xp})", KingdomDelta(xp=kingdom.xp - old)

    def _apply_reputation(self, kingdom: Kingdom, effect: ReputationEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        amount = self.resolve_amount(effect.amount, "Reputation")
        target = reputation_target(ctx.get("target"))
        if target is None:
            return self._apply_infamy(kingdom, InfamyEffect(amount=amount), ctx)
        return self._shift_ruin(kingdom, target, amount)

    # Territory

    def _target_hex(self, kingdom: Kingdom, ctx: EffectContext) -> Hex:
        hex_ = kingdom.get_hex(ctx.get("hex"))
        if hex_ is None:
            raise KeyError(f"Hex {ctx.get('hex')!r} is not on the map")
        return hex_

    def _apply_claim_hex(self, kingdom: Kingdom, effect: ClaimHexEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        hex_ = self._target_hex(kingdom, ctx)
        was = hex_.status
        hex_.status = HexStatus.CLAIMED
        delta = KingdomDelta(hexes_claimed=[hex_.coordinate])
        if was == HexStatus.UNEXPLORED:
            delta.hexes_explored = [hex_.coordinate]
        return f"Claimed hex {hex_.coordinate}", delta

    def _apply_abandon_hex(self, kingdom: Kingdom, effect: AbandonHexEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        hex_ = self._target_hex(kingdom, ctx)
        hex_.status = HexStatus.EXPLORED
        hex_.work_site = None
        return f"Abandoned hex {hex_.coordinate}", KingdomDelta(hexes_abandoned=[hex_.coordinate])

    def _apply_explore_hex(self, kingdom: Kingdom, effect: ExploreHexEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        coordinate = (ctx.get("hex") or "").lower()
        hex_ = kingdom.get_hex(coordinate)
        if hex_ is None:
            terrain = ctx.get("terrain") or Terrain.PLAINS.value
            hex_ = Hex(coordinate=coordinate, terrain=Terrain(terrain.lower()))
            kingdom.hexes[coordinate] = hex_
        if hex_.status != HexStatus.UNEXPLORED:
            return f"Hex {coordinate} was already explored", KingdomDelta()
        hex_.status = HexStatus.EXPLORED
        return f"Explored hex {coordinate} ({hex_.terrain.value})", KingdomDelta(hexes_explored=[coordinate])

    def _apply_work_site(self, kingdom: Kingdom, effect: WorkSiteEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        hex_ = self._target_hex(kingdom, ctx)
        site_type = effect.site_type or WorkSiteType(str(ctx.get("site_type")).lower())
        hex_.work_site = WorkSite(type=site_type, production=2 if effect.bonus else 1)
        bonus = " with bonus production" if effect.bonus else ""
        return f"Established {site_type.value} in {hex_.coordinate}{bonus}", KingdomDelta()

    def _apply_road(self, kingdom: Kingdom, effect: RoadEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        hex_ = self._target_hex(kingdom, ctx)
        hex_.roads = True
        return f"Built roads in {hex_.coordinate}", KingdomDelta()

    def _apply_fortify(self, kingdom: Kingdom, effect: FortifyEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        hex_ = self._target_hex(kingdom, ctx)
        hex_.fortified = True
        hex_.defense_bonus = max(hex_.defense_bonus, effect.bonus)
        return f"Fortified {hex_.coordinate} (defense +{hex_.defense_bonus})", KingdomDelta()

    def _apply_clear_hex(self, kingdom: Kingdom, effect: ClearHexEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        hex_ = self._target_hex(kingdom, ctx)
        hex_.hazards = []
        hex_.cleared = True
        return f"Cleared hazards from {hex_.coordinate}", KingdomDelta()

    # Settlements and leadership

    def _apply_found_settlement(self, kingdom: Kingdom, effect: FoundSettlementEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        hex_ = self._target_hex(kingdom, ctx)
        borders = [WaterBorder(b) for b in (ctx.get("water_borders") or [])]
        settlement = Settlement(
            name=ctx.get("settlement_name"),
            hex_coordinate=hex_.coordinate,
            is_capital=not kingdom.settlements,
            water_borders=borders,
        )
        kingdom.settlements.append(settlement)
        hex_.settlement_id = settlement.id
        capital = " as the capital" if settlement.is_capital else ""
        return (
            f"Founded {settlement.name} in {hex_.coordinate}{capital}",
            KingdomDelta(settlements_founded=[settlement.name]),
        )

    def _apply_relocate_capital(self, kingdom: Kingdom, effect: RelocateCapitalEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        target = kingdom.get_settlement(ctx.get("settlement_id"))
        for settlement in kingdom.settlements:
            settlement.is_capital = settlement is target
        return f"Moved the capital to {target.name}", KingdomDelta()

    def _apply_build_structure(self, kingdom: Kingdom, effect: BuildStructureEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        settlement = kingdom.get_settlement(ctx.get("settlement_id"))
        definition = self.catalog.structure(ctx.get("structure_id"))
        if definition is None:
            self.catalog.corrupted(f"Cannot build unknown structure {ctx.get('structure_id')!r}")
            return "Nothing was built", KingdomDelta()
        spot = find_free_lots(settlement, definition, ctx.get("block"))
        if spot is None:
            return f"No room for {definition.name} in {settlement.name}", KingdomDelta()
        block, lots = spot
        settlement.placements.append(
            StructurePlacement(structure_id=definition.id, block=block, lots=lots, constructed_turn=kingdom.turn)
        )
        for commodity, extra in definition.storage.items():
            kingdom.commodities[commodity].capacity += extra
        kingdom.xp += definition.xp_value
        return (
            f"Built {definition.name} in {settlement.name} (block {block}), XP +{definition.xp_value}",
            KingdomDelta(structures_built=[definition.id], xp=definition.xp_value),
        )

    def _apply_demolish_structure(self, kingdom: Kingdom, effect: DemolishStructureEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        settlement = kingdom.get_settlement(ctx.get("settlement_id"))
        placement = find_placement(settlement, ctx.get("structure_id"))
        settlement.placements.remove(placement)
        delta = KingdomDelta(structures_demolished=[placement.structure_id])
        definition = self.catalog.structure(placement.structure_id)
        if definition is not None:
            for commodity, extra in definition.storage.items():
                stock = kingdom.commodities[commodity]
                stock.capacity = max(0, stock.capacity - extra)
                lost = max(0, stock.amount - stock.capacity)
                if lost:
                    stock.amount -= lost
                    delta.commodities[commodity.value] = -lost
        name = definition.name if definition else placement.structure_id
        return f"Demolished {name} in {settlement.name}", delta

    def _apply_assign_leader(self, kingdom: Kingdom, effect: AssignLeaderEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        role = LeaderRole(ctx.get("role").lower())
        leader = kingdom.get_leader(role)
        if leader is None:
            leader = Leader(role=role)
            kingdom.leaders.append(leader)
        leader.name = ctx.get("leader_name")
        leader.vacant = False
        leader.invested = effect.invested
        invested = " and invested" if effect.invested else ""
        return f"{leader.name} appointed {role.value}{invested}", KingdomDelta()

    def _apply_special(self, kingdom: Kingdom, effect: SpecialEffect, ctx: EffectContext) -> tuple[str, KingdomDelta]:
        kingdom.turn_state.pending_specials.append(effect.key)
        if effect.key in FORESIGHT_MODIFIERS:
            kingdom.turn_state.event_check_modifier = FORESIGHT_MODIFIERS[effect.key]
        text = f": {effect.description}" if effect.description else ""
        return f"[{effect.key}]{text}", KingdomDelta()


def reputation_target(target: Optional[str]) -> Optional[RuinType]:
    """Ruin track named by a reputation target, or None for infamy."""
    if not target or target.lower() == "infamy":
        return None
    return RuinType(target.title())


def find_placement(settlement: Settlement, ref: Optional[str]) -> Optional[StructurePlacement]:
    """A placement by placement id, or the first one of a structure id."""
    if not ref:
        return None
    for placement in settlement.placements:
        if placement.id == ref:
            return placement
    for placement in settlement.placements:
        if placement.structure_id == ref:
            return placement
    return None
