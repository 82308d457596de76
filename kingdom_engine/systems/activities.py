"""Activity executor - validates, rolls and applies kingdom activities."""

from __future__ import annotations
import logging
from typing import Any, Optional, Union, TYPE_CHECKING

from kingdom_engine.catalog.activities import ActivityDefinition, Prerequisite
from kingdom_engine.models.checks import Degree
from kingdom_engine.models.kingdom import (
    BLOCK_KEYS,
    Commodity,
    HexStatus,
    Kingdom,
    LeaderRole,
    Terrain,
    WaterBorder,
    WorkSiteType,
)
from kingdom_engine.models.results import ActivityResult, EngineFailure, ErrorCode
from kingdom_engine.systems.checks import control_dc, resolve_check
from kingdom_engine.systems.effects import EffectApplier, EffectContext, find_placement, reputation_target
from kingdom_engine.systems.hexes import adjacent_to_claimed, is_water_adjacent, parse_coordinate
from kingdom_engine.systems.modifiers import get_skill_modifier_breakdown
from kingdom_engine.systems.structures import acquired_feats, find_free_lots

if TYPE_CHECKING:
    from kingdom_engine.catalog import Catalog
    from kingdom_engine.catalog.structures import StructureDefinition
    from kingdom_engine.systems.dice import DiceRoller

logger = logging.getLogger(__name__)

FARMABLE_TERRAIN = {Terrain.PLAINS, Terrain.HILLS}
WORK_SITE_TERRAIN = {
    WorkSiteType.FARM: FARMABLE_TERRAIN,
    WorkSiteType.LUMBER: {Terrain.FOREST},
    WorkSiteType.MINE: {Terrain.HILLS, Terrain.MOUNTAINS},
    WorkSiteType.QUARRY: {Terrain.HILLS, Terrain.MOUNTAINS},
}


def _fail(code: ErrorCode, message: str) -> EngineFailure:
    logger.debug("Activity rejected (%s): %s", code.value, message)
    return EngineFailure(code=code, message=message)


class ActivityCost:
    """What performing an activity will cost, resolved before anything is rolled."""

    def __init__(self, rp: int, commodities: Optional[dict[Commodity, int]] = None,
                 skill: Optional[str] = None, structure: Optional["StructureDefinition"] = None):
        self.rp = rp
        self.commodities = commodities or {}
        self.skill = skill
        self.structure = structure


class ActivitySystem:
    """Executes activities from the catalog against a kingdom without mutating it."""

    def __init__(self, catalog: "Catalog", dice: "DiceRoller"):
        self.catalog = catalog
        self.dice = dice
        self.effects = EffectApplier(catalog, dice)

    def execute_activity(
        self,
        kingdom: Kingdom,
        activity_id: str,
        inputs: Optional[dict[str, Any]] = None,
        roll: Optional[int] = None,
    ) -> Union[ActivityResult, EngineFailure]:
        """Perform an activity and return the proposed kingdom.

        Args:
            kingdom: Current kingdom; never modified
            activity_id: Catalog id of the activity
            inputs: Player choices (hex, settlement_id, structure_id, role, ...)
            roll: Fixed d20 result instead of rolling

        Returns:
            ActivityResult with the new state and effect log, or an
            EngineFailure when the activity cannot be attempted
        """
        inputs = dict(inputs or {})
        definition = self.catalog.activity(activity_id)
        if definition is None:
            return _fail(ErrorCode.UNKNOWN_ACTIVITY, f"Unknown activity: {activity_id}")

        cost = self.resolve_cost(kingdom, definition, inputs)
        if isinstance(cost, EngineFailure):
            return cost

        if cost.rp > kingdom.rp:
            return _fail(
                ErrorCode.INSUFFICIENT_RESOURCES,
                f"{definition.name} costs {cost.rp} RP but only {kingdom.rp} RP is available",
            )
        for commodity, amount in cost.commodities.items():
            if amount > kingdom.commodity_amount(commodity):
                return _fail(
                    ErrorCode.INSUFFICIENT_RESOURCES,
                    f"{definition.name} needs {amount} {commodity.value}, "
                    f"only {kingdom.commodity_amount(commodity)} in stock",
                )

        problem = self.validate_inputs(kingdom, definition, inputs, cost)
        if problem is not None:
            return _fail(ErrorCode.INVALID_INPUT, problem)

        check = breakdown = None
        if cost.skill:
            breakdown = get_skill_modifier_breakdown(kingdom, cost.skill, self.catalog, activity_id=definition.id)
            dc = definition.dc if definition.dc is not None else control_dc(kingdom, self.catalog) + definition.dc_modifier
            check = resolve_check(breakdown, dc, roll=roll, dice=self.dice, reason=definition.name)
            degree = check.degree
        else:
            degree = Degree.SUCCESS

        state = kingdom.model_copy(deep=True)
        context = EffectContext(inputs=inputs, rp_cost=cost.rp, source=definition.id)
        effect_log = self.effects.apply_all(state, definition.effects_for(degree), context)
        if cost.rp or cost.commodities:
            effect_log.append(self.effects.pay(state, cost.rp, cost.commodities))

        logger.info("%s: %s", definition.name, degree.label)
        return ActivityResult(
            state=state,
            activity_id=definition.id,
            activity_name=definition.name,
            degree=degree,
            check=check,
            modifier=breakdown,
            effect_log=effect_log,
            rp_cost=cost.rp,
        )

    def resolve_cost(
        self, kingdom: Kingdom, definition: ActivityDefinition, inputs: dict[str, Any]
    ) -> Union[ActivityCost, EngineFailure]:
        """RP and commodity cost of an activity, after feat adjustments."""
        if definition.cost_from_structure:
            structure_id = (inputs.get("structure_id") or "").strip()
            if not structure_id:
                return _fail(ErrorCode.INVALID_INPUT, f"{definition.name} needs a structure_id")
            structure = self.catalog.structure(structure_id)
            if structure is None:
                return _fail(ErrorCode.UNKNOWN_STRUCTURE, f"Unknown structure: {structure_id}")
            return ActivityCost(
                rp=structure.rp_cost,
                commodities=dict(structure.commodity_costs),
                skill=structure.skill,
                structure=structure,
            )

        rp = definition.rp_cost
        for feat in acquired_feats(kingdom, self.catalog):
            rp += feat.cost_modifiers.get(definition.id, 0)
        return ActivityCost(rp=max(0, rp), skill=definition.skill)

    def validate_inputs(
        self,
        kingdom: Kingdom,
        definition: ActivityDefinition,
        inputs: dict[str, Any],
        cost: ActivityCost,
    ) -> Optional[str]:
        """Reason the inputs are unacceptable, or None when they are fine."""
        for name in definition.required_inputs:
            value = inputs.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                return f"{definition.name} requires '{name}'"

        problem = self._check_choices(kingdom, inputs, cost)
        if problem:
            return problem
        if definition.prerequisite is None:
            return None
        return self._check_prerequisite(kingdom, definition.prerequisite, inputs, cost)

    def _check_choices(self, kingdom: Kingdom, inputs: dict[str, Any], cost: ActivityCost) -> Optional[str]:
        """Enumerated inputs must name something real."""
        if inputs.get("role"):
            try:
                LeaderRole(str(inputs["role"]).strip().lower())
            except ValueError:
                return f"Unknown leadership role: {inputs['role']}"
        if inputs.get("site_type"):
            try:
                WorkSiteType(str(inputs["site_type"]).strip().lower())
            except ValueError:
                return f"Unknown work site type: {inputs['site_type']}"
        if inputs.get("target"):
            try:
                reputation_target(str(inputs["target"]).strip())
            except ValueError:
                return f"Reputation target must be Infamy or a ruin track, not {inputs['target']}"
        if inputs.get("terrain"):
            try:
                Terrain(str(inputs["terrain"]).strip().lower())
            except ValueError:
                return f"Unknown terrain: {inputs['terrain']}"
        if inputs.get("block") not in (None, "") and str(inputs["block"]).strip().upper() not in BLOCK_KEYS:
            return f"Unknown block: {inputs['block']} (blocks are A-I)"
        for border in inputs.get("water_borders") or []:
            try:
                WaterBorder(border)
            except ValueError:
                return f"Unknown water border: {border}"
        if inputs.get("settlement_name"):
            if kingdom.get_settlement(str(inputs["settlement_name"]).strip()) is not None:
                return f"A settlement named {inputs['settlement_name']} already exists"
        if cost.structure is not None and cost.structure.level > kingdom.level:
            return f"{cost.structure.name} requires kingdom level {cost.structure.level}"
        return None

    def _check_prerequisite(
        self,
        kingdom: Kingdom,
        prerequisite: Prerequisite,
        inputs: dict[str, Any],
        cost: ActivityCost,
    ) -> Optional[str]:
        coordinate = str(inputs.get("hex") or "").strip().lower()
        hex_ = kingdom.get_hex(coordinate)

        if prerequisite == Prerequisite.ADJACENT_UNEXPLORED_HEX:
            if parse_coordinate(coordinate) is None:
                return f"Invalid hex coordinate: {coordinate}"
            if hex_ is not None and hex_.status != HexStatus.UNEXPLORED:
                return f"Hex {coordinate} has already been explored"
            if not adjacent_to_claimed(kingdom, coordinate):
                return f"Hex {coordinate} is not adjacent to your territory"
            return None

        if prerequisite == Prerequisite.ADJACENT_EXPLORED_HEX:
            if hex_ is None or hex_.status == HexStatus.UNEXPLORED:
                return f"Hex {coordinate} has not been explored"
            if hex_.status == HexStatus.CLAIMED:
                return f"Hex {coordinate} is already claimed"
            if kingdom.claimed_hex_count and not adjacent_to_claimed(kingdom, coordinate):
                return f"Hex {coordinate} is not adjacent to your territory"
            return None

        if prerequisite in (
            Prerequisite.OWNED_HEX,
            Prerequisite.OWNED_HEX_NO_SETTLEMENT,
            Prerequisite.FARMABLE_HEX,
            Prerequisite.WORKABLE_HEX,
            Prerequisite.HEX_WITH_FARM,
            Prerequisite.WATER_ADJACENT_HEX,
        ):
            if hex_ is None or hex_.status != HexStatus.CLAIMED:
                return f"Hex {coordinate} is not claimed by the kingdom"
            if prerequisite == Prerequisite.OWNED_HEX_NO_SETTLEMENT and hex_.settlement_id:
                return f"Hex {coordinate} already holds a settlement"
            if prerequisite == Prerequisite.FARMABLE_HEX:
                if hex_.terrain not in FARMABLE_TERRAIN:
                    return f"Farmland needs plains or hills, {coordinate} is {hex_.terrain.value}"
                if hex_.work_site is not None:
                    return f"Hex {coordinate} already has a {hex_.work_site.type.value}"
            if prerequisite == Prerequisite.WORKABLE_HEX:
                site_type = WorkSiteType(str(inputs["site_type"]).strip().lower())
                if hex_.terrain not in WORK_SITE_TERRAIN[site_type]:
                    return f"A {site_type.value} cannot be built on {hex_.terrain.value}"
                if hex_.work_site is not None:
                    return f"Hex {coordinate} already has a {hex_.work_site.type.value}"
            if prerequisite == Prerequisite.HEX_WITH_FARM:
                if hex_.work_site is None or hex_.work_site.type != WorkSiteType.FARM:
                    return f"Hex {coordinate} has no farmland"
            if prerequisite == Prerequisite.WATER_ADJACENT_HEX and not is_water_adjacent(kingdom, hex_):
                return f"Hex {coordinate} is not beside water"
            return None

        settlement = kingdom.get_settlement(str(inputs.get("settlement_id") or "").strip())

        if prerequisite == Prerequisite.MULTIPLE_SETTLEMENTS:
            if len(kingdom.settlements) < 2:
                return "The kingdom needs more than one settlement"
            if settlement is None:
                return f"Unknown settlement: {inputs.get('settlement_id')}"
            if settlement.is_capital:
                return f"{settlement.name} is already the capital"
            return None

        if settlement is None:
            return f"Unknown settlement: {inputs.get('settlement_id')}"

        if prerequisite == Prerequisite.SETTLEMENT_HAS_ROOM:
            block = inputs.get("block")
            if find_free_lots(settlement, cost.structure, block) is None:
                where = f"block {block}" if block else settlement.name
                water = " beside water" if cost.structure.requires_water else ""
                return f"No room{water} for {cost.structure.name} in {where}"
            return None

        if prerequisite == Prerequisite.SETTLEMENT_HAS_STRUCTURE:
            if find_placement(settlement, str(inputs.get("structure_id")).strip()) is None:
                return f"{settlement.name} has no structure {inputs.get('structure_id')}"
            return None

        return None
