"""Upkeep orchestrator - the start-of-turn bookkeeping phase."""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from kingdom_engine.catalog.reference import RESOURCE_DICE, RUIN_ABILITY, VACANCY_UNREST
from kingdom_engine.models.kingdom import WORK_SITE_COMMODITY, Commodity, Kingdom, LeaderRole, WorkSiteType
from kingdom_engine.models.results import UpkeepResult
from kingdom_engine.systems.effects import EffectApplier
from kingdom_engine.systems.progression import ProgressionSystem
from kingdom_engine.systems.structures import acquired_feats, kingdom_consumption, refresh_capacities

if TYPE_CHECKING:
    from kingdom_engine.catalog import Catalog
    from kingdom_engine.systems.dice import DiceRoller

logger = logging.getLogger(__name__)

RUIN_ACCRUAL_UNREST = 10


class UpkeepSystem:
    """Runs every upkeep step on a copy of the kingdom."""

    def __init__(self, catalog: "Catalog", dice: "DiceRoller", progression: ProgressionSystem):
        self.catalog = catalog
        self.dice = dice
        self.progression = progression
        self.effects = EffectApplier(catalog, dice)

    def run_full_upkeep(self, kingdom: Kingdom) -> UpkeepResult:
        """Leadership, ruin, resources, production, consumption and milestones."""
        state = kingdom.model_copy(deep=True)
        result = UpkeepResult(state=state)

        self._leadership_vacancies(state, result)
        self._ruin_thresholds(state, result)
        self._ruin_drift(state, result)
        self._resource_dice(state, result)
        self._storage(state, result)
        self._production(state, result)
        self._consumption(state, result)

        for milestone in self.progression.award_milestones(state):
            result.milestones.append(milestone.id)
            result.log.append(f"Milestone: {milestone.name} (+{milestone.xp} XP)")
        result.level_up_available = self.progression.check_level_up(state)
        if result.level_up_available:
            result.log.append("The kingdom has enough XP to level up")

        logger.info("Upkeep complete: %s", "; ".join(result.log) or "no changes")
        return result

    def _leadership_vacancies(self, state: Kingdom, result: UpkeepResult) -> None:
        for role in LeaderRole:
            leader = state.get_leader(role)
            if leader is None or leader.is_vacant:
                delta = self.effects.change_unrest(state, VACANCY_UNREST[role])
                result.vacancies.append(role.value)
                result.log.append(f"Vacant {role.value}: Unrest +{delta.unrest}")

    def _ruin_thresholds(self, state: Kingdom, result: UpkeepResult) -> None:
        threshold_bonus = sum(f.ruin_threshold_bonus for f in acquired_feats(state, self.catalog))
        for ruin, track in state.ruin.items():
            if track.score < track.threshold + threshold_bonus:
                continue
            ability = RUIN_ABILITY[ruin]
            state.abilities[ability] = max(0, state.abilities[ability] - 1)
            track.threshold += 1
            unrest = self.dice.roll("1d10", f"{ruin.value} threshold").total
            delta = self.effects.change_unrest(state, unrest)
            result.ruin_triggered.append(ruin.value)
            result.log.append(
                f"{ruin.value} reached its threshold: {ability.value} -1, "
                f"threshold now {track.threshold}, Unrest +{delta.unrest}"
            )

    def _ruin_drift(self, state: Kingdom, result: UpkeepResult) -> None:
        """High unrest feeds every ruin track; a calm kingdom lets them recede."""
        if state.unrest >= RUIN_ACCRUAL_UNREST:
            for track in state.ruin.values():
                track.score += 1
            result.log.append(f"Unrest {state.unrest}: every ruin track +1")
        elif state.unrest == 0:
            recovered = [r.value for r, t in state.ruin.items() if t.score > 0]
            for track in state.ruin.values():
                track.score = max(0, track.score - 1)
            if recovered:
                result.log.append(f"No unrest: {', '.join(recovered)} -1")

    def _resource_dice(self, state: Kingdom, result: UpkeepResult) -> None:
        feats = acquired_feats(state, self.catalog)
        tier = self.catalog.size_tier(state.claimed_hex_count)
        step = sum(f.resource_die_step for f in feats)
        index = min(RESOURCE_DICE.index(tier.resource_die) + step, len(RESOURCE_DICE) - 1)
        die = RESOURCE_DICE[index]
        count = max(0, 4 + state.level + state.bonuses.bonus_dice - state.bonuses.penalty_dice)

        rolls = self.dice.roll_many(count, die, "Resource dice")
        bonus = sum(f.bonus_rp for f in feats)
        gained = sum(rolls) + bonus
        state.rp += gained
        result.resource_dice = rolls
        result.rp_gained = gained
        extra = f" + {bonus} from feats" if bonus else ""
        result.log.append(f"Resource dice {count}d{die}: {sum(rolls)}{extra} = {gained} RP")

    def _storage(self, state: Kingdom, result: UpkeepResult) -> None:
        before = {c: s.amount for c, s in state.commodities.items()}
        refresh_capacities(state, self.catalog)
        for commodity, stock in state.commodities.items():
            if stock.amount < before[commodity]:
                result.log.append(
                    f"{commodity.value} storage shrank to {stock.capacity}, "
                    f"{before[commodity] - stock.amount} discarded"
                )

    def _production(self, state: Kingdom, result: UpkeepResult) -> None:
        farm_bonus = sum(f.farm_production_bonus for f in acquired_feats(state, self.catalog))
        produced: dict[Commodity, int] = {}
        for hex_ in state.claimed_hexes():
            if hex_.work_site is None:
                continue
            commodity = WORK_SITE_COMMODITY[hex_.work_site.type]
            amount = hex_.work_site.production
            if hex_.work_site.type == WorkSiteType.FARM:
                amount += farm_bonus
            produced[commodity] = produced.get(commodity, 0) + amount

        for commodity, amount in produced.items():
            stock = state.commodities[commodity]
            old = stock.amount
            stock.amount = min(stock.capacity, old + amount)
            gained = stock.amount - old
            result.production[commodity.value] = gained
            line = f"Produced {amount} {commodity.value}"
            if gained < amount:
                line += f", {amount - gained} lost to storage limits"
            result.log.append(line)

    def _consumption(self, state: Kingdom, result: UpkeepResult) -> None:
        need = kingdom_consumption(state, self.catalog)
        result.consumption = need
        if not need:
            return
        food = state.commodities[Commodity.FOOD]
        if food.amount >= need:
            food.amount -= need
            result.log.append(f"Settlements ate {need} Food")
            return

        shortage = need - food.amount
        food.amount = 0
        die = "1d4"
        for feat in acquired_feats(state, self.catalog):
            if feat.shortage_die:
                die = feat.shortage_die
        unrest = sum(self.dice.roll(die, "Food shortage").total for _ in range(shortage))
        delta = self.effects.change_unrest(state, unrest)
        result.food_shortage = shortage
        result.log.append(f"Food short by {shortage}: Unrest +{delta.unrest}")
