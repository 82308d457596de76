"""Commerce resolver - commodity trading and tax collection."""

from __future__ import annotations
import logging
import math
from typing import Optional, Union, TYPE_CHECKING

from kingdom_engine.catalog.reference import BUY_MULTIPLIERS, COMMODITY_BASE_VALUES, SELL_MULTIPLIERS
from kingdom_engine.models.checks import Degree
from kingdom_engine.models.kingdom import Commodity, Kingdom
from kingdom_engine.models.results import (
    AppliedEffect,
    EngineFailure,
    ErrorCode,
    TaxResult,
    TradeEstimate,
    TradeResult,
)
from kingdom_engine.models.turn import KingdomDelta
from kingdom_engine.systems.checks import control_dc, resolve_check
from kingdom_engine.systems.effects import EffectApplier
from kingdom_engine.systems.modifiers import get_skill_modifier_breakdown

if TYPE_CHECKING:
    from kingdom_engine.catalog import Catalog
    from kingdom_engine.systems.dice import DiceRoller

logger = logging.getLogger(__name__)

BUY = "buy"
SELL = "sell"
TRADE_ACTIVITY = "trade-commodities"
TAX_ACTIVITY = "collect-taxes"


def unit_price(commodity: Commodity, multiplier: float) -> int:
    """Per-unit RP, rounded half up, never below 1."""
    return max(1, math.floor(COMMODITY_BASE_VALUES[commodity] * multiplier + 0.5))


def parse_commodity(value: Union[str, Commodity]) -> Optional[Commodity]:
    if isinstance(value, Commodity):
        return value
    try:
        return Commodity(str(value).strip().title())
    except ValueError:
        return None


class CommerceSystem:
    """Resolves Trade checks for buying, selling and taxes."""

    def __init__(self, catalog: "Catalog", dice: "DiceRoller"):
        self.catalog = catalog
        self.dice = dice
        self.effects = EffectApplier(catalog, dice)

    def estimate_trade(
        self, direction: str, commodity: Union[str, Commodity], amount: int
    ) -> Union[TradeEstimate, EngineFailure]:
        """Price at the neutral 1.0 multiplier, shown before committing."""
        parsed = self._parse(direction, commodity, amount)
        if isinstance(parsed, EngineFailure):
            return parsed
        direction, commodity = parsed
        price = unit_price(commodity, 1.0)
        return TradeEstimate(
            direction=direction, commodity=commodity, amount=amount, unit_price=price, total=price * amount
        )

    def trade_commodities(
        self,
        kingdom: Kingdom,
        direction: str,
        commodity: Union[str, Commodity],
        amount: int,
        roll: Optional[int] = None,
    ) -> Union[TradeResult, EngineFailure]:
        """Buy or sell a commodity for RP.

        The price multiplier always comes from the rolled degree, never from
        the estimate. When a bad roll makes a purchase dearer than the RP on
        hand, only the affordable units are bought.
        """
        estimate = self.estimate_trade(direction, commodity, amount)
        if isinstance(estimate, EngineFailure):
            return estimate
        direction, commodity = estimate.direction, estimate.commodity
        stock = kingdom.commodities[commodity]

        if direction == SELL and amount > stock.amount:
            return EngineFailure(
                code=ErrorCode.INSUFFICIENT_STOCK,
                message=f"Cannot sell {amount} {commodity.value}, only {stock.amount} in stock",
            )
        if direction == BUY:
            if estimate.total > kingdom.rp:
                return EngineFailure(
                    code=ErrorCode.INSUFFICIENT_FUNDS,
                    message=f"Buying {amount} {commodity.value} costs about {estimate.total} RP, "
                            f"only {kingdom.rp} RP available",
                )
            if stock.amount + amount > stock.capacity:
                return EngineFailure(
                    code=ErrorCode.INVALID_INPUT,
                    message=f"Storage for {commodity.value} holds {stock.capacity}, "
                            f"{stock.amount} already stored",
                )

        breakdown = get_skill_modifier_breakdown(kingdom, "Trade", self.catalog, activity_id=TRADE_ACTIVITY)
        check = resolve_check(
            breakdown, control_dc(kingdom, self.catalog), roll=roll, dice=self.dice,
            reason=f"{direction} {commodity.value}",
        )
        multipliers = SELL_MULTIPLIERS if direction == SELL else BUY_MULTIPLIERS
        price = unit_price(commodity, multipliers[check.degree])

        state = kingdom.model_copy(deep=True)
        new_stock = state.commodities[commodity]
        log: list[AppliedEffect] = []

        if direction == SELL:
            units = amount
            earned = price * units
            if state.has_feat("free-and-fair"):
                earned += units
            new_stock.amount -= units
            state.rp += earned
            rp_change = earned
            log.append(AppliedEffect(
                kind="trade",
                message=f"Sold {units} {commodity.value} at {price} RP each for {earned} RP",
                delta=KingdomDelta(rp=earned, commodities={commodity.value: -units}),
            ))
        else:
            units = min(amount, state.rp // price)
            spent = units * price
            new_stock.amount += units
            state.rp -= spent
            rp_change = -spent
            message = f"Bought {units} {commodity.value} at {price} RP each for {spent} RP"
            if units < amount:
                message += f" (could only afford {units} of {amount})"
            log.append(AppliedEffect(
                kind="trade",
                message=message,
                delta=KingdomDelta(rp=-spent, commodities={commodity.value: units} if units else {}),
            ))

        if check.degree == Degree.CRITICAL_SUCCESS and state.has_feat("insider-trading"):
            state.rp += 1
            rp_change += 1
            log.append(AppliedEffect(kind="rp", message="Insider Trading: RP +1", delta=KingdomDelta(rp=1)))
        if check.degree == Degree.CRITICAL_FAILURE:
            delta = self.effects.change_unrest(state, 1)
            log.append(AppliedEffect(kind="unrest", message=f"Bad deal angers the merchants: Unrest +{delta.unrest}",
                                     delta=delta))

        logger.info("Trade %s %d %s: %s", direction, units, commodity.value, check.degree.label)
        return TradeResult(
            state=state,
            direction=direction,
            commodity=commodity,
            requested=amount,
            units=units,
            unit_price=price,
            rp_change=rp_change,
            degree=check.degree,
            check=check,
            effect_log=log,
        )

    def collect_taxes(self, kingdom: Kingdom, roll: Optional[int] = None) -> TaxResult:
        """Trade check for the turn's tax income, based on kingdom level."""
        breakdown = get_skill_modifier_breakdown(kingdom, "Trade", self.catalog, activity_id=TAX_ACTIVITY)
        check = resolve_check(breakdown, control_dc(kingdom, self.catalog), roll=roll, dice=self.dice,
                              reason="Collect Taxes")
        base = kingdom.level
        if check.degree == Degree.CRITICAL_SUCCESS:
            amount = base + (3 if kingdom.has_feat("capital-investment") else 2)
        elif check.degree == Degree.SUCCESS:
            amount = base
        elif check.degree == Degree.FAILURE:
            amount = max(1, base // 2)
        else:
            amount = 0

        state = kingdom.model_copy(deep=True)
        log: list[AppliedEffect] = []
        if amount:
            state.rp += amount
            log.append(AppliedEffect(kind="rp", message=f"Collected {amount} RP in taxes", delta=KingdomDelta(rp=amount)))
        else:
            log.append(AppliedEffect(kind="rp", message="No taxes collected"))
        if check.degree == Degree.CRITICAL_FAILURE:
            delta = self.effects.change_unrest(state, 1)
            log.append(AppliedEffect(kind="unrest", message=f"Tax revolt: Unrest +{delta.unrest}", delta=delta))

        logger.info("Collect taxes: %s, %d RP", check.degree.label, amount)
        return TaxResult(state=state, amount=amount, degree=check.degree, check=check, effect_log=log)

    def _parse(
        self, direction: str, commodity: Union[str, Commodity], amount: int
    ) -> Union[tuple[str, Commodity], EngineFailure]:
        direction = str(direction).strip().lower()
        if direction not in (BUY, SELL):
            return EngineFailure(code=ErrorCode.INVALID_INPUT, message=f"Direction must be buy or sell, not {direction}")
        parsed = parse_commodity(commodity)
        if parsed is None:
            return EngineFailure(code=ErrorCode.INVALID_INPUT, message=f"Unknown commodity: {commodity}")
        if not isinstance(amount, int) or amount < 1:
            return EngineFailure(code=ErrorCode.INVALID_INPUT, message="Amount must be a positive whole number")
        return direction, parsed
