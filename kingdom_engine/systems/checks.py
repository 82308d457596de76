"""Check resolver - d20 + modifier against a DC, with four degrees of success."""

from __future__ import annotations
import logging
from typing import Optional, Union, TYPE_CHECKING

from kingdom_engine.models.checks import CheckResult, Degree, ModifierBreakdown
from kingdom_engine.models.kingdom import Kingdom

if TYPE_CHECKING:
    from kingdom_engine.catalog import Catalog
    from kingdom_engine.systems.dice import DiceRoller

logger = logging.getLogger(__name__)


def degree_from_margin(margin: int) -> Degree:
    """Numeric degree for total - dc, before the natural-roll adjustment."""
    if margin >= 10:
        return Degree.CRITICAL_SUCCESS
    if margin >= 0:
        return Degree.SUCCESS
    if margin >= -10:
        return Degree.FAILURE
    return Degree.CRITICAL_FAILURE


def resolve_check(
    modifier: Union[int, ModifierBreakdown],
    dc: int,
    roll: Optional[int] = None,
    dice: Optional["DiceRoller"] = None,
    reason: str = "",
) -> CheckResult:
    """Resolve a check.

    Pure when ``roll`` is given; otherwise one d20 is drawn from ``dice``.
    A natural 20 moves the degree one step up and a natural 1 one step
    down, after the numeric degree is found.
    """
    if roll is None:
        if dice is None:
            raise ValueError("resolve_check needs either a roll or a dice roller")
        roll = dice.d20(reason)
    if not 1 <= roll <= 20:
        raise ValueError(f"A d20 roll must be between 1 and 20, got {roll}")

    mod = modifier.total if isinstance(modifier, ModifierBreakdown) else modifier
    total = roll + mod
    numeric = degree_from_margin(total - dc)
    degree = numeric
    if roll == 20:
        degree = numeric.step_up()
    elif roll == 1:
        degree = numeric.step_down()

    result = CheckResult(roll=roll, modifier=mod, total=total, dc=dc, degree=degree, numeric_degree=numeric)
    logger.debug("Check %s: %s", reason or "(unnamed)", result.summary())
    return result


def control_dc(kingdom: Kingdom, catalog: "Catalog") -> int:
    """14 + level + size-tier modifier."""
    return catalog.control_dc(kingdom.level, kingdom.claimed_hex_count)
