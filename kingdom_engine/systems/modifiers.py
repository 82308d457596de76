"""Modifier calculator - builds the bonus breakdown for a kingdom skill or ability check."""

from __future__ import annotations
from typing import Optional, TYPE_CHECKING

from kingdom_engine.catalog.reference import ABILITY_ROLES, PROFICIENCY_BONUS, SKILL_ABILITIES
from kingdom_engine.models.checks import ModifierBreakdown
from kingdom_engine.models.kingdom import Ability, Kingdom, Proficiency
from kingdom_engine.systems.structures import acquired_feats, best_item_bonus

if TYPE_CHECKING:
    from kingdom_engine.catalog import Catalog


def ability_modifier(score: int) -> int:
    """floor((score - 10) / 2)."""
    return (score - 10) // 2


def proficiency_bonus(tier: Proficiency, level: int) -> int:
    """Untrained adds nothing; every trained tier adds kingdom level plus a tier bonus."""
    if tier == Proficiency.UNTRAINED:
        return 0
    return level + PROFICIENCY_BONUS[tier]


def unrest_penalty(unrest: int) -> int:
    if unrest >= 15:
        return 4
    if unrest >= 10:
        return 3
    if unrest >= 5:
        return 2
    if unrest >= 1:
        return 1
    return 0


def get_invested_leader_bonus(kingdom: Kingdom, ability: Ability, catalog: "Catalog") -> int:
    """Bonus from an invested leader holding a role that governs the ability."""
    roles = ABILITY_ROLES.get(ability, [])
    for leader in kingdom.leaders:
        if leader.role in roles and leader.invested and not leader.is_vacant:
            bonus = 1
            for feat in acquired_feats(kingdom, catalog):
                if feat.leader_bonus is not None:
                    bonus = max(bonus, feat.leader_bonus)
            return bonus
    return 0


def get_skill_modifier_breakdown(
    kingdom: Kingdom,
    skill_or_ability: str,
    catalog: "Catalog",
    activity_id: Optional[str] = None,
    circumstance: int = 0,
) -> ModifierBreakdown:
    """Break a check modifier into its parts.

    Args:
        kingdom: Kingdom making the check
        skill_or_ability: A skill name ("Trade") or an ability name ("Economy")
        catalog: Reference tables
        activity_id: Activity the check is for, used for item bonuses
        circumstance: One-off bonus (positive) or penalty (negative) for this check only

    Returns:
        ModifierBreakdown whose ``total`` is the modifier to add to the d20
    """
    skill_ability = SKILL_ABILITIES.get(skill_or_ability)
    is_skill = skill_ability is not None
    ability = skill_ability if is_skill else Ability(skill_or_ability)

    breakdown = ModifierBreakdown(
        skill=skill_or_ability,
        ability_mod=ability_modifier(kingdom.abilities.get(ability, 10)),
        circumstance_bonus=kingdom.bonuses.circumstance_bonus + max(circumstance, 0),
        circumstance_penalty=kingdom.bonuses.circumstance_penalty + max(-circumstance, 0),
        unrest_penalty=unrest_penalty(kingdom.unrest),
    )
    if is_skill:
        breakdown.proficiency_bonus = proficiency_bonus(kingdom.proficiency(skill_or_ability), kingdom.level)
        breakdown.leader_bonus = get_invested_leader_bonus(kingdom, ability, catalog)
        breakdown.item_bonus = best_item_bonus(kingdom, catalog, activity_id=activity_id, skill=skill_or_ability)[0]
    elif activity_id:
        breakdown.item_bonus = best_item_bonus(kingdom, catalog, activity_id=activity_id)[0]
    return breakdown
