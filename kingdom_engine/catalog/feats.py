"""Kingdom feat catalog."""

from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, Field


class FeatDefinition(BaseModel):
    """A kingdom feat and the mechanical hooks it provides."""
    id: str
    name: str
    level: int = 1
    prerequisite: Optional[str] = None  # Single parent feat id
    benefit: str = ""

    # Item bonuses keyed by activity id or by skill name
    activity_bonuses: dict[str, int] = Field(default_factory=dict)
    skill_bonuses: dict[str, int] = Field(default_factory=dict)

    cost_modifiers: dict[str, int] = Field(default_factory=dict)  # Activity id -> RP change
    ruin_threshold_bonus: int = 0
    storage_bonus: int = 0
    consumption_modifier: int = 0
    bonus_rp: int = 0  # Added to every upkeep's resource roll
    resource_die_step: int = 0
    farm_production_bonus: int = 0
    extra_leadership_activities: int = 0
    leader_bonus: Optional[int] = None  # Replaces the invested leader bonus
    shortage_die: Optional[str] = None  # Unrest die per missing Food
    unrest_cap: Optional[int] = None


FEATS: list[FeatDefinition] = [
    # Level 1
    FeatDefinition(
        id="civil-war-veterans",
        name="Civil War Veterans",
        benefit="+1 item bonus to Warfare checks.",
        skill_bonuses={"Warfare": 1},
    ),
    FeatDefinition(
        id="cooperative-leadership",
        name="Cooperative Leadership",
        benefit="Leaders work well together. Opens the path to Consolidated Leadership.",
    ),
    FeatDefinition(
        id="crush-dissent",
        name="Crush Dissent",
        benefit="+1 item bonus to Quell Unrest checks.",
        activity_bonuses={"quell-unrest": 1},
    ),
    FeatDefinition(
        id="experienced-farmers",
        name="Experienced Farmers",
        benefit="+1 item bonus to Harvest Crops. Farmlands produce 1 additional Food during upkeep.",
        activity_bonuses={"harvest-crops": 1},
        farm_production_bonus=1,
    ),
    FeatDefinition(
        id="folk-magic",
        name="Folk Magic",
        benefit="+1 item bonus to Provide Care.",
        activity_bonuses={"provide-care": 1},
    ),
    FeatDefinition(
        id="fortified-fiefs",
        name="Fortified Fiefs",
        benefit="+1 item bonus to Defense checks.",
        skill_bonuses={"Defense": 1},
    ),
    FeatDefinition(
        id="free-and-fair",
        name="Free and Fair",
        benefit="+1 item bonus to trade agreements. Sold commodities fetch 1 additional RP each.",
        activity_bonuses={"establish-trade-agreement": 1},
    ),
    FeatDefinition(
        id="insider-trading",
        name="Insider Trading",
        benefit="+1 item bonus to Trade checks. A critical success when trading grants 1 additional RP.",
        skill_bonuses={"Trade": 1},
    ),
    FeatDefinition(
        id="muddle-through",
        name="Muddle Through",
        benefit="When short on Food, roll d3 instead of d4 for Unrest.",
        shortage_die="1d3",
    ),
    FeatDefinition(
        id="practical-magic",
        name="Practical Magic",
        benefit="+1 item bonus to Supernatural Solution.",
        activity_bonuses={"supernatural-solution": 1},
    ),
    # Level 2
    FeatDefinition(
        id="backup-militia",
        name="Backup Militia",
        level=2,
        benefit="Militia stand ready to defend the kingdom.",
    ),
    FeatDefinition(
        id="civic-planning",
        name="Civic Planning",
        level=2,
        benefit="Careful planning of settlements. Opens the path to Architectural Wonders.",
    ),
    FeatDefinition(
        id="clever-courtiers",
        name="Clever Courtiers",
        level=2,
        benefit="+1 item bonus to Intrigue and Politics checks.",
        skill_bonuses={"Intrigue": 1, "Politics": 1},
    ),
    FeatDefinition(
        id="enduring-kingdom",
        name="Enduring Kingdom",
        level=2,
        benefit="Ruin thresholds are increased by 2.",
        ruin_threshold_bonus=2,
    ),
    FeatDefinition(
        id="expert-craftspeople",
        name="Expert Craftspeople",
        level=2,
        benefit="+1 item bonus to Craft Luxuries.",
        activity_bonuses={"craft-luxuries": 1},
    ),
    FeatDefinition(
        id="frontier-mentality",
        name="Frontier Mentality",
        level=2,
        benefit="+1 item bonus to Exploration and Wilderness checks. Claiming hexes costs 0 RP.",
        skill_bonuses={"Exploration": 1, "Wilderness": 1},
        cost_modifiers={"claim-hex": -1},
    ),
    # Level 4
    FeatDefinition(
        id="celebratory-traditions",
        name="Celebratory Traditions",
        level=4,
        benefit="Celebrate Holiday costs 0 RP.",
        cost_modifiers={"celebrate-holiday": -1},
    ),
    FeatDefinition(
        id="consolidated-leadership",
        name="Consolidated Leadership",
        level=4,
        prerequisite="cooperative-leadership",
        benefit="Gain 1 additional leadership activity per turn. Invested leaders provide +2 instead of +1.",
        extra_leadership_activities=1,
        leader_bonus=2,
    ),
    FeatDefinition(
        id="diverse-trade",
        name="Diverse Trade",
        level=4,
        prerequisite="free-and-fair",
        benefit="Commodity storage increased by 4 for all types.",
        storage_bonus=4,
    ),
    FeatDefinition(
        id="famous-scholars",
        name="Famous Scholars",
        level=4,
        benefit="+2 item bonus to Creative Solution and Scholarship checks.",
        activity_bonuses={"creative-solution": 2},
        skill_bonuses={"Scholarship": 2},
    ),
    FeatDefinition(
        id="quality-of-life",
        name="Quality of Life",
        level=4,
        benefit="Consumption decreased by 1.",
        consumption_modifier=-1,
    ),
    FeatDefinition(
        id="seasoned-veterans",
        name="Seasoned Veterans",
        level=4,
        prerequisite="civil-war-veterans",
        benefit="+2 item bonus to Warfare checks.",
        skill_bonuses={"Warfare": 2},
    ),
    # Level 6
    FeatDefinition(
        id="architectural-wonders",
        name="Architectural Wonders",
        level=6,
        prerequisite="civic-planning",
        benefit="Grand structures draw admirers from afar.",
    ),
    FeatDefinition(
        id="diplomatic-immunity",
        name="Diplomatic Immunity",
        level=6,
        prerequisite="clever-courtiers",
        benefit="+2 item bonus to New Leadership and Repair Reputation.",
        activity_bonuses={"new-leadership": 2, "repair-reputation": 2},
    ),
    FeatDefinition(
        id="legendary-craftspeople",
        name="Legendary Craftspeople",
        level=6,
        prerequisite="expert-craftspeople",
        benefit="+2 item bonus to Craft Luxuries and Industry checks.",
        activity_bonuses={"craft-luxuries": 2},
        skill_bonuses={"Industry": 2},
    ),
    FeatDefinition(
        id="national-spirit",
        name="National Spirit",
        level=6,
        benefit="Unrest cannot exceed 10. When Unrest would exceed 10, gain 1 Fame instead.",
        unrest_cap=10,
    ),
    FeatDefinition(
        id="vast-territory",
        name="Vast Territory",
        level=6,
        prerequisite="frontier-mentality",
        benefit="Increase the Resource Die by one step.",
        resource_die_step=1,
    ),
    # Level 8
    FeatDefinition(
        id="capital-investment",
        name="Capital Investment",
        level=8,
        benefit="Gain +2 RP each upkeep. Collect Taxes critical success grants +3 RP instead of +2.",
        bonus_rp=2,
    ),
    FeatDefinition(
        id="eternal-kingdom",
        name="Eternal Kingdom",
        level=8,
        prerequisite="enduring-kingdom",
        benefit="Ruin thresholds increased by 5.",
        ruin_threshold_bonus=5,
    ),
    # Level 10
    FeatDefinition(
        id="imperial-ambition",
        name="Imperial Ambition",
        level=10,
        prerequisite="vast-territory",
        benefit="+2 item bonus when claiming hexes or establishing settlements.",
        activity_bonuses={"claim-hex": 2, "establish-settlement": 2},
    ),
]
