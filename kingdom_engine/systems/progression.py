"""Progression engine - XP thresholds, milestones, level-ups, feats and skill training."""

from __future__ import annotations
import logging
from typing import Optional, Union, TYPE_CHECKING

from kingdom_engine.catalog.milestones import MilestoneDefinition
from kingdom_engine.catalog.reference import (
    SKILL_ABILITIES,
    TRAINING_COSTS,
    XP_PER_LEVEL_BEYOND_20,
    XP_THRESHOLDS,
)
from kingdom_engine.models.kingdom import Ability, Kingdom, LeaderRole, Proficiency
from kingdom_engine.models.results import (
    EngineFailure,
    ErrorCode,
    LevelUpResult,
    TrainingResult,
)
from kingdom_engine.systems.structures import built_structure_count

if TYPE_CHECKING:
    from kingdom_engine.catalog import Catalog
    from kingdom_engine.catalog.feats import FeatDefinition

logger = logging.getLogger(__name__)


def xp_for_level(level: int) -> int:
    """Cumulative XP needed to reach ``level``."""
    if level <= 1:
        return 0
    if level in XP_THRESHOLDS:
        return XP_THRESHOLDS[level]
    return XP_THRESHOLDS[20] + (level - 20) * XP_PER_LEVEL_BEYOND_20


def get_skill_training_cost(tier: Proficiency) -> Optional[int]:
    """RP to advance out of ``tier``; None at Legendary."""
    return TRAINING_COSTS[tier]


def _milestone_reached(milestone_id: str, kingdom: Kingdom) -> bool:
    blocks = max((s.occupied_blocks for s in kingdom.settlements), default=0)
    filled = {l.role for l in kingdom.leaders if not l.is_vacant}
    checks = {
        "first-settlement": lambda: len(kingdom.settlements) >= 1,
        "five-hexes": lambda: kingdom.claimed_hex_count >= 5,
        "ten-hexes": lambda: kingdom.claimed_hex_count >= 10,
        "twenty-five-hexes": lambda: kingdom.claimed_hex_count >= 25,
        "first-town": lambda: blocks >= 5,
        "first-city": lambda: blocks >= 9,
        "zero-unrest": lambda: kingdom.unrest == 0,
        "all-leadership": lambda: all(role in filled for role in LeaderRole),
        "ten-buildings": lambda: built_structure_count(kingdom) >= 10,
        "level-five": lambda: kingdom.level >= 5,
        "level-ten": lambda: kingdom.level >= 10,
    }
    check = checks.get(milestone_id)
    return bool(check and check())


class ProgressionSystem:
    """Levels, milestones, feats and skill training."""

    def __init__(self, catalog: "Catalog"):
        self.catalog = catalog

    # Eligibility checks only flag; they never change the kingdom

    def check_level_up(self, kingdom: Kingdom) -> bool:
        """Whether accumulated XP reaches the next level's threshold."""
        return kingdom.xp >= xp_for_level(kingdom.level + 1)

    def xp_to_next_level(self, kingdom: Kingdom) -> int:
        return max(0, xp_for_level(kingdom.level + 1) - kingdom.xp)

    def check_milestones(self, kingdom: Kingdom) -> list[MilestoneDefinition]:
        """Milestones reached but not yet awarded."""
        return [
            m for m in self.catalog.milestones
            if m.id not in kingdom.achieved_milestones and _milestone_reached(m.id, kingdom)
        ]

    def award_milestones(self, kingdom: Kingdom) -> list[MilestoneDefinition]:
        """Record newly reached milestones and add their XP, in place."""
        reached = self.check_milestones(kingdom)
        for milestone in reached:
            kingdom.achieved_milestones.append(milestone.id)
            kingdom.xp += milestone.xp
            logger.info("Milestone reached: %s (+%d XP)", milestone.name, milestone.xp)
        return reached

    # Feats

    def feat_requirement(self, kingdom: Kingdom, feat_id: str, level: int) -> Optional[EngineFailure]:
        """Why a feat cannot be taken at ``level``, or None if it can."""
        feat = self.catalog.feat(feat_id)
        if feat is None:
            return EngineFailure(code=ErrorCode.UNKNOWN_FEAT, message=f"Unknown feat: {feat_id}")
        if feat_id in kingdom.feats:
            return EngineFailure(code=ErrorCode.INVALID_INPUT, message=f"{feat.name} has already been taken")
        if feat.level > level:
            return EngineFailure(
                code=ErrorCode.PREREQUISITE_NOT_MET,
                message=f"{feat.name} requires kingdom level {feat.level}",
            )
        if feat.prerequisite and feat.prerequisite not in kingdom.feats:
            parent = self.catalog.feat(feat.prerequisite)
            return EngineFailure(
                code=ErrorCode.PREREQUISITE_NOT_MET,
                message=f"{feat.name} requires {parent.name if parent else feat.prerequisite}",
            )
        return None

    def available_feats(self, kingdom: Kingdom, level: Optional[int] = None) -> list["FeatDefinition"]:
        level = kingdom.level if level is None else level
        return [
            f for f in self.catalog.feats.values()
            if self.feat_requirement(kingdom, f.id, level) is None
        ]

    @staticmethod
    def feat_required(new_level: int) -> bool:
        """Feats are chosen at level 1 and every even level."""
        return new_level == 1 or new_level % 2 == 0

    # Level-up and training

    def apply_level_up(
        self,
        kingdom: Kingdom,
        ability: Union[str, Ability],
        skill: str,
        feat: Optional[str] = None,
    ) -> Union[LevelUpResult, EngineFailure]:
        """Gain a level: +2 to an ability, one proficiency tier in a skill, and a feat on even levels.

        XP eligibility is not enforced here; callers check ``check_level_up``
        first when they want to.
        """
        try:
            chosen_ability = Ability(ability.title() if isinstance(ability, str) else ability)
        except ValueError:
            return EngineFailure(code=ErrorCode.INVALID_INPUT, message=f"Unknown ability: {ability}")
        if skill not in SKILL_ABILITIES:
            return EngineFailure(code=ErrorCode.INVALID_INPUT, message=f"Unknown skill: {skill}")

        new_level = kingdom.level + 1
        needs_feat = self.feat_required(new_level)
        if needs_feat:
            if not feat:
                return EngineFailure(
                    code=ErrorCode.INVALID_INPUT,
                    message=f"Level {new_level} requires choosing a feat",
                )
            problem = self.feat_requirement(kingdom, feat, new_level)
            if problem is not None:
                return problem

        state = kingdom.model_copy(deep=True)
        state.level = new_level
        state.abilities[chosen_ability] = state.abilities.get(chosen_ability, 10) + 2
        old_tier = state.proficiency(skill)
        state.skills[skill] = old_tier.next()
        log = [
            f"Kingdom reached level {new_level}",
            f"{chosen_ability.value} +2 (now {state.abilities[chosen_ability]})",
        ]
        if old_tier == Proficiency.LEGENDARY:
            log.append(f"{skill} is already Legendary")
        else:
            log.append(f"{skill} trained to {state.skills[skill].value}")

        taken = None
        if needs_feat:
            state.feats.append(feat)
            taken = feat
            log.append(f"Gained feat: {self.catalog.feat(feat).name}")
        elif feat:
            log.append(f"Feat {feat} ignored: none is gained at level {new_level}")

        logger.info("Level up to %d (%s, %s, feat=%s)", new_level, chosen_ability.value, skill, taken)
        return LevelUpResult(
            state=state,
            new_level=new_level,
            ability=chosen_ability.value,
            skill=skill,
            new_tier=state.skills[skill],
            feat=taken,
            log=log,
        )

    def train_skill_with_rp(self, kingdom: Kingdom, skill: str) -> Union[TrainingResult, EngineFailure]:
        """Spend RP to raise a skill one proficiency tier."""
        if skill not in SKILL_ABILITIES:
            return EngineFailure(code=ErrorCode.INVALID_INPUT, message=f"Unknown skill: {skill}")
        tier = kingdom.proficiency(skill)
        cost = get_skill_training_cost(tier)
        if cost is None:
            return EngineFailure(
                code=ErrorCode.MAX_PROFICIENCY_REACHED,
                message=f"{skill} is already Legendary",
            )
        if cost > kingdom.rp:
            return EngineFailure(
                code=ErrorCode.INSUFFICIENT_RESOURCES,
                message=f"Training {skill} costs {cost} RP, only {kingdom.rp} RP available",
            )
        state = kingdom.model_copy(deep=True)
        state.rp -= cost
        state.skills[skill] = tier.next()
        logger.info("Trained %s to %s for %d RP", skill, state.skills[skill].value, cost)
        return TrainingResult(state=state, skill=skill, new_tier=state.skills[skill], cost=cost)
