"""Kingdom milestones - one-time XP awards for reaching notable goals."""

from __future__ import annotations
from pydantic import BaseModel


class MilestoneDefinition(BaseModel):
    id: str
    name: str
    xp: int
    description: str = ""


MILESTONES: list[MilestoneDefinition] = [
    MilestoneDefinition(id="first-settlement", name="First Settlement", xp=80,
                        description="Establish your first settlement."),
    MilestoneDefinition(id="five-hexes", name="Growing Territory", xp=40,
                        description="Claim 5 hexes."),
    MilestoneDefinition(id="ten-hexes", name="Expanding Borders", xp=80,
                        description="Claim 10 hexes."),
    MilestoneDefinition(id="twenty-five-hexes", name="Regional Power", xp=120,
                        description="Claim 25 hexes."),
    MilestoneDefinition(id="first-town", name="First Town", xp=80,
                        description="Grow a settlement to 5 occupied blocks."),
    MilestoneDefinition(id="first-city", name="First City", xp=120,
                        description="Grow a settlement to 9 occupied blocks."),
    MilestoneDefinition(id="zero-unrest", name="Peaceful Realm", xp=40,
                        description="End upkeep with no Unrest."),
    MilestoneDefinition(id="all-leadership", name="Full Council", xp=40,
                        description="Fill every leadership role."),
    MilestoneDefinition(id="ten-buildings", name="Master Builder", xp=60,
                        description="Construct 10 structures."),
    MilestoneDefinition(id="level-five", name="Established Kingdom", xp=100,
                        description="Reach kingdom level 5."),
    MilestoneDefinition(id="level-ten", name="Renowned Kingdom", xp=200,
                        description="Reach kingdom level 10."),
]
