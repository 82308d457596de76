"""Effect schemas - the closed set of changes an activity or event outcome can make.

Every effect carries a ``kind`` tag so that lists of effects validate as a
discriminated union. Amounts are either integers or dice notation
("1d4", "-1d10") rolled when the effect is applied.
"""

from __future__ import annotations
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, Field

from .kingdom import Commodity, RuinType, WorkSiteType

Amount = Union[int, str]


class RPEffect(BaseModel):
    kind: Literal["rp"] = "rp"
    amount: Amount


class RefundEffect(BaseModel):
    """Return part of the RP paid for the activity."""
    kind: Literal["refund"] = "refund"
    fraction: float = 0.5


class CommodityEffect(BaseModel):
    kind: Literal["commodity"] = "commodity"
    commodity: Commodity
    amount: Amount


class UnrestEffect(BaseModel):
    kind: Literal["unrest"] = "unrest"
    amount: Amount


class RuinEffect(BaseModel):
    kind: Literal["ruin"] = "ruin"
    ruin: RuinType
    amount: Amount


class FameEffect(BaseModel):
    kind: Literal["fame"] = "fame"
    amount: Amount


class InfamyEffect(BaseModel):
    kind: Literal["infamy"] = "infamy"
    amount: Amount


class XPEffect(BaseModel):
    kind: Literal["xp"] = "xp"
    amount: Amount


class ReputationEffect(BaseModel):
    """Adjust infamy or a ruin track chosen through the ``target`` input."""
    kind: Literal["reputation"] = "reputation"
    amount: Amount


class ClaimHexEffect(BaseModel):
    kind: Literal["claim_hex"] = "claim_hex"


class AbandonHexEffect(BaseModel):
    kind: Literal["abandon_hex"] = "abandon_hex"


class ExploreHexEffect(BaseModel):
    kind: Literal["explore_hex"] = "explore_hex"


class WorkSiteEffect(BaseModel):
    """Establish a work site; the type comes from the effect or the ``site_type`` input."""
    kind: Literal["work_site"] = "work_site"
    site_type: Optional[WorkSiteType] = None
    bonus: bool = False


class RoadEffect(BaseModel):
    kind: Literal["road"] = "road"


class FortifyEffect(BaseModel):
    kind: Literal["fortify"] = "fortify"
    bonus: int = 1


class ClearHexEffect(BaseModel):
    kind: Literal["clear_hex"] = "clear_hex"


class FoundSettlementEffect(BaseModel):
    kind: Literal["found_settlement"] = "found_settlement"


class RelocateCapitalEffect(BaseModel):
    kind: Literal["relocate_capital"] = "relocate_capital"


class BuildStructureEffect(BaseModel):
    kind: Literal["build_structure"] = "build_structure"


class DemolishStructureEffect(BaseModel):
    kind: Literal["demolish_structure"] = "demolish_structure"


class AssignLeaderEffect(BaseModel):
    kind: Literal["assign_leader"] = "assign_leader"
    invested: bool = False


class SpecialEffect(BaseModel):
    """Free-form marker handled by the event and progression layers."""
    kind: Literal["special"] = "special"
    key: str
    description: str = ""


Effect = Annotated[
    Union[
        RPEffect,
        RefundEffect,
        CommodityEffect,
        UnrestEffect,
        RuinEffect,
        FameEffect,
        InfamyEffect,
        XPEffect,
        ReputationEffect,
        ClaimHexEffect,
        AbandonHexEffect,
        ExploreHexEffect,
        WorkSiteEffect,
        RoadEffect,
        FortifyEffect,
        ClearHexEffect,
        FoundSettlementEffect,
        RelocateCapitalEffect,
        BuildStructureEffect,
        DemolishStructureEffect,
        AssignLeaderEffect,
        SpecialEffect,
    ],
    Field(discriminator="kind"),
]
