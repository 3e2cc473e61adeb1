"""Domain definition exports."""

from .card_def import CardDef
from .pack_def import PlayerPackDef, WholesaleSkuDef
from .skill_def import SkillDef

__all__ = [
    "CardDef",
    "PlayerPackDef",
    "SkillDef",
    "WholesaleSkuDef",
]
