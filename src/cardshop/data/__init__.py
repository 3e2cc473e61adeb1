"""Static data tables (generated once, read-only thereafter)."""

from .cards import CARD_CATALOG, CardCatalog
from .packs import SKU_IDS, WHOLESALE_SKUS, WHOLESALE_SKUS_BY_ID, build_player_packs
from .skills import SKILL_CHAIN, SKILLS

__all__ = [
    "CARD_CATALOG",
    "CardCatalog",
    "SKILLS",
    "SKILL_CHAIN",
    "SKU_IDS",
    "WHOLESALE_SKUS",
    "WHOLESALE_SKUS_BY_ID",
    "build_player_packs",
]
