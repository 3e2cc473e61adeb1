"""Pack definition structures."""
from __future__ import annotations

from dataclasses import dataclass

from cardshop.core.types import Rarity


@dataclass(frozen=True, slots=True)
class WholesaleSkuDef:
    """A sealed product bought into the backroom and sold to customers."""

    id: str
    name: str
    tier: int
    wholesale_cost: int
    sale_price: int
    xp_per_sale: int


@dataclass(frozen=True, slots=True)
class PlayerPackDef:
    """A pack the player buys for themselves and opens into the collection."""

    id: str
    name: str
    tier: int
    rarity: Rarity
    cost: int
    cards_per_pack: int
