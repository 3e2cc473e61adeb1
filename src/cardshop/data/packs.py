"""Wholesale SKUs and player pack tables derived from the tier curve."""
from __future__ import annotations

import math
from types import MappingProxyType
from typing import Mapping, Tuple

from cardshop.core.types import MAX_TIER, MIN_TIER, RARITIES, Rarity
from cardshop.domain.defs import PlayerPackDef, WholesaleSkuDef

RARITY_COST_MULTIPLIER: Mapping[Rarity, int] = MappingProxyType(
    {"common": 1, "uncommon": 2, "rare": 4, "epic": 7, "legendary": 12}
)

DEFAULT_CARDS_PER_PACK = 8


def wholesale_sku_id(tier: int) -> str:
    return f"tier{tier}Pack"


def player_pack_id(tier: int, rarity: Rarity) -> str:
    return f"playerPack_t{tier}_{rarity}"


def _build_wholesale_skus() -> Tuple[WholesaleSkuDef, ...]:
    skus = []
    for tier in range(MIN_TIER, MAX_TIER + 1):
        wholesale_cost = math.ceil(4 + tier * tier * 2.2)
        skus.append(
            WholesaleSkuDef(
                id=wholesale_sku_id(tier),
                name=f"Sealed Pack (Tier {tier})",
                tier=tier,
                wholesale_cost=wholesale_cost,
                sale_price=math.ceil(wholesale_cost * 1.6),
                xp_per_sale=math.ceil(2 + tier * 1.5),
            )
        )
    return tuple(skus)


def player_pack_cost(tier: int, rarity: Rarity) -> int:
    return math.ceil((6 + tier * tier * 2) * RARITY_COST_MULTIPLIER[rarity])


def build_player_packs(cards_per_pack: int = DEFAULT_CARDS_PER_PACK) -> Tuple[PlayerPackDef, ...]:
    packs = []
    for tier in range(MIN_TIER, MAX_TIER + 1):
        for rarity in RARITIES:
            packs.append(
                PlayerPackDef(
                    id=player_pack_id(tier, rarity),
                    name=f"Pack (T{tier} - {rarity})",
                    tier=tier,
                    rarity=rarity,
                    cost=player_pack_cost(tier, rarity),
                    cards_per_pack=cards_per_pack,
                )
            )
    return tuple(packs)


WHOLESALE_SKUS: Tuple[WholesaleSkuDef, ...] = _build_wholesale_skus()
WHOLESALE_SKUS_BY_ID: Mapping[str, WholesaleSkuDef] = MappingProxyType({sku.id: sku for sku in WHOLESALE_SKUS})
SKU_IDS: Tuple[str, ...] = tuple(sku.id for sku in WHOLESALE_SKUS)
