"""Procedurally generated card catalog.

The table is built once at import time and exposed read-only through
``CARD_CATALOG``. Naming and stats follow a fixed curve so every build of the
game agrees on card ids and numbers.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple

from cardshop.core.types import MAX_TIER, MIN_TIER, RARITIES, Rarity
from cardshop.domain.defs import CardDef

# (rarity, cards per tier, id code)
RARITY_COUNTS: Tuple[Tuple[Rarity, int, str], ...] = (
    ("common", 20, "c"),
    ("uncommon", 10, "u"),
    ("rare", 6, "r"),
    ("epic", 3, "e"),
    ("legendary", 1, "l"),
)

RARITY_STAT_BONUS: Mapping[Rarity, int] = MappingProxyType(
    {"common": 0, "uncommon": 2, "rare": 5, "epic": 9, "legendary": 14}
)

_ADJECTIVES = (
    "Ashen", "Bright", "Cinder", "Dawn", "Ebon", "Frost", "Gilded", "Hollow",
    "Iron", "Jade", "Keen", "Lunar", "Moss", "Nova", "Oaken", "Pale",
    "Quiet", "Riven", "Sable", "Thorn", "Umbral", "Verdant", "Wild", "Zephyr",
)
_NOUNS = (
    "Blade", "Shield", "Spark", "Ward", "Cleave", "Bolt", "Oath", "Charm",
    "Rune", "Echo", "Vow", "Sigil", "Fang", "Crown", "Lantern", "Talisman",
    "Beacon", "Gambit", "Aegis", "Strike",
)


def make_card_id(tier: int, rarity_code: str, index: int) -> str:
    return f"t{tier}_{rarity_code}{index:02d}"


def _generate_cards() -> List[CardDef]:
    cards: List[CardDef] = []
    for tier in range(MIN_TIER, MAX_TIER + 1):
        name_index = 0
        for rarity, count, code in RARITY_COUNTS:
            for index in range(1, count + 1):
                adjective = _ADJECTIVES[(name_index + tier * 3) % len(_ADJECTIVES)]
                noun = _NOUNS[(name_index * 2 + tier * 5) % len(_NOUNS)]
                name_index += 1

                base = 2 + tier * 3
                bonus = RARITY_STAT_BONUS[rarity]
                attack_wobble = (index % 4) - 1
                health_wobble = ((index * 3) % 5) - 2
                cards.append(
                    CardDef(
                        id=make_card_id(tier, code, index),
                        name=f"{rarity.capitalize()} {adjective} {noun} (T{tier})",
                        tier=tier,
                        rarity=rarity,
                        attack=max(1, base + bonus + attack_wobble),
                        health=max(1, base + bonus + health_wobble + 2),
                    )
                )
    return cards


class CardCatalog:
    """Immutable lookup table over the generated card definitions."""

    def __init__(self, cards: Iterable[CardDef]) -> None:
        self._cards: Tuple[CardDef, ...] = tuple(cards)
        self._by_id: Mapping[str, CardDef] = MappingProxyType({card.id: card for card in self._cards})
        pools: Dict[Tuple[int, Rarity], List[CardDef]] = {}
        for card in self._cards:
            pools.setdefault((card.tier, card.rarity), []).append(card)
        self._pools: Mapping[Tuple[int, Rarity], Tuple[CardDef, ...]] = MappingProxyType(
            {key: tuple(pool) for key, pool in pools.items()}
        )

    def __len__(self) -> int:
        return len(self._cards)

    def __contains__(self, card_id: object) -> bool:
        return isinstance(card_id, str) and card_id in self._by_id

    def get(self, card_id: str) -> CardDef:
        """Return a definition by id."""
        try:
            return self._by_id[card_id]
        except KeyError as exc:
            raise KeyError(card_id) from exc

    def find(self, card_id: str) -> CardDef | None:
        if not isinstance(card_id, str):
            return None
        return self._by_id.get(card_id)

    def all(self) -> Tuple[CardDef, ...]:
        """Return all definitions in generation order (tier, then rarity)."""
        return self._cards

    def pool(self, tier: int, rarity: Rarity) -> Tuple[CardDef, ...]:
        """Cards of exactly this tier and rarity; empty when none exist."""
        return self._pools.get((tier, rarity), ())

    def highest_tier_in(self, card_ids: Iterable[str]) -> int:
        highest = MIN_TIER
        for card_id in card_ids:
            card = self.find(card_id)
            if card is not None and card.tier > highest:
                highest = card.tier
        return highest


CARD_CATALOG = CardCatalog(_generate_cards())

__all__ = ["CARD_CATALOG", "CardCatalog", "RARITIES", "RARITY_COUNTS", "make_card_id"]
