"""Player pack purchases and pack opening."""
from __future__ import annotations

from dataclasses import replace
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from cardshop.config import SimConfig
from cardshop.core.guards import int_or
from cardshop.core.rng import RNG
from cardshop.data.cards import CARD_CATALOG, CardCatalog
from cardshop.data.packs import build_player_packs
from cardshop.domain.defs import PlayerPackDef
from cardshop.domain.economy import can_afford, spend_money
from cardshop.domain.events import OpenedCard, PackOpened
from cardshop.domain.results import Failure, Outcome, Success
from cardshop.domain.state import GameState


class PackService:
    """Sealed packs the player buys and opens into the collection."""

    def __init__(self, config: SimConfig, *, catalog: CardCatalog = CARD_CATALOG) -> None:
        self._catalog = catalog
        self._packs: Tuple[PlayerPackDef, ...] = build_player_packs(config.shop.cards_per_pack)
        self._packs_by_id: Mapping[str, PlayerPackDef] = MappingProxyType({pack.id: pack for pack in self._packs})

    @property
    def packs(self) -> Tuple[PlayerPackDef, ...]:
        return self._packs

    def get_pack(self, pack_id: str) -> PlayerPackDef | None:
        return self._packs_by_id.get(pack_id) if isinstance(pack_id, str) else None

    def buy_player_packs(self, state: GameState, pack_id: str, quantity: int) -> Outcome[GameState]:
        pack = self.get_pack(pack_id)
        if pack is None:
            return Failure("unknown_pack")
        qty = int_or(quantity, 0)
        if qty <= 0:
            return Failure("invalid_quantity")
        total = pack.cost * qty
        if not can_afford(state.economy, total):
            return Failure("insufficient_funds")
        sealed = dict(state.sealed_packs)
        sealed[pack_id] = max(0, sealed.get(pack_id, 0)) + qty
        return Success(replace(state, economy=spend_money(state.economy, total), sealed_packs=sealed))

    def open_player_pack(self, state: GameState, pack_id: str) -> Outcome[GameState]:
        pack = self.get_pack(pack_id)
        if pack is None:
            return Failure("unknown_pack")
        available = state.sealed_packs.get(pack_id, 0)
        if available <= 0:
            return Failure("no_packs")
        pool = self._catalog.pool(pack.tier, pack.rarity)
        if not pool:
            return Failure("empty_pool")

        rng = RNG(state.rng_seed)
        collection: Dict[str, int] = dict(state.collection)
        opened: List[OpenedCard] = []
        for _ in range(pack.cards_per_pack):
            card = rng.choice(pool)
            opened.append(OpenedCard(card_id=card.id, attack=card.attack, health=card.health, rarity=card.rarity))
            collection[card.id] = collection.get(card.id, 0) + 1

        sealed = dict(state.sealed_packs)
        sealed[pack_id] = available - 1
        event = PackOpened(pack_id=pack.id, tier=pack.tier, rarity=pack.rarity, cards=tuple(opened))
        next_state = replace(state, rng_seed=rng.seed, sealed_packs=sealed, collection=collection)
        return Success(next_state, events=(event,))
