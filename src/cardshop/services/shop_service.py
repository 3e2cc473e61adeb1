"""Shop service for deterministic wholesale, shelving and checkout flows."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Mapping, Tuple

from cardshop.config import SimConfig
from cardshop.core.guards import int_or
from cardshop.data.packs import SKU_IDS, WHOLESALE_SKUS, WHOLESALE_SKUS_BY_ID
from cardshop.domain.defs import WholesaleSkuDef
from cardshop.domain.economy import can_afford, spend_money
from cardshop.domain.results import Failure, Outcome, Success
from cardshop.domain.state import EconomyState, ShelfSlot, ShopState


@dataclass(frozen=True, slots=True)
class ShelfSale:
    """One unit taken off a shelf; the caller attaches it to a customer."""

    sku_id: str
    value: int
    xp: int


@dataclass(frozen=True, slots=True)
class WholesalePurchase:
    shop: ShopState
    economy: EconomyState


class ShopService:
    """Backroom stock and bounded shelf slots.

    Every method takes the current state and returns a new one inside a
    ``Success``, or a ``Failure`` carrying the reason; inputs are never modified.
    """

    def __init__(self, config: SimConfig) -> None:
        self._config = config

    @property
    def skus(self) -> Tuple[WholesaleSkuDef, ...]:
        return WHOLESALE_SKUS

    def get_sku(self, sku_id: str) -> WholesaleSkuDef | None:
        return WHOLESALE_SKUS_BY_ID.get(sku_id) if isinstance(sku_id, str) else None

    def create_initial_state(self) -> ShopState:
        tuning = self._config.shop
        return ShopState(
            backroom={sku_id: 0 for sku_id in SKU_IDS},
            shelves=tuple(
                ShelfSlot(sku_id=None, quantity=0, capacity=tuning.shelf_slot_capacity)
                for _ in range(tuning.shelf_slots)
            ),
        )

    @staticmethod
    def backroom_count(shop: ShopState, sku_id: str) -> int:
        return max(0, shop.backroom.get(sku_id, 0))

    def buy_wholesale_packs(
        self, shop: ShopState, economy: EconomyState, sku_id: str, quantity: int
    ) -> Outcome[WholesalePurchase]:
        sku = self.get_sku(sku_id)
        if sku is None:
            return Failure("unknown_sku")
        qty = int_or(quantity, 0)
        if qty <= 0:
            return Failure("invalid_quantity")
        total_cost = sku.wholesale_cost * qty
        if not can_afford(economy, total_cost):
            return Failure("insufficient_funds")
        backroom = _with_count(shop.backroom, sku_id, self.backroom_count(shop, sku_id) + qty)
        return Success(
            WholesalePurchase(
                shop=replace(shop, backroom=backroom),
                economy=spend_money(economy, total_cost),
            )
        )

    def stock_shelf_slot(self, shop: ShopState, slot_index: int, sku_id: str, quantity: int) -> Outcome[ShopState]:
        index = _slot_index(shop, slot_index)
        if index is None:
            return Failure("bad_slot")
        if self.get_sku(sku_id) is None:
            return Failure("unknown_sku")
        qty = int_or(quantity, 0)
        if qty <= 0:
            return Failure("invalid_quantity")

        slot = shop.shelves[index]
        if slot.sku_id is not None and slot.sku_id != sku_id:
            return Failure("slot_has_other_sku")
        available = self.backroom_count(shop, sku_id)
        if available <= 0:
            return Failure("no_backroom_stock")
        space = slot.capacity - slot.quantity
        if space <= 0:
            return Failure("slot_full")

        moved = min(available, space, qty)
        shelves = _with_slot(shop.shelves, index, replace(slot, sku_id=sku_id, quantity=slot.quantity + moved))
        backroom = _with_count(shop.backroom, sku_id, available - moved)
        return Success(ShopState(backroom=backroom, shelves=shelves))

    def unstock_shelf_slot(self, shop: ShopState, slot_index: int, quantity: int) -> Outcome[ShopState]:
        index = _slot_index(shop, slot_index)
        if index is None:
            return Failure("bad_slot")
        qty = int_or(quantity, 0)
        if qty <= 0:
            return Failure("invalid_quantity")

        slot = shop.shelves[index]
        if slot.is_empty or slot.sku_id is None:
            return Failure("slot_empty")
        sku_id = slot.sku_id
        moved = min(slot.quantity, qty)
        left = slot.quantity - moved
        shelves = _with_slot(
            shop.shelves, index, replace(slot, quantity=left, sku_id=sku_id if left > 0 else None)
        )
        backroom = _with_count(shop.backroom, sku_id, self.backroom_count(shop, sku_id) + moved)
        return Success(ShopState(backroom=backroom, shelves=shelves))

    def clear_shelf_slot(self, shop: ShopState, slot_index: int) -> Outcome[ShopState]:
        """Reset an already-empty slot; a slot still holding stock is refused."""
        index = _slot_index(shop, slot_index)
        if index is None:
            return Failure("bad_slot")
        slot = shop.shelves[index]
        if not slot.is_empty:
            return Failure("slot_not_empty")
        shelves = _with_slot(shop.shelves, index, replace(slot, sku_id=None, quantity=0))
        return Success(replace(shop, shelves=shelves))

    def sell_one_from_shelves(self, shop: ShopState) -> Outcome[Tuple[ShopState, ShelfSale]]:
        """Sell one unit from the first stocked slot, scanning in index order."""
        for index, slot in enumerate(shop.shelves):
            if slot.is_empty or slot.sku_id is None:
                continue
            sku = self.get_sku(slot.sku_id)
            if sku is None:
                return Failure("unknown_sku")
            left = slot.quantity - 1
            shelves = _with_slot(
                shop.shelves, index, replace(slot, quantity=left, sku_id=slot.sku_id if left > 0 else None)
            )
            sale = ShelfSale(sku_id=sku.id, value=sku.sale_price, xp=sku.xp_per_sale)
            return Success((replace(shop, shelves=shelves), sale))
        return Failure("out_of_stock")


def _slot_index(shop: ShopState, slot_index: int) -> int | None:
    index = int_or(slot_index, -1)
    if index < 0 or index >= len(shop.shelves):
        return None
    return index


def _with_slot(shelves: Tuple[ShelfSlot, ...], index: int, slot: ShelfSlot) -> Tuple[ShelfSlot, ...]:
    return shelves[:index] + (slot,) + shelves[index + 1 :]


def _with_count(counts: Mapping[str, int], key: str, value: int) -> Dict[str, int]:
    updated = dict(counts)
    updated[key] = value
    return updated
