from __future__ import annotations

from dataclasses import replace

from cardshop.config import DEFAULT_CONFIG
from cardshop.domain.results import Failure, Success
from cardshop.domain.state import EconomyState, ShelfSlot, ShopState
from cardshop.services.shop_service import ShopService


def _build_service() -> ShopService:
    return ShopService(DEFAULT_CONFIG)


def _stocked_shop(service: ShopService, backroom: int = 10) -> ShopState:
    shop = service.create_initial_state()
    return replace(shop, backroom={**shop.backroom, "tier1Pack": backroom, "tier2Pack": backroom})


def test_initial_shop_is_empty() -> None:
    shop = _build_service().create_initial_state()

    assert len(shop.shelves) == 4
    assert all(slot == ShelfSlot(sku_id=None, quantity=0, capacity=6) for slot in shop.shelves)
    assert set(shop.backroom.values()) == {0}
    assert len(shop.backroom) == 9


def test_buy_wholesale_debits_money_and_credits_backroom() -> None:
    service = _build_service()
    shop = service.create_initial_state()

    result = service.buy_wholesale_packs(shop, EconomyState(money=50), "tier1Pack", 2)

    assert isinstance(result, Success)
    assert result.value.economy.money == 36
    assert result.value.shop.backroom["tier1Pack"] == 2
    assert shop.backroom["tier1Pack"] == 0


def test_buy_wholesale_rejections_leave_state_untouched() -> None:
    service = _build_service()
    shop = service.create_initial_state()
    economy = EconomyState(money=6)

    assert service.buy_wholesale_packs(shop, economy, "tier1Pack", 1) == Failure("insufficient_funds")
    assert service.buy_wholesale_packs(shop, economy, "tier0Pack", 1) == Failure("unknown_sku")
    assert service.buy_wholesale_packs(shop, economy, "tier1Pack", 0) == Failure("invalid_quantity")
    assert service.buy_wholesale_packs(shop, economy, "tier1Pack", float("nan")) == Failure("invalid_quantity")
    assert economy == EconomyState(money=6)
    assert shop == service.create_initial_state()


def test_stock_moves_at_most_available_stock() -> None:
    service = _build_service()
    shop = _stocked_shop(service, backroom=2)

    result = service.stock_shelf_slot(shop, 0, "tier1Pack", 10)

    assert isinstance(result, Success)
    assert result.value.shelves[0] == ShelfSlot(sku_id="tier1Pack", quantity=2, capacity=6)
    assert result.value.backroom["tier1Pack"] == 0


def test_stock_is_limited_by_capacity() -> None:
    service = _build_service()
    first = service.stock_shelf_slot(_stocked_shop(service), 1, "tier1Pack", 10)
    assert isinstance(first, Success)
    assert first.value.shelves[1].quantity == 6
    assert first.value.backroom["tier1Pack"] == 4

    assert service.stock_shelf_slot(first.value, 1, "tier1Pack", 1) == Failure("slot_full")
    assert service.stock_shelf_slot(first.value, 1, "tier2Pack", 1) == Failure("slot_has_other_sku")


def test_stock_rejections() -> None:
    service = _build_service()
    shop = service.create_initial_state()

    assert service.stock_shelf_slot(shop, 4, "tier1Pack", 1) == Failure("bad_slot")
    assert service.stock_shelf_slot(shop, -1, "tier1Pack", 1) == Failure("bad_slot")
    assert service.stock_shelf_slot(shop, float("inf"), "tier1Pack", 1) == Failure("bad_slot")
    assert service.stock_shelf_slot(shop, 0, "bogus", 1) == Failure("unknown_sku")
    assert service.stock_shelf_slot(shop, 0, "tier1Pack", 1) == Failure("no_backroom_stock")


def test_unstock_returns_units_and_frees_the_slot() -> None:
    service = _build_service()
    stocked = service.stock_shelf_slot(_stocked_shop(service), 0, "tier1Pack", 3)
    assert isinstance(stocked, Success)

    partial = service.unstock_shelf_slot(stocked.value, 0, 1)
    assert isinstance(partial, Success)
    assert partial.value.shelves[0] == ShelfSlot(sku_id="tier1Pack", quantity=2, capacity=6)

    emptied = service.unstock_shelf_slot(partial.value, 0, 99)
    assert isinstance(emptied, Success)
    assert emptied.value.shelves[0] == ShelfSlot(sku_id=None, quantity=0, capacity=6)
    assert emptied.value.backroom["tier1Pack"] == 10
    assert service.unstock_shelf_slot(emptied.value, 0, 1) == Failure("slot_empty")


def test_clear_only_succeeds_on_empty_slot() -> None:
    service = _build_service()
    stocked = service.stock_shelf_slot(_stocked_shop(service), 0, "tier1Pack", 1)
    assert isinstance(stocked, Success)

    assert service.clear_shelf_slot(stocked.value, 0) == Failure("slot_not_empty")
    cleared = service.clear_shelf_slot(stocked.value, 2)
    assert isinstance(cleared, Success)
    assert cleared.value.shelves[2].sku_id is None


def test_sell_takes_from_first_stocked_slot() -> None:
    service = _build_service()
    shop = _stocked_shop(service)
    shop = service.stock_shelf_slot(shop, 2, "tier2Pack", 1).value
    shop = service.stock_shelf_slot(shop, 3, "tier1Pack", 2).value

    sold = service.sell_one_from_shelves(shop)

    assert isinstance(sold, Success)
    next_shop, sale = sold.value
    assert (sale.sku_id, sale.value, sale.xp) == ("tier2Pack", 21, 5)
    assert next_shop.shelves[2] == ShelfSlot(sku_id=None, quantity=0, capacity=6)
    assert next_shop.shelves[3].quantity == 2


def test_sell_with_empty_shelves_is_out_of_stock() -> None:
    service = _build_service()

    assert service.sell_one_from_shelves(service.create_initial_state()) == Failure("out_of_stock")
