from __future__ import annotations

from dataclasses import replace

from cardshop.config import DEFAULT_CONFIG
from cardshop.data.cards import CARD_CATALOG, CardCatalog
from cardshop.domain.events import PackOpened
from cardshop.domain.results import Failure, Success
from cardshop.services.factories import create_new_game_state
from cardshop.services.pack_service import PackService

PACK_ID = "playerPack_t1_common"


def _build_service(catalog: CardCatalog = CARD_CATALOG) -> PackService:
    return PackService(DEFAULT_CONFIG, catalog=catalog)


def test_buy_player_packs() -> None:
    service = _build_service()
    state = create_new_game_state(DEFAULT_CONFIG, 1)

    result = service.buy_player_packs(state, PACK_ID, 2)

    assert isinstance(result, Success)
    assert result.value.economy.money == 34
    assert result.value.sealed_packs == {PACK_ID: 2}


def test_buy_rejections() -> None:
    service = _build_service()
    state = create_new_game_state(DEFAULT_CONFIG, 1)

    assert service.buy_player_packs(state, "playerPack_t0_common", 1) == Failure("unknown_pack")
    assert service.buy_player_packs(state, PACK_ID, 0) == Failure("invalid_quantity")
    assert service.buy_player_packs(state, PACK_ID, 7) == Failure("insufficient_funds")
    assert state == create_new_game_state(DEFAULT_CONFIG, 1)


def test_open_last_sealed_pack() -> None:
    service = _build_service()
    state = replace(create_new_game_state(DEFAULT_CONFIG, 77), sealed_packs={PACK_ID: 1})
    pool_ids = {card.id for card in CARD_CATALOG.pool(1, "common")}

    result = service.open_player_pack(state, PACK_ID)

    assert isinstance(result, Success)
    opened = result.value
    assert opened.sealed_packs[PACK_ID] == 0
    assert sum(opened.collection.values()) == sum(state.collection.values()) + 8
    assert opened.rng_seed != state.rng_seed
    (event,) = result.events
    assert isinstance(event, PackOpened)
    assert len(event.cards) == 8
    assert all(card.card_id in pool_ids for card in event.cards)
    assert all(card.rarity == "common" for card in event.cards)


def test_opening_is_deterministic() -> None:
    service = _build_service()
    state = replace(create_new_game_state(DEFAULT_CONFIG, 5), sealed_packs={PACK_ID: 2})

    assert service.open_player_pack(state, PACK_ID) == service.open_player_pack(state, PACK_ID)


def test_open_rejections() -> None:
    state = create_new_game_state(DEFAULT_CONFIG, 1)
    service = _build_service()

    assert service.open_player_pack(state, "nope") == Failure("unknown_pack")
    assert service.open_player_pack(state, PACK_ID) == Failure("no_packs")
    empty = _build_service(CardCatalog([]))
    sealed = replace(state, sealed_packs={PACK_ID: 1})
    assert empty.open_player_pack(sealed, PACK_ID) == Failure("empty_pool")
