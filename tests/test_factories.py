from __future__ import annotations

import math

from cardshop.config import DEFAULT_CONFIG, config_from_mapping
from cardshop.services.factories import create_new_game_state


def test_new_game_state_defaults() -> None:
    state = create_new_game_state(DEFAULT_CONFIG)

    assert not state.paused
    assert state.clock.phase == "day"
    assert state.clock.day_number == 1
    assert state.economy.money == 50
    assert state.rng_seed == 12345
    assert state.deck.card_ids == ("t1_c01", "t1_c01", "t1_c02", "t1_c03", "t1_c02")
    assert state.collection == {"t1_c01": 2, "t1_c02": 2, "t1_c03": 1}
    assert state.sealed_packs == {}
    assert state.customers.customers == ()
    assert len(state.shop.shelves) == 4


def test_new_game_uses_config_and_seed() -> None:
    config = config_from_mapping({"shop": {"starting_money": 5, "shelf_slots": 2}})

    state = create_new_game_state(config, seed=2**32 + 17)

    assert state.economy.money == 5
    assert len(state.shop.shelves) == 2
    assert state.rng_seed == 17


def test_unusable_seed_falls_back_to_default() -> None:
    assert create_new_game_state(DEFAULT_CONFIG, math.nan).rng_seed == DEFAULT_CONFIG.default_seed
