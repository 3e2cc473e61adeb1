"""Factory for a brand-new game."""
from __future__ import annotations

from cardshop.config import DEFAULT_CONFIG, SimConfig
from cardshop.core.rng import coerce_seed
from cardshop.domain.clock import create_initial_clock
from cardshop.domain.deck import create_initial_deck, starter_collection
from cardshop.domain.economy import create_initial_economy
from cardshop.domain.progression import create_initial_progression
from cardshop.domain.skills import create_initial_skills
from cardshop.domain.state import GameState
from cardshop.domain.upgrades import create_initial_upgrades
from cardshop.services.customer_service import CustomerService
from cardshop.services.shop_service import ShopService


def create_new_game_state(config: SimConfig = DEFAULT_CONFIG, seed: object = None) -> GameState:
    """Build day 1 with the starter deck, starting money and empty shelves."""
    deck = create_initial_deck(config.shop.deck_max_size)
    return GameState(
        paused=False,
        clock=create_initial_clock(config),
        progression=create_initial_progression(),
        upgrades=create_initial_upgrades(),
        skills=create_initial_skills(),
        economy=create_initial_economy(config.shop.starting_money),
        deck=deck,
        customers=CustomerService(config).create_initial_state(),
        shop=ShopService(config).create_initial_state(),
        rng_seed=coerce_seed(seed, config.default_seed),
        sealed_packs={},
        collection=starter_collection(deck.card_ids),
    )
