"""Deck building rules."""
from __future__ import annotations

from collections import Counter
from dataclasses import replace
from typing import Dict, Mapping

from cardshop.core.guards import int_or
from cardshop.data.cards import CARD_CATALOG, CardCatalog
from cardshop.domain.results import Failure, Outcome, Success
from cardshop.domain.state import DeckState

STARTER_DECK = ("t1_c01", "t1_c01", "t1_c02", "t1_c03", "t1_c02")


def create_initial_deck(max_size: int = 20) -> DeckState:
    return DeckState(card_ids=STARTER_DECK, max_size=max_size)


def starter_collection(card_ids: tuple[str, ...] = STARTER_DECK) -> Dict[str, int]:
    """Owned counts matching a deck, so every deck card is backed by a copy."""
    return dict(Counter(card_ids))


def can_use_card(card_id: str, unlocked_tier: int, catalog: CardCatalog = CARD_CATALOG) -> bool:
    card = catalog.find(card_id)
    return card is not None and card.tier <= unlocked_tier


def add_card_to_deck(
    deck: DeckState,
    card_id: str,
    unlocked_tier: int,
    collection: Mapping[str, int],
    catalog: CardCatalog = CARD_CATALOG,
) -> Outcome[DeckState]:
    if len(deck.card_ids) >= deck.max_size:
        return Failure("deck_full")
    if not can_use_card(card_id, unlocked_tier, catalog):
        return Failure("tier_locked")
    if deck.card_ids.count(card_id) >= collection.get(card_id, 0):
        return Failure("card_not_owned")
    return Success(replace(deck, card_ids=deck.card_ids + (card_id,)))


def remove_card_from_deck(deck: DeckState, index: int) -> Outcome[DeckState]:
    index = int_or(index, -1)
    if not 0 <= index < len(deck.card_ids):
        return Failure("bad_index")
    return Success(replace(deck, card_ids=deck.card_ids[:index] + deck.card_ids[index + 1 :]))
