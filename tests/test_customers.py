from __future__ import annotations

import math

from cardshop.config import DEFAULT_CONFIG
from cardshop.data.cards import CARD_CATALOG, CardCatalog
from cardshop.core.rng import RNG
from cardshop.domain.events import ChallengeExpired, CustomerLeft, CustomerReadyToBuy, CustomerSpawned
from cardshop.domain.state import Customer, CustomersState
from cardshop.services.customer_service import CustomerService, customer_tier_for_day


def _make_customer(
    customer_id: str,
    *,
    intent: str = "buy",
    status: str = "browsing",
    decision: float = 5.0,
    expires: float | None = None,
) -> Customer:
    return Customer(
        id=customer_id,
        name="Ari",
        tier=1,
        intent=intent,
        status=status,
        time_to_decision_seconds=decision,
        challenge_expires_in_seconds=expires,
    )


def _quiet_state(*customers: Customer) -> CustomersState:
    """Registry whose spawn timer is far away, so ticks only touch existing customers."""
    return CustomersState(next_spawn_in_seconds=1000.0, customers=tuple(customers), next_id=len(customers) + 1)


def test_spawn_after_interval() -> None:
    service = CustomerService(DEFAULT_CONFIG)
    state = service.create_initial_state()
    assert state.next_spawn_in_seconds == 8.0

    tick = service.tick(state, 8.0, "day", 1, 12345)

    assert tick.events == [CustomerSpawned(customer_id="1")]
    spawned = tick.state.customers[0]
    assert spawned.status == "browsing"
    assert 4.0 <= spawned.time_to_decision_seconds < 10.0
    assert len(spawned.deck_card_ids) == 10
    assert tick.state.next_id == 2
    assert 7.2 <= tick.state.next_spawn_in_seconds <= 8.8
    assert tick.seed != 12345


def test_spawning_is_deterministic() -> None:
    service = CustomerService(DEFAULT_CONFIG)
    state = service.create_initial_state()

    first = service.tick(state, 8.0, "day", 3, 777)
    second = service.tick(state, 8.0, "day", 3, 777)

    assert first.state == second.state
    assert first.seed == second.seed


def test_no_spawn_before_interval() -> None:
    service = CustomerService(DEFAULT_CONFIG)

    tick = service.tick(service.create_initial_state(), 2.0, "day", 1, 1)

    assert tick.events == []
    assert tick.state.next_spawn_in_seconds == 6.0
    assert tick.seed == 1


def test_buyer_becomes_ready_to_buy() -> None:
    service = CustomerService(DEFAULT_CONFIG)

    tick = service.tick(_quiet_state(_make_customer("1", decision=1.0)), 1.0, "day", 1, 5)

    assert tick.events == [CustomerReadyToBuy(customer_id="1")]
    assert tick.state.customers[0].status == "readyToBuy"


def test_challenger_starts_waiting_for_battle() -> None:
    service = CustomerService(DEFAULT_CONFIG)

    tick = service.tick(_quiet_state(_make_customer("1", intent="challenge", decision=0.5)), 1.0, "day", 1, 5)

    assert tick.events == []
    customer = tick.state.customers[0]
    assert customer.status == "waitingBattle"
    assert customer.challenge_expires_in_seconds == 20.0


def test_challenge_expires_and_customer_leaves() -> None:
    service = CustomerService(DEFAULT_CONFIG)
    waiting = _make_customer("1", intent="challenge", status="waitingBattle", decision=0.0, expires=0.5)

    tick = service.tick(_quiet_state(waiting), 1.0, "day", 1, 5)

    assert tick.events == [ChallengeExpired(customer_id="1"), CustomerLeft(customer_id="1")]
    assert tick.state.customers == ()


def test_non_finite_timers_use_defaults() -> None:
    service = CustomerService(DEFAULT_CONFIG)
    state = CustomersState(
        next_spawn_in_seconds=math.nan,
        customers=(
            _make_customer("1", decision=math.nan),
            _make_customer("2", intent="challenge", status="waitingBattle", expires=math.inf),
        ),
        next_id=3,
    )

    tick = service.tick(state, 1.0, "day", 1, 5)

    assert tick.events == []
    assert tick.state.next_spawn_in_seconds == 7.0
    assert tick.state.customers[0].time_to_decision_seconds == 3.0
    assert tick.state.customers[1].challenge_expires_in_seconds == 19.0


def test_registry_keeps_newest_customers() -> None:
    service = CustomerService(DEFAULT_CONFIG)
    crowd = [_make_customer(str(i), status="readyToBuy", decision=0.0) for i in range(1, 21)]
    state = CustomersState(next_spawn_in_seconds=0.1, customers=tuple(crowd), next_id=21)

    tick = service.tick(state, 0.5, "day", 1, 5)

    ids = [customer.id for customer in tick.state.customers]
    assert len(ids) == 20
    assert "1" not in ids
    assert ids[-1] == "21"


def test_customer_tier_ramps_with_days() -> None:
    assert [customer_tier_for_day(day) for day in (1, 2, 3, 4, 5)] == [1, 1, 2, 2, 3]
    assert customer_tier_for_day(100) == 9
    assert customer_tier_for_day(math.nan) == 1


def test_generated_deck_matches_tier() -> None:
    service = CustomerService(DEFAULT_CONFIG)

    deck = service.build_deck(4, RNG(2024))

    assert len(deck) == 10
    assert all(CARD_CATALOG.get(card_id).tier == 4 for card_id in deck)


def test_remove_and_find() -> None:
    state = _quiet_state(_make_customer("1"), _make_customer("2"))

    assert CustomerService.find(state, "2") is not None
    trimmed = CustomerService.remove(state, "1")
    assert [c.id for c in trimmed.customers] == ["2"]
    assert CustomerService.find(trimmed, "1") is None


def test_deck_falls_back_to_tier_one_commons_when_tier_is_missing() -> None:
    tier_one = [card for card in CARD_CATALOG.all() if card.tier == 1]
    tier_two_rare = [card for card in CARD_CATALOG.all() if card.tier == 2 and card.rarity == "rare"]
    service = CustomerService(DEFAULT_CONFIG, catalog=CardCatalog(tier_one + tier_two_rare))

    deck = service.build_deck(3, RNG(11))

    assert len(deck) == DEFAULT_CONFIG.customer.deck_size
    assert all(CARD_CATALOG.get(card_id).tier == 1 for card_id in deck)
    assert all(CARD_CATALOG.get(card_id).rarity == "common" for card_id in deck)
