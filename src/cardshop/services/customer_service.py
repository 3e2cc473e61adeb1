"""Customer spawning and lifecycle state machine."""
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import List, Tuple

from cardshop.config import SimConfig
from cardshop.core.guards import finite_or, int_or
from cardshop.core.rng import RNG
from cardshop.core.types import MAX_TIER, MIN_TIER, Phase, Rarity
from cardshop.data.cards import CARD_CATALOG, CardCatalog
from cardshop.domain.events import (
    ChallengeExpired,
    CustomerLeft,
    CustomerReadyToBuy,
    CustomerSpawned,
    SimEvent,
)
from cardshop.domain.state import Customer, CustomersState

CUSTOMER_NAMES: Tuple[str, ...] = ("Ari", "Bea", "Cato", "Dax", "Eli", "Fae", "Gus", "Hana", "Ivo", "Juno")

# Cumulative percentage thresholds for NPC deck rarity rolls.
RARITY_WEIGHTS: Tuple[Tuple[Rarity, int], ...] = (
    ("common", 60),
    ("uncommon", 85),
    ("rare", 95),
    ("epic", 99),
    ("legendary", 100),
)

FALLBACK_CARD_ID = "t1_c01"


@dataclass(slots=True)
class CustomerTick:
    state: CustomersState
    seed: int
    events: List[SimEvent] = field(default_factory=list)


def customer_tier_for_day(day_number: int) -> int:
    """Every two days unlocks the next customer tier, clamped to 1..9."""
    day = max(1, int_or(day_number, 1))
    return max(MIN_TIER, min(MAX_TIER, 1 + (day - 1) // 2))


class CustomerService:
    """Deterministic spawner and per-tick timers for shop customers."""

    def __init__(self, config: SimConfig, *, catalog: CardCatalog = CARD_CATALOG) -> None:
        self._config = config
        self._catalog = catalog

    def create_initial_state(self) -> CustomersState:
        return CustomersState(
            next_spawn_in_seconds=self.spawn_interval("day"),
            customers=(),
            next_id=1,
        )

    def spawn_interval(self, phase: Phase) -> float:
        tuning = self._config.customer
        return tuning.day_spawn_interval_seconds if phase == "day" else tuning.night_spawn_interval_seconds

    # -----------------------
    # Spawning
    # -----------------------
    def roll_rarity(self, rng: RNG) -> Rarity:
        roll = rng.random() * 100
        for rarity, threshold in RARITY_WEIGHTS:
            if roll < threshold:
                return rarity
        return "legendary"

    def build_deck(self, tier: int, rng: RNG) -> Tuple[str, ...]:
        deck: List[str] = []
        for _ in range(self._config.customer.deck_size):
            rarity = self.roll_rarity(rng)
            pool = (
                self._catalog.pool(tier, rarity)
                or self._catalog.pool(tier, "common")
                or self._catalog.pool(MIN_TIER, "common")
            )
            index = rng.randint(0, max(0, len(pool) - 1))
            deck.append(pool[index].id if pool else FALLBACK_CARD_ID)
        return tuple(deck)

    def spawn_one(self, state: CustomersState, phase: Phase, day_number: int, rng: RNG) -> Customer:
        """Draw a new customer; the draw order is name, intent, browse time, deck."""
        tuning = self._config.customer
        name = CUSTOMER_NAMES[rng.randint(0, len(CUSTOMER_NAMES) - 1)]
        intent = "challenge" if rng.random() < tuning.challenge_chance else "buy"
        browse_seconds = rng.uniform(tuning.browse_seconds_min, tuning.browse_seconds_max)
        tier = customer_tier_for_day(day_number)
        deck = self.build_deck(tier, rng)
        return Customer(
            id=str(state.next_id),
            name=name,
            tier=tier,
            intent=intent,
            status="browsing",
            time_to_decision_seconds=browse_seconds,
            deck_card_ids=deck,
        )

    def next_spawn_delay(self, phase: Phase, rng: RNG) -> float:
        tuning = self._config.customer
        jitter = rng.randint(-tuning.spawn_jitter_ms, tuning.spawn_jitter_ms) / 1000
        return max(tuning.min_spawn_interval_seconds, self.spawn_interval(phase) + jitter)

    # -----------------------
    # Per-tick lifecycle
    # -----------------------
    def tick(
        self,
        state: CustomersState,
        dt_sim_seconds: float,
        phase: Phase,
        day_number: int,
        seed: int,
    ) -> CustomerTick:
        """Advance spawn and customer timers by one simulated step.

        A customer spawned in this step only starts counting down from the next
        step, so it can never reach a decision in the tick it appeared.
        """
        tuning = self._config.customer
        rng = RNG(seed)
        events: List[SimEvent] = []
        dt = max(0.0, finite_or(dt_sim_seconds, 0.0))

        next_spawn = finite_or(state.next_spawn_in_seconds, self.spawn_interval(phase)) - dt
        next_id = max(1, int_or(state.next_id, 1))
        spawned: Customer | None = None
        if next_spawn <= 0:
            spawned = self.spawn_one(replace(state, next_id=next_id), phase, day_number, rng)
            events.append(CustomerSpawned(customer_id=spawned.id))
            next_spawn = self.next_spawn_delay(phase, rng)
            next_id += 1

        remaining: List[Customer] = []
        for customer in state.customers:
            if customer.status == "waitingBattle":
                expires = finite_or(customer.challenge_expires_in_seconds, tuning.challenge_timeout_seconds) - dt
                if expires > 0:
                    remaining.append(replace(customer, challenge_expires_in_seconds=expires))
                else:
                    events.append(ChallengeExpired(customer_id=customer.id))
                    events.append(CustomerLeft(customer_id=customer.id))
                continue

            if customer.status == "browsing":
                decision = finite_or(customer.time_to_decision_seconds, tuning.browse_seconds_min) - dt
                if decision > 0:
                    remaining.append(replace(customer, time_to_decision_seconds=decision))
                elif customer.intent == "challenge":
                    remaining.append(
                        replace(
                            customer,
                            status="waitingBattle",
                            time_to_decision_seconds=0.0,
                            challenge_expires_in_seconds=tuning.challenge_timeout_seconds,
                        )
                    )
                else:
                    remaining.append(replace(customer, status="readyToBuy", time_to_decision_seconds=0.0))
                    events.append(CustomerReadyToBuy(customer_id=customer.id))
                continue

            # readyToBuy customers wait here until the sale step removes them.
            remaining.append(customer)

        if spawned is not None:
            remaining.append(spawned)
        if len(remaining) > tuning.max_customers:
            remaining = remaining[-tuning.max_customers :]

        next_state = CustomersState(
            next_spawn_in_seconds=next_spawn if math.isfinite(next_spawn) else self.spawn_interval(phase),
            customers=tuple(remaining),
            next_id=next_id,
        )
        return CustomerTick(state=next_state, seed=rng.seed, events=events)

    @staticmethod
    def remove(state: CustomersState, customer_id: str) -> CustomersState:
        return replace(state, customers=tuple(c for c in state.customers if c.id != customer_id))

    @staticmethod
    def find(state: CustomersState, customer_id: str) -> Customer | None:
        for customer in state.customers:
            if customer.id == customer_id:
                return customer
        return None
