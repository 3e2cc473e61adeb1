"""Domain-level state tracking.

Every structure here is frozen. Transitions build new values with
``dataclasses.replace`` and fresh containers; nothing is mutated in place, so a
``GameState`` handed out earlier never changes underneath its holder.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Tuple

from cardshop.core.types import CustomerIntent, CustomerStatus, Phase


@dataclass(frozen=True, slots=True)
class ClockState:
    phase: Phase
    time_in_phase_seconds: float
    day_number: int
    phase_duration_seconds: float


@dataclass(frozen=True, slots=True)
class ProgressionState:
    level: int = 1
    xp: int = 0
    skill_points: int = 0


@dataclass(frozen=True, slots=True)
class UpgradesState:
    speed_tier: int = 0


@dataclass(frozen=True, slots=True)
class SkillsState:
    unlocked: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True)
class EconomyState:
    money: int = 0


@dataclass(frozen=True, slots=True)
class DeckState:
    card_ids: Tuple[str, ...] = ()
    max_size: int = 20


@dataclass(frozen=True, slots=True)
class Customer:
    """A shopper walking the floor; timers count down every simulated tick."""

    id: str
    name: str
    tier: int
    intent: CustomerIntent
    status: CustomerStatus
    time_to_decision_seconds: float
    challenge_expires_in_seconds: float | None = None
    deck_card_ids: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class CustomersState:
    next_spawn_in_seconds: float
    customers: Tuple[Customer, ...] = ()
    next_id: int = 1


@dataclass(frozen=True, slots=True)
class ShelfSlot:
    """One display slot; ``sku_id`` is None exactly when ``quantity`` is 0."""

    sku_id: str | None
    quantity: int
    capacity: int

    @property
    def is_empty(self) -> bool:
        return self.sku_id is None or self.quantity <= 0


@dataclass(frozen=True, slots=True)
class ShopState:
    backroom: Mapping[str, int] = field(default_factory=dict)
    shelves: Tuple[ShelfSlot, ...] = ()


@dataclass(frozen=True, slots=True)
class GameState:
    """Root aggregate owned by the simulation service."""

    paused: bool
    clock: ClockState
    progression: ProgressionState
    upgrades: UpgradesState
    skills: SkillsState
    economy: EconomyState
    deck: DeckState
    customers: CustomersState
    shop: ShopState
    rng_seed: int
    sealed_packs: Mapping[str, int] = field(default_factory=dict)
    collection: Mapping[str, int] = field(default_factory=dict)
