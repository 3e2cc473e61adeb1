"""Domain events emitted by ticks and commands."""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple, Union

from cardshop.core.types import BattleOutcomeKind, Phase, Rarity


@dataclass(frozen=True, slots=True)
class PhaseChanged:
    type: ClassVar[str] = "phaseChanged"
    from_phase: Phase
    to_phase: Phase
    day_number: int


@dataclass(frozen=True, slots=True)
class CustomerSpawned:
    type: ClassVar[str] = "customerSpawned"
    customer_id: str


@dataclass(frozen=True, slots=True)
class CustomerLeft:
    type: ClassVar[str] = "customerLeft"
    customer_id: str


@dataclass(frozen=True, slots=True)
class CustomerReadyToBuy:
    type: ClassVar[str] = "customerReadyToBuy"
    customer_id: str


@dataclass(frozen=True, slots=True)
class ChallengeExpired:
    type: ClassVar[str] = "challengeExpired"
    customer_id: str


@dataclass(frozen=True, slots=True)
class SaleCompleted:
    type: ClassVar[str] = "saleCompleted"
    customer_id: str
    sku_id: str
    value: int
    xp: int


@dataclass(frozen=True, slots=True)
class BattleResolved:
    type: ClassVar[str] = "battleResolved"
    customer_id: str
    result: BattleOutcomeKind
    money_delta: int
    xp_delta: int
    player_score: float
    enemy_score: float


@dataclass(frozen=True, slots=True)
class OpenedCard:
    card_id: str
    attack: int
    health: int
    rarity: Rarity


@dataclass(frozen=True, slots=True)
class PackOpened:
    type: ClassVar[str] = "packOpened"
    pack_id: str
    tier: int
    rarity: Rarity
    cards: Tuple[OpenedCard, ...]


SimEvent = Union[
    PhaseChanged,
    CustomerSpawned,
    CustomerLeft,
    CustomerReadyToBuy,
    ChallengeExpired,
    SaleCompleted,
    BattleResolved,
    PackOpened,
]
