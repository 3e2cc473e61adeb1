"""Commands accepted by the simulation service (the only mutation entrypoint)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class NewGame:
    seed: int | None = None


@dataclass(frozen=True, slots=True)
class TogglePause:
    pass


@dataclass(frozen=True, slots=True)
class PurchaseSpeedTier:
    pass


@dataclass(frozen=True, slots=True)
class BuyWholesalePack:
    sku_id: str
    quantity: int = 1


@dataclass(frozen=True, slots=True)
class StockShelf:
    slot_index: int
    sku_id: str
    quantity: int = 1


@dataclass(frozen=True, slots=True)
class UnstockShelf:
    slot_index: int
    quantity: int = 1


@dataclass(frozen=True, slots=True)
class ClearShelf:
    slot_index: int


@dataclass(frozen=True, slots=True)
class BuyPlayerPack:
    pack_id: str
    quantity: int = 1


@dataclass(frozen=True, slots=True)
class OpenPlayerPack:
    pack_id: str


@dataclass(frozen=True, slots=True)
class UnlockSkill:
    skill_id: str


@dataclass(frozen=True, slots=True)
class StartBattle:
    customer_id: str


@dataclass(frozen=True, slots=True)
class DeckAddCard:
    card_id: str


@dataclass(frozen=True, slots=True)
class DeckRemoveCard:
    index: int


Command = Union[
    NewGame,
    TogglePause,
    PurchaseSpeedTier,
    BuyWholesalePack,
    StockShelf,
    UnstockShelf,
    ClearShelf,
    BuyPlayerPack,
    OpenPlayerPack,
    UnlockSkill,
    StartBattle,
    DeckAddCard,
    DeckRemoveCard,
]
