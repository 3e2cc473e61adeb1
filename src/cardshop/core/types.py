"""Shared type aliases for the core and domain layers."""
from typing import Literal

Phase = Literal["day", "night"]
CustomerIntent = Literal["buy", "challenge"]
CustomerStatus = Literal["browsing", "readyToBuy", "waitingBattle"]
Rarity = Literal["common", "uncommon", "rare", "epic", "legendary"]
BattleOutcomeKind = Literal["win", "loss"]

ReasonCode = Literal[
    "insufficient_funds",
    "max_tier",
    "unknown_sku",
    "unknown_pack",
    "bad_slot",
    "slot_full",
    "slot_has_other_sku",
    "slot_empty",
    "slot_not_empty",
    "no_backroom_stock",
    "tier_locked",
    "no_packs",
    "empty_pool",
    "not_ready",
    "missing_customer",
    "unknown_skill",
    "already_unlocked",
    "insufficient_skill_points",
    "invalid_quantity",
    "deck_full",
    "card_not_owned",
    "bad_index",
    "out_of_stock",
]

LoadFailureReason = Literal[
    "no_save",
    "parse_error",
    "unsupported_version",
    "missing_state",
    "storage_error",
]

PHASES: tuple[Phase, ...] = ("day", "night")
CUSTOMER_INTENTS: tuple[CustomerIntent, ...] = ("buy", "challenge")
CUSTOMER_STATUSES: tuple[CustomerStatus, ...] = ("browsing", "readyToBuy", "waitingBattle")
RARITIES: tuple[Rarity, ...] = ("common", "uncommon", "rare", "epic", "legendary")

MIN_TIER = 1
MAX_TIER = 9

__all__ = [
    "BattleOutcomeKind",
    "CUSTOMER_INTENTS",
    "CUSTOMER_STATUSES",
    "CustomerIntent",
    "CustomerStatus",
    "LoadFailureReason",
    "MAX_TIER",
    "MIN_TIER",
    "PHASES",
    "Phase",
    "RARITIES",
    "Rarity",
    "ReasonCode",
]
