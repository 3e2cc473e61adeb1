"""Versioned save/load with forward migration and a total normalization pass."""
from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping

from cardshop.config import DEFAULT_CONFIG, SimConfig
from cardshop.core.guards import finite_or, int_or, is_number
from cardshop.core.rng import coerce_seed
from cardshop.core.types import (
    CUSTOMER_INTENTS,
    CUSTOMER_STATUSES,
    MAX_TIER,
    MIN_TIER,
    PHASES,
    LoadFailureReason,
)
from cardshop.data.cards import CARD_CATALOG, CardCatalog
from cardshop.data.packs import SKU_IDS, build_player_packs
from cardshop.data.skills import SKILLS
from cardshop.domain.clock import phase_duration
from cardshop.domain.progression import MAX_LEVEL, xp_to_next
from cardshop.domain.skills import unlocked_card_tier
from cardshop.domain.state import (
    ClockState,
    Customer,
    CustomersState,
    DeckState,
    EconomyState,
    GameState,
    ProgressionState,
    ShelfSlot,
    ShopState,
    SkillsState,
    UpgradesState,
)
from cardshop.domain.upgrades import max_speed_tier
from cardshop.services.errors import SaveLoadError
from cardshop.services.factories import create_new_game_state
from cardshop.services.storage import StorageLike

logger = logging.getLogger(__name__)

SAVE_KEY = "cardshop.save"
CURRENT_SCHEMA_VERSION = 3

SavePayload = Dict[str, Any]

# Card ids used before the generated catalog existed.
LEGACY_CARD_IDS: Mapping[str, str] = {
    "strike": "t1_c01",
    "guard": "t1_c02",
    "spark": "t1_c03",
    "cleave": "t1_c04",
    "ward": "t1_c05",
}


@dataclass(frozen=True, slots=True)
class LoadResult:
    ok: bool
    state: GameState | None = None
    reason: LoadFailureReason | None = None


# -----------------------
# Serialization
# -----------------------
def serialize_state(state: GameState) -> SavePayload:
    """Return the JSON-ready camelCase form of ``state``."""
    clock = state.clock
    customers = state.customers
    return {
        "paused": state.paused,
        "clock": {
            "phase": clock.phase,
            "timeInPhaseSeconds": clock.time_in_phase_seconds,
            "dayNumber": clock.day_number,
            "phaseDurationSeconds": clock.phase_duration_seconds,
        },
        "progression": {
            "level": state.progression.level,
            "xp": state.progression.xp,
            "skillPoints": state.progression.skill_points,
        },
        "upgrades": {"speedTier": state.upgrades.speed_tier},
        "skills": {"unlocked": {skill_id: True for skill_id in sorted(state.skills.unlocked)}},
        "economy": {"money": state.economy.money},
        "deck": {"cardIds": list(state.deck.card_ids), "maxSize": state.deck.max_size},
        "customers": {
            "nextSpawnInSeconds": customers.next_spawn_in_seconds,
            "customers": [_serialize_customer(customer) for customer in customers.customers],
            "nextId": customers.next_id,
        },
        "shop": {
            "backroom": dict(state.shop.backroom),
            "shelves": {
                "slots": [
                    {"skuId": slot.sku_id, "quantity": slot.quantity, "capacity": slot.capacity}
                    for slot in state.shop.shelves
                ]
            },
        },
        "sealedPacks": dict(state.sealed_packs),
        "collection": dict(state.collection),
        "rngSeed": state.rng_seed,
    }


def _serialize_customer(customer: Customer) -> SavePayload:
    return {
        "id": customer.id,
        "name": customer.name,
        "tier": customer.tier,
        "intent": customer.intent,
        "status": customer.status,
        "timeToDecisionSeconds": customer.time_to_decision_seconds,
        "challengeExpiresInSeconds": customer.challenge_expires_in_seconds,
        "deckCardIds": list(customer.deck_card_ids),
    }


def make_save(state: GameState) -> SavePayload:
    return {
        "schemaVersion": CURRENT_SCHEMA_VERSION,
        "savedAtIso": datetime.now(timezone.utc).isoformat(),
        "state": serialize_state(state),
    }


# -----------------------
# Migrations
# -----------------------
def migrate_v1_to_v2(state: Mapping[str, Any], config: SimConfig = DEFAULT_CONFIG) -> SavePayload:
    """v1 had no shop and could persist challengers without an expiry timer."""
    migrated = dict(state)
    if not isinstance(migrated.get("shop"), Mapping):
        migrated["shop"] = serialize_state(create_new_game_state(config))["shop"]
    customers = migrated.get("customers")
    if isinstance(customers, Mapping) and isinstance(customers.get("customers"), list):
        timeout = config.customer.challenge_timeout_seconds
        patched: List[Any] = []
        for entry in customers["customers"]:
            if (
                isinstance(entry, Mapping)
                and entry.get("status") == "waitingBattle"
                and entry.get("challengeExpiresInSeconds") is None
            ):
                entry = {**entry, "challengeExpiresInSeconds": timeout}
            patched.append(entry)
        migrated["customers"] = {**customers, "customers": patched}
    return migrated


def migrate_v2_to_v3(state: Mapping[str, Any], config: SimConfig = DEFAULT_CONFIG) -> SavePayload:
    """Remap legacy card ids, derive the collection from the deck, reset customers."""
    migrated = dict(state)
    deck = migrated.get("deck")
    card_ids: List[str] = []
    if isinstance(deck, Mapping) and isinstance(deck.get("cardIds"), list):
        for card_id in deck["cardIds"]:
            if not isinstance(card_id, str):
                continue
            mapped = LEGACY_CARD_IDS.get(card_id, card_id)
            if mapped in CARD_CATALOG:
                card_ids.append(mapped)
        migrated["deck"] = {**deck, "cardIds": card_ids}
    if not isinstance(migrated.get("collection"), Mapping):
        migrated["collection"] = dict(Counter(card_ids))
    migrated["customers"] = serialize_state(create_new_game_state(config))["customers"]
    return migrated


_MIGRATIONS = {
    1: migrate_v1_to_v2,
    2: migrate_v2_to_v3,
}


# -----------------------
# Service
# -----------------------
class SaveService:
    """Converts runtime state to/from the versioned payload kept in storage."""

    def __init__(self, config: SimConfig = DEFAULT_CONFIG, *, catalog: CardCatalog = CARD_CATALOG) -> None:
        self._config = config
        self._catalog = catalog
        self._pack_ids = frozenset(pack.id for pack in build_player_packs(config.shop.cards_per_pack))

    def save_to_storage(self, storage: StorageLike, state: GameState, key: str = SAVE_KEY) -> None:
        storage.set_item(key, json.dumps(make_save(state)))
        logger.info("Saved day %s under %s", state.clock.day_number, key)

    def clear_save(self, storage: StorageLike, key: str = SAVE_KEY) -> None:
        storage.remove_item(key)

    def load_from_storage(self, storage: StorageLike, key: str = SAVE_KEY) -> LoadResult:
        try:
            raw = storage.get_item(key)
        except OSError as exc:
            logger.warning("Unable to read save %s: %s", key, exc)
            return LoadResult(ok=False, reason="storage_error")
        if not raw:
            return LoadResult(ok=False, reason="no_save")
        try:
            payload = json.loads(raw)
        except ValueError:
            logger.warning("Save %s is not valid JSON", key)
            return LoadResult(ok=False, reason="parse_error")
        if not isinstance(payload, dict):
            logger.warning("Save %s is not a JSON object", key)
            return LoadResult(ok=False, reason="parse_error")

        version = payload.get("schemaVersion")
        if not isinstance(version, int) or isinstance(version, bool) or not 1 <= version <= CURRENT_SCHEMA_VERSION:
            logger.warning("Save %s has unsupported schema version %r", key, version)
            return LoadResult(ok=False, reason="unsupported_version")
        try:
            state = self.deserialize(payload.get("state"), version)
        except SaveLoadError as exc:
            logger.warning("Save %s rejected: %s", key, exc)
            return LoadResult(ok=False, reason="missing_state")
        logger.info("Loaded save %s (schema v%s)", key, version)
        return LoadResult(ok=True, state=state)

    def deserialize(self, raw_state: Any, version: int = CURRENT_SCHEMA_VERSION) -> GameState:
        """Migrate ``raw_state`` up to the current schema and normalize it."""
        if not isinstance(raw_state, Mapping):
            raise SaveLoadError("Save data is missing its state object.")
        state: Mapping[str, Any] = raw_state
        while version < CURRENT_SCHEMA_VERSION:
            logger.info("Migrating save state v%s -> v%s", version, version + 1)
            state = _MIGRATIONS[version](state, self._config)
            version += 1
        return self.normalize_state(state)

    # -----------------------
    # Normalization
    # -----------------------
    def normalize_state(self, raw: Mapping[str, Any]) -> GameState:
        """Always return a valid GameState; unusable fields fall back to a fresh game's."""
        fallback = create_new_game_state(self._config)
        skills = self._normalize_skills(_mapping(raw.get("skills")).get("unlocked"))
        fixes: List[str] = []
        paused = raw.get("paused")
        if not isinstance(paused, bool):
            fixes.append("paused")
            paused = fallback.paused
        seed_raw = raw.get("rngSeed")
        if not is_number(seed_raw):
            fixes.append("rngSeed")
        state = GameState(
            paused=paused,
            clock=self._normalize_clock(_mapping(raw.get("clock")), fixes),
            progression=self._normalize_progression(_mapping(raw.get("progression")), fixes),
            upgrades=UpgradesState(
                speed_tier=_bounded_int(
                    _mapping(raw.get("upgrades")).get("speedTier"), 0, max_speed_tier(self._config), 0,
                    "upgrades.speedTier", fixes,
                )
            ),
            skills=skills,
            economy=EconomyState(
                money=_bounded_int(_mapping(raw.get("economy")).get("money"), 0, None, 0, "economy.money", fixes)
            ),
            deck=self._normalize_deck(_mapping(raw.get("deck")), fallback.deck, unlocked_card_tier(skills), fixes),
            customers=self._normalize_customers(_mapping(raw.get("customers")), fallback.customers, fixes),
            shop=self._normalize_shop(_mapping(raw.get("shop")), fixes),
            rng_seed=coerce_seed(seed_raw, fallback.rng_seed),
            sealed_packs=_count_map(raw.get("sealedPacks"), self._pack_ids),
            collection=_count_map(raw.get("collection"), self._catalog),
        )
        if fixes:
            logger.warning("Normalized save fields: %s", ", ".join(fixes))
        return state

    def _normalize_clock(self, raw: Mapping[str, Any], fixes: List[str]) -> ClockState:
        phase = raw.get("phase")
        if phase not in PHASES:
            fixes.append("clock.phase")
            phase = "day"
        duration = phase_duration(phase, self._config)
        if raw.get("phaseDurationSeconds") != duration:
            fixes.append("clock.phaseDurationSeconds")
        elapsed = finite_or(raw.get("timeInPhaseSeconds"), -1.0)
        if elapsed < 0 or elapsed >= duration:
            fixes.append("clock.timeInPhaseSeconds")
            elapsed = 0.0
        day_number = _bounded_int(raw.get("dayNumber"), 1, None, 1, "clock.dayNumber", fixes)
        return ClockState(
            phase=phase,
            time_in_phase_seconds=elapsed,
            day_number=day_number,
            phase_duration_seconds=duration,
        )

    def _normalize_progression(self, raw: Mapping[str, Any], fixes: List[str]) -> ProgressionState:
        level = _bounded_int(raw.get("level"), 1, MAX_LEVEL, 1, "progression.level", fixes)
        xp_cap = xp_to_next(level, self._config) - 1
        return ProgressionState(
            level=level,
            xp=_bounded_int(raw.get("xp"), 0, xp_cap, 0, "progression.xp", fixes),
            skill_points=_bounded_int(raw.get("skillPoints"), 0, None, 0, "progression.skillPoints", fixes),
        )

    @staticmethod
    def _normalize_skills(raw: Any) -> SkillsState:
        if isinstance(raw, Mapping):
            ids = [key for key, value in raw.items() if value is True]
        elif isinstance(raw, list):
            ids = list(raw)
        else:
            ids = []
        return SkillsState(unlocked=frozenset(i for i in ids if isinstance(i, str) and i in SKILLS))

    def _normalize_deck(
        self, raw: Mapping[str, Any], fallback: DeckState, unlocked_tier: int, fixes: List[str]
    ) -> DeckState:
        """Keep well-typed ids the player could legally hold at ``unlocked_tier``."""
        max_size = _bounded_int(
            raw.get("maxSize"), 1, self._config.shop.deck_max_size, fallback.max_size, "deck.maxSize", fixes
        )
        card_ids = raw.get("cardIds")
        if not isinstance(card_ids, list):
            fixes.append("deck.cardIds")
            return DeckState(card_ids=fallback.card_ids[:max_size], max_size=max_size)
        valid = tuple(
            card_id
            for card_id in card_ids
            if isinstance(card_id, str)
            and card_id in self._catalog
            and self._catalog.get(card_id).tier <= unlocked_tier
        )
        return DeckState(card_ids=valid[:max_size], max_size=max_size)

    def _normalize_customers(
        self, raw: Mapping[str, Any], fallback: CustomersState, fixes: List[str]
    ) -> CustomersState:
        next_spawn = finite_or(raw.get("nextSpawnInSeconds"), -1.0)
        if next_spawn < 0:
            fixes.append("customers.nextSpawnInSeconds")
            next_spawn = fallback.next_spawn_in_seconds
        entries = raw.get("customers")
        customers: List[Customer] = []
        seen: set[str] = set()
        for entry in entries if isinstance(entries, list) else []:
            customer = self._normalize_customer(entry)
            if customer is None or customer.id in seen:
                continue
            seen.add(customer.id)
            customers.append(customer)
        customers = customers[-self._config.customer.max_customers :]

        next_id = _bounded_int(raw.get("nextId"), 1, None, 1, "customers.nextId", fixes)
        numeric_ids = [int(c.id) for c in customers if c.id.isdigit()]
        if numeric_ids:
            next_id = max(next_id, max(numeric_ids) + 1)
        return CustomersState(next_spawn_in_seconds=next_spawn, customers=tuple(customers), next_id=next_id)

    def _normalize_customer(self, raw: Any) -> Customer | None:
        if not isinstance(raw, Mapping):
            return None
        customer_id = raw.get("id")
        if is_number(customer_id):
            customer_id = str(int_or(customer_id, 0))
        if not isinstance(customer_id, str) or not customer_id:
            return None
        tuning = self._config.customer
        name = raw.get("name")
        intent = raw.get("intent")
        status = raw.get("status")
        if intent not in CUSTOMER_INTENTS:
            intent = "buy"
        if status not in CUSTOMER_STATUSES:
            status = "browsing"
        decision = finite_or(raw.get("timeToDecisionSeconds"), -1.0)
        if decision < 0:
            decision = tuning.browse_seconds_min
        expires_raw = raw.get("challengeExpiresInSeconds")
        expires: float | None = None
        if expires_raw is not None:
            expires = finite_or(expires_raw, -1.0)
            if expires < 0:
                expires = tuning.challenge_timeout_seconds
        if status == "waitingBattle" and expires is None:
            expires = tuning.challenge_timeout_seconds
        deck_ids = raw.get("deckCardIds")
        return Customer(
            id=customer_id,
            name=name if isinstance(name, str) else "Customer",
            tier=_bounded_int(raw.get("tier"), MIN_TIER, MAX_TIER, MIN_TIER, "customer.tier", []),
            intent=intent,
            status=status,
            time_to_decision_seconds=decision,
            challenge_expires_in_seconds=expires,
            deck_card_ids=tuple(
                card_id
                for card_id in (deck_ids if isinstance(deck_ids, list) else [])
                if isinstance(card_id, str) and card_id in self._catalog
            ),
        )

    def _normalize_shop(self, raw: Mapping[str, Any], fixes: List[str]) -> ShopState:
        tuning = self._config.shop
        backroom_raw = _mapping(raw.get("backroom"))
        backroom = {
            sku_id: _bounded_int(backroom_raw.get(sku_id), 0, None, 0, f"shop.backroom.{sku_id}", [])
            for sku_id in SKU_IDS
        }
        slots_raw = _mapping(raw.get("shelves")).get("slots")
        if not isinstance(slots_raw, list):
            fixes.append("shop.shelves")
            slots_raw = []
        shelves: List[ShelfSlot] = []
        for index in range(tuning.shelf_slots):
            entry = _mapping(slots_raw[index]) if index < len(slots_raw) else {}
            capacity = _bounded_int(
                entry.get("capacity"),
                1,
                tuning.shelf_slot_capacity,
                tuning.shelf_slot_capacity,
                "shop.shelves.capacity",
                fixes,
            )
            sku_id = entry.get("skuId")
            if sku_id not in SKU_IDS:
                sku_id = None
            quantity = _bounded_int(entry.get("quantity"), 0, capacity, 0, "shop.shelves.quantity", [])
            if sku_id is None or quantity == 0:
                sku_id, quantity = None, 0
            shelves.append(ShelfSlot(sku_id=sku_id, quantity=quantity, capacity=capacity))
        return ShopState(backroom=backroom, shelves=tuple(shelves))


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _bounded_int(value: Any, low: int, high: int | None, default: int, context: str, fixes: List[str]) -> int:
    if not is_number(value) or int_or(value, low - 1) < low:
        if value is not None:
            fixes.append(context)
        return default
    number = int_or(value, default)
    if high is not None and number > high:
        fixes.append(context)
        return high
    return number


def _count_map(value: Any, known: Any) -> Dict[str, int]:
    result: Dict[str, int] = {}
    for key, count in _mapping(value).items():
        if isinstance(key, str) and key in known and is_number(count):
            result[key] = max(0, int_or(count, 0))
    return result
