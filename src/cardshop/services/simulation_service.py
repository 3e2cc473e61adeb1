"""Orchestrator that owns the game state and applies ticks and commands."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import List, Mapping, Tuple, assert_never

from cardshop.config import DEFAULT_CONFIG, SimConfig
from cardshop.core.guards import clamp, finite_or, int_or
from cardshop.core.types import CustomerIntent, CustomerStatus, Phase
from cardshop.data.cards import CARD_CATALOG, CardCatalog
from cardshop.domain.clock import phase_time_remaining, tick_clock
from cardshop.domain.commands import (
    BuyPlayerPack,
    BuyWholesalePack,
    ClearShelf,
    Command,
    DeckAddCard,
    DeckRemoveCard,
    NewGame,
    OpenPlayerPack,
    PurchaseSpeedTier,
    StartBattle,
    StockShelf,
    TogglePause,
    UnlockSkill,
    UnstockShelf,
)
from cardshop.domain.deck import add_card_to_deck, remove_card_from_deck
from cardshop.domain.economy import add_money, can_afford, spend_money
from cardshop.domain.events import BattleResolved, CustomerLeft, SaleCompleted, SimEvent
from cardshop.domain.progression import grant_xp, xp_to_next
from cardshop.domain.results import CommandResult, Failure, Outcome, Success
from cardshop.domain.skills import unlock_skill, unlocked_card_tier
from cardshop.domain.state import GameState, ShelfSlot
from cardshop.domain.upgrades import max_speed_tier, speed_multiplier_for_tier, speed_tier_cost
from cardshop.services.battle_service import BattleService
from cardshop.services.customer_service import CustomerService
from cardshop.services.factories import create_new_game_state
from cardshop.services.pack_service import PackService
from cardshop.services.shop_service import ShopService

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CustomerView:
    id: str
    name: str
    tier: int
    intent: CustomerIntent
    status: CustomerStatus
    time_to_decision_seconds: float
    challenge_expires_in_seconds: float | None


@dataclass(frozen=True, slots=True)
class SimSnapshot:
    """Read-only view of the game for presentation code."""

    paused: bool
    phase: Phase
    phase_time_remaining_seconds: float
    day_number: int
    money: int
    speed_tier: int
    speed_multiplier: float
    next_speed_tier_cost: int | None
    level: int
    xp: int
    xp_to_next: int
    skill_points: int
    unlocked_skills: frozenset[str]
    unlocked_card_tier: int
    customers: Tuple[CustomerView, ...]
    backroom: Mapping[str, int]
    shelves: Tuple[ShelfSlot, ...]
    sealed_packs: Mapping[str, int]
    collection: Mapping[str, int]
    deck: Tuple[str, ...]
    deck_max_size: int
    highest_tier_in_deck: int


class SimulationService:
    """Single owner of ``GameState``; every change goes through ``tick`` or ``dispatch``."""

    def __init__(
        self,
        config: SimConfig = DEFAULT_CONFIG,
        seed: int | None = None,
        *,
        catalog: CardCatalog = CARD_CATALOG,
    ) -> None:
        self._config = config
        self._catalog = catalog
        self._customers = CustomerService(config, catalog=catalog)
        self._shop = ShopService(config)
        self._packs = PackService(config, catalog=catalog)
        self._battle = BattleService(config, catalog=catalog)
        self._state = create_new_game_state(config, seed)

    @property
    def config(self) -> SimConfig:
        return self._config

    @property
    def state(self) -> GameState:
        return self._state

    def replace_state(self, state: GameState) -> None:
        """Swap in a state produced elsewhere (e.g. a loaded save)."""
        self._state = state

    def speed_multiplier(self) -> float:
        return speed_multiplier_for_tier(self._state.upgrades.speed_tier, self._config)

    # -----------------------
    # Tick
    # -----------------------
    def tick(self, dt_wall_seconds: float) -> Tuple[SimEvent, ...]:
        """Advance by one frame: clock, then customers, then pending sales."""
        state = self._state
        if state.paused:
            return ()
        dt = clamp(finite_or(dt_wall_seconds, 0.0), 0.0, self._config.max_dt_seconds)
        dt_sim = dt * self.speed_multiplier()

        clock, clock_events = tick_clock(state.clock, dt_sim, self._config)
        customer_tick = self._customers.tick(
            state.customers, dt_sim, clock.phase, clock.day_number, state.rng_seed
        )
        events: List[SimEvent] = [*clock_events, *customer_tick.events]
        state = replace(state, clock=clock, customers=customer_tick.state, rng_seed=customer_tick.seed)

        for customer in customer_tick.state.customers:
            if customer.status != "readyToBuy":
                continue
            sold = self._shop.sell_one_from_shelves(state.shop)
            if isinstance(sold, Success):
                shop, sale = sold.value
                state = replace(
                    state,
                    shop=shop,
                    economy=add_money(state.economy, sale.value),
                    progression=grant_xp(state.progression, sale.xp, self._config).progression,
                )
                events.append(
                    SaleCompleted(customer_id=customer.id, sku_id=sale.sku_id, value=sale.value, xp=sale.xp)
                )
            events.append(CustomerLeft(customer_id=customer.id))
            state = replace(state, customers=self._customers.remove(state.customers, customer.id))

        self._state = state
        return tuple(events)

    # -----------------------
    # Commands
    # -----------------------
    def dispatch(self, command: Command) -> CommandResult:
        """Apply ``command`` atomically; a rejected command leaves state untouched."""
        outcome = self._apply(command)
        if isinstance(outcome, Failure):
            logger.debug("Rejected %s: %s", type(command).__name__, outcome.reason)
            return CommandResult.rejected(outcome.reason)
        self._state = outcome.value
        return CommandResult.accepted(outcome.events)

    def _apply(self, command: Command) -> Outcome[GameState]:
        state = self._state
        match command:
            case NewGame(seed=seed):
                logger.info("Starting new game (seed=%s)", seed)
                return Success(create_new_game_state(self._config, seed))
            case TogglePause():
                return Success(replace(state, paused=not state.paused))
            case PurchaseSpeedTier():
                return self._purchase_speed_tier(state)
            case BuyWholesalePack(sku_id=sku_id, quantity=quantity):
                bought = self._shop.buy_wholesale_packs(state.shop, state.economy, sku_id, quantity)
                if isinstance(bought, Failure):
                    return bought
                return Success(replace(state, shop=bought.value.shop, economy=bought.value.economy))
            case StockShelf(slot_index=slot_index, sku_id=sku_id, quantity=quantity):
                return self._with_shop(state, self._shop.stock_shelf_slot(state.shop, slot_index, sku_id, quantity))
            case UnstockShelf(slot_index=slot_index, quantity=quantity):
                return self._with_shop(state, self._shop.unstock_shelf_slot(state.shop, slot_index, quantity))
            case ClearShelf(slot_index=slot_index):
                return self._with_shop(state, self._shop.clear_shelf_slot(state.shop, slot_index))
            case BuyPlayerPack(pack_id=pack_id, quantity=quantity):
                return self._packs.buy_player_packs(state, pack_id, quantity)
            case OpenPlayerPack(pack_id=pack_id):
                return self._packs.open_player_pack(state, pack_id)
            case UnlockSkill(skill_id=skill_id):
                unlocked = unlock_skill(
                    state.progression,
                    state.skills,
                    skill_id,
                    enforce_prerequisites=self._config.enforce_skill_prerequisites,
                )
                if isinstance(unlocked, Failure):
                    return unlocked
                progression, skills = unlocked.value
                return Success(replace(state, progression=progression, skills=skills))
            case StartBattle(customer_id=customer_id):
                return self._start_battle(state, customer_id)
            case DeckAddCard(card_id=card_id):
                added = add_card_to_deck(
                    state.deck, card_id, unlocked_card_tier(state.skills), state.collection, self._catalog
                )
                if isinstance(added, Failure):
                    return added
                return Success(replace(state, deck=added.value))
            case DeckRemoveCard(index=index):
                removed = remove_card_from_deck(state.deck, int_or(index, -1))
                if isinstance(removed, Failure):
                    return removed
                return Success(replace(state, deck=removed.value))
            case _:
                assert_never(command)

    def _purchase_speed_tier(self, state: GameState) -> Outcome[GameState]:
        tier = state.upgrades.speed_tier
        if tier >= max_speed_tier(self._config):
            return Failure("max_tier")
        cost = speed_tier_cost(tier, self._config)
        if not can_afford(state.economy, cost):
            return Failure("insufficient_funds")
        return Success(
            replace(
                state,
                economy=spend_money(state.economy, cost),
                upgrades=replace(state.upgrades, speed_tier=tier + 1),
            )
        )

    def _start_battle(self, state: GameState, customer_id: str) -> Outcome[GameState]:
        customer = self._customers.find(state.customers, customer_id)
        if customer is None:
            return Failure("missing_customer")
        if customer.status != "waitingBattle":
            return Failure("not_ready")
        outcome = self._battle.resolve(state.deck.card_ids, customer.tier, customer.deck_card_ids, state.rng_seed)
        next_state = replace(
            state,
            rng_seed=outcome.seed,
            economy=add_money(state.economy, outcome.money_delta),
            progression=grant_xp(state.progression, outcome.xp_delta, self._config).progression,
            customers=self._customers.remove(state.customers, customer.id),
        )
        events = (
            BattleResolved(
                customer_id=customer.id,
                result=outcome.result,
                money_delta=outcome.money_delta,
                xp_delta=outcome.xp_delta,
                player_score=outcome.player_score,
                enemy_score=outcome.enemy_score,
            ),
            CustomerLeft(customer_id=customer.id),
        )
        return Success(next_state, events=events)

    @staticmethod
    def _with_shop(state: GameState, outcome: Outcome) -> Outcome[GameState]:
        if isinstance(outcome, Failure):
            return outcome
        return Success(replace(state, shop=outcome.value))

    # -----------------------
    # Snapshot
    # -----------------------
    def snapshot(self) -> SimSnapshot:
        state = self._state
        tier = state.upgrades.speed_tier
        return SimSnapshot(
            paused=state.paused,
            phase=state.clock.phase,
            phase_time_remaining_seconds=phase_time_remaining(state.clock),
            day_number=state.clock.day_number,
            money=state.economy.money,
            speed_tier=tier,
            speed_multiplier=self.speed_multiplier(),
            next_speed_tier_cost=(
                speed_tier_cost(tier, self._config) if tier < max_speed_tier(self._config) else None
            ),
            level=state.progression.level,
            xp=state.progression.xp,
            xp_to_next=xp_to_next(state.progression.level, self._config),
            skill_points=state.progression.skill_points,
            unlocked_skills=state.skills.unlocked,
            unlocked_card_tier=unlocked_card_tier(state.skills),
            customers=tuple(
                CustomerView(
                    id=c.id,
                    name=c.name,
                    tier=c.tier,
                    intent=c.intent,
                    status=c.status,
                    time_to_decision_seconds=c.time_to_decision_seconds,
                    challenge_expires_in_seconds=c.challenge_expires_in_seconds,
                )
                for c in state.customers.customers
            ),
            backroom=MappingProxyType(dict(state.shop.backroom)),
            shelves=state.shop.shelves,
            sealed_packs=MappingProxyType(dict(state.sealed_packs)),
            collection=MappingProxyType(dict(state.collection)),
            deck=state.deck.card_ids,
            deck_max_size=state.deck.max_size,
            highest_tier_in_deck=self._catalog.highest_tier_in(state.deck.card_ids),
        )
