"""Money ledger rules."""
from __future__ import annotations

from cardshop.core.guards import int_or
from cardshop.domain.state import EconomyState


def create_initial_economy(starting_money: int) -> EconomyState:
    return EconomyState(money=max(0, starting_money))


def add_money(economy: EconomyState, amount: float) -> EconomyState:
    delta = max(0, int_or(amount, 0))
    return EconomyState(money=economy.money + delta)


def can_afford(economy: EconomyState, cost: float) -> bool:
    return economy.money >= max(0, int_or(cost, 0))


def spend_money(economy: EconomyState, cost: float) -> EconomyState:
    charge = max(0, int_or(cost, 0))
    return EconomyState(money=max(0, economy.money - charge))
