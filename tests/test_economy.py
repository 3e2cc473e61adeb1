from __future__ import annotations

import math

from cardshop.domain.economy import add_money, can_afford, create_initial_economy, spend_money
from cardshop.domain.state import EconomyState


def test_add_money_ignores_negative_and_non_finite_amounts() -> None:
    economy = create_initial_economy(50)

    assert add_money(economy, 10).money == 60
    assert add_money(economy, -10).money == 50
    assert add_money(economy, math.nan).money == 50


def test_spend_money_never_goes_negative() -> None:
    assert spend_money(EconomyState(money=5), 8).money == 0
    assert spend_money(EconomyState(money=20), 8).money == 12


def test_can_afford() -> None:
    economy = EconomyState(money=25)

    assert can_afford(economy, 25)
    assert not can_afford(economy, 26)
