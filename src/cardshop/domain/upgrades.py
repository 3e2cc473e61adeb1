"""Speed upgrade tiers and prices."""
from __future__ import annotations

import math

from cardshop.config import SimConfig
from cardshop.core.guards import int_or
from cardshop.domain.state import UpgradesState


def max_speed_tier(config: SimConfig) -> int:
    tuning = config.speed_upgrade
    # Rounded before flooring so 2.0 / 0.05 lands on 40, not 39.999...
    tiers = math.floor(round((tuning.cap_speed - tuning.base_speed) / tuning.tier_increment, 9))
    return max(0, tiers)


def speed_multiplier_for_tier(tier: int, config: SimConfig) -> float:
    tuning = config.speed_upgrade
    t = max(0, min(max_speed_tier(config), int_or(tier, 0)))
    return min(tuning.cap_speed, tuning.base_speed + t * tuning.tier_increment)


def speed_tier_cost(tier: int, config: SimConfig) -> int:
    tuning = config.speed_upgrade
    t = max(0, int_or(tier, 0))
    try:
        return max(0, math.ceil(tuning.cost_base * math.pow(tuning.cost_growth, t)))
    except OverflowError:
        return 10**18


def create_initial_upgrades() -> UpgradesState:
    return UpgradesState(speed_tier=0)
