"""Level curve and XP grants."""
from __future__ import annotations

import math
from typing import NamedTuple

from cardshop.config import SimConfig
from cardshop.core.guards import int_or
from cardshop.domain.state import ProgressionState

MAX_LEVEL = 999
# Returned when the curve overflows a float; no grant can ever reach it.
XP_CEILING = 10**18


class XpGrant(NamedTuple):
    progression: ProgressionState
    levels_gained: int


def xp_to_next(level: int, config: SimConfig) -> int:
    """ceil(base * growth^(level-1)), never below 1."""
    lvl = max(1, int_or(level, 1))
    tuning = config.progression
    try:
        raw = tuning.base_xp_to_next * math.pow(tuning.xp_growth, lvl - 1)
        needed = math.ceil(raw)
    except (OverflowError, ValueError):
        return XP_CEILING
    return max(1, min(XP_CEILING, needed))


def create_initial_progression() -> ProgressionState:
    return ProgressionState(level=1, xp=0, skill_points=0)


def grant_xp(progression: ProgressionState, amount: float, config: SimConfig) -> XpGrant:
    """Add XP, rolling over as many levels as the total covers."""
    gained = max(0, int_or(amount, 0))
    level = progression.level
    xp = progression.xp + gained
    skill_points = progression.skill_points
    levels_gained = 0

    needed = xp_to_next(level, config)
    while xp >= needed and level < MAX_LEVEL:
        xp -= needed
        level += 1
        skill_points += config.progression.skill_points_per_level
        levels_gained += 1
        needed = xp_to_next(level, config)
    if level >= MAX_LEVEL:
        xp = min(xp, xp_to_next(level, config) - 1)

    return XpGrant(ProgressionState(level=level, xp=xp, skill_points=skill_points), levels_gained)
