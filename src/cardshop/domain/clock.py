"""Day/night clock transitions."""
from __future__ import annotations

from dataclasses import replace
from typing import List, Tuple

from cardshop.config import SimConfig
from cardshop.core.guards import finite_or, int_or
from cardshop.core.types import Phase
from cardshop.domain.events import PhaseChanged
from cardshop.domain.state import ClockState


def phase_duration(phase: Phase, config: SimConfig) -> float:
    return config.day_seconds if phase == "day" else config.night_seconds


def create_initial_clock(config: SimConfig) -> ClockState:
    return ClockState(
        phase="day",
        time_in_phase_seconds=0.0,
        day_number=1,
        phase_duration_seconds=phase_duration("day", config),
    )


def tick_clock(
    clock: ClockState, dt_sim_seconds: float, config: SimConfig
) -> Tuple[ClockState, List[PhaseChanged]]:
    """Advance the clock, emitting one event per phase boundary crossed."""
    dt = max(0.0, finite_or(dt_sim_seconds, 0.0))
    phase: Phase = clock.phase if clock.phase in ("day", "night") else "day"
    day_number = max(1, int_or(clock.day_number, 1))
    duration = finite_or(clock.phase_duration_seconds, 0.0)
    if duration <= 0:
        duration = phase_duration(phase, config)
    elapsed = max(0.0, finite_or(clock.time_in_phase_seconds, 0.0))
    if elapsed >= duration:
        elapsed = 0.0
    elapsed += dt

    events: List[PhaseChanged] = []
    while elapsed >= duration:
        elapsed -= duration
        from_phase = phase
        phase = "night" if from_phase == "day" else "day"
        if phase == "day":
            day_number += 1
        duration = phase_duration(phase, config)
        events.append(PhaseChanged(from_phase=from_phase, to_phase=phase, day_number=day_number))

    next_clock = replace(
        clock,
        phase=phase,
        time_in_phase_seconds=elapsed,
        day_number=day_number,
        phase_duration_seconds=duration,
    )
    return next_clock, events


def phase_time_remaining(clock: ClockState) -> float:
    return max(0.0, finite_or(clock.phase_duration_seconds - clock.time_in_phase_seconds, 0.0))
