from __future__ import annotations

import math
from dataclasses import replace

from cardshop.config import DEFAULT_CONFIG
from cardshop.domain.clock import create_initial_clock, phase_time_remaining, tick_clock
from cardshop.domain.events import PhaseChanged


def test_clock_advances_inside_a_phase() -> None:
    clock, events = tick_clock(create_initial_clock(DEFAULT_CONFIG), 10.0, DEFAULT_CONFIG)

    assert events == []
    assert clock.phase == "day"
    assert clock.time_in_phase_seconds == 10.0
    assert phase_time_remaining(clock) == 290.0


def test_day_rolls_into_night_without_changing_day_number() -> None:
    clock, events = tick_clock(create_initial_clock(DEFAULT_CONFIG), 300.0, DEFAULT_CONFIG)

    assert events == [PhaseChanged(from_phase="day", to_phase="night", day_number=1)]
    assert clock.phase == "night"
    assert clock.day_number == 1
    assert clock.phase_duration_seconds == 60.0


def test_two_full_phases_emit_two_events_in_order() -> None:
    clock, events = tick_clock(create_initial_clock(DEFAULT_CONFIG), 360.0, DEFAULT_CONFIG)

    assert [(e.from_phase, e.to_phase, e.day_number) for e in events] == [
        ("day", "night", 1),
        ("night", "day", 2),
    ]
    assert clock.phase == "day"
    assert clock.day_number == 2
    assert clock.time_in_phase_seconds == 0.0


def test_non_finite_or_negative_dt_is_ignored() -> None:
    start = create_initial_clock(DEFAULT_CONFIG)
    for dt in (math.nan, math.inf, -5.0):
        clock, events = tick_clock(start, dt, DEFAULT_CONFIG)
        assert events == []
        assert clock.time_in_phase_seconds == 0.0


def test_corrupt_clock_fields_are_repaired() -> None:
    broken = replace(
        create_initial_clock(DEFAULT_CONFIG),
        day_number=math.nan,
        phase_duration_seconds=0.0,
        time_in_phase_seconds=math.inf,
    )

    clock, events = tick_clock(broken, 1.0, DEFAULT_CONFIG)

    assert events == []
    assert clock.day_number == 1
    assert clock.phase_duration_seconds == 300.0
    assert clock.time_in_phase_seconds == 1.0


def test_elapsed_past_the_phase_end_restarts_the_phase() -> None:
    broken = replace(create_initial_clock(DEFAULT_CONFIG), time_in_phase_seconds=1e20)

    clock, events = tick_clock(broken, 0.1, DEFAULT_CONFIG)

    assert events == []
    assert clock.phase == "day"
    assert clock.day_number == 1
    assert math.isclose(clock.time_in_phase_seconds, 0.1)
