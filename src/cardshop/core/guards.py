"""Total coercion helpers for numbers coming from untrusted sources."""
from __future__ import annotations

import math


def is_number(value: object) -> bool:
    """True for real ints/floats; bools are rejected even though they subclass int."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def finite_or(value: object, default: float) -> float:
    """Return ``value`` as a float when it is a finite number, else ``default``."""
    if not is_number(value):
        return default
    try:
        number = float(value)  # type: ignore[arg-type]
    except OverflowError:
        return default
    return number if math.isfinite(number) else default


def int_or(value: object, default: int) -> int:
    """Floor a finite number to an int, else ``default``."""
    number = finite_or(value, math.nan)
    if math.isnan(number):
        return default
    return math.floor(number)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
