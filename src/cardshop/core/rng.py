"""Deterministic RNG built on an explicit 32-bit seed (Mulberry32).

Every draw returns the value together with the advanced seed, so callers can
thread the seed through pure state transitions. ``RNG`` is a small cursor over
the same functions for code that makes several draws in a row.
"""
from __future__ import annotations

import math
from typing import NamedTuple, Sequence, TypeVar

T_co = TypeVar("T_co")

_MASK_32 = 0xFFFFFFFF
_SIGN_32 = 0x80000000
_GOLDEN_STEP = 0x6D2B79F5


class Draw(NamedTuple):
    """A drawn value and the seed to use for the next draw."""

    value: float
    seed: int


def to_int32(value: int) -> int:
    """Wrap an integer into the signed 32-bit range."""
    value &= _MASK_32
    return value - 0x100000000 if value & _SIGN_32 else value


def coerce_seed(value: object, default: int) -> int:
    """Return a usable seed for untrusted input (bools, NaN and junk use ``default``)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return to_int32(default)
    if isinstance(value, float):
        if not math.isfinite(value):
            return to_int32(default)
        value = int(value)
    return to_int32(value)


def _imul(a: int, b: int) -> int:
    return to_int32((a & _MASK_32) * (b & _MASK_32))


def next_seed(seed: int) -> int:
    """Advance the seed by one Mulberry32 step."""
    t = to_int32(seed + _GOLDEN_STEP)
    t = _imul(t ^ ((t & _MASK_32) >> 15), t | 1)
    t ^= to_int32(t + _imul(t ^ ((t & _MASK_32) >> 7), t | 61))
    return to_int32(t ^ ((t & _MASK_32) >> 14))


def rand_float01(seed: int) -> Draw:
    """Return a float in [0, 1)."""
    advanced = next_seed(seed)
    return Draw((advanced & _MASK_32) / 0x100000000, advanced)


def rand_range(seed: int, low: float, high: float) -> Draw:
    """Return a float in [low, high)."""
    r, advanced = rand_float01(seed)
    return Draw(low + r * (high - low), advanced)


def rand_int_inclusive(seed: int, low: int, high: int) -> Draw:
    """Return an integer N such that low <= N <= high."""
    r, advanced = rand_float01(seed)
    return Draw(math.floor(low + r * (high - low + 1)), advanced)


class RNG:
    """Cursor over the seed stream that provides deterministic helpers."""

    def __init__(self, seed: int) -> None:
        self._seed = to_int32(seed)

    @property
    def seed(self) -> int:
        """The seed the next draw will consume."""
        return self._seed

    def random(self) -> float:
        """Return the next random floating point number in the range [0.0, 1.0)."""
        value, self._seed = rand_float01(self._seed)
        return value

    def uniform(self, low: float, high: float) -> float:
        """Return a random float in [low, high)."""
        value, self._seed = rand_range(self._seed, low, high)
        return value

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        value, self._seed = rand_int_inclusive(self._seed, a, b)
        return int(value)

    def choice(self, seq: Sequence[T_co]) -> T_co:
        """Return a random element from the non-empty sequence."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence.")
        return seq[self.randint(0, len(seq) - 1)]
