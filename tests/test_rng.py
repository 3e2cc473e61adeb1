from __future__ import annotations

import math

import pytest

from cardshop.core.rng import RNG, coerce_seed, next_seed, rand_float01, rand_int_inclusive, to_int32


def test_rng_determinism_same_seed() -> None:
    rng_a = RNG(12345)
    rng_b = RNG(12345)

    ints_a = [rng_a.randint(1, 100) for _ in range(5)]
    ints_b = [rng_b.randint(1, 100) for _ in range(5)]
    floats_a = [rng_a.random() for _ in range(5)]
    floats_b = [rng_b.random() for _ in range(5)]
    choices_a = [rng_a.choice(["a", "b", "c"]) for _ in range(5)]
    choices_b = [rng_b.choice(["a", "b", "c"]) for _ in range(5)]

    assert ints_a == ints_b
    assert floats_a == floats_b
    assert choices_a == choices_b
    assert rng_a.seed == rng_b.seed


def test_rng_different_seed() -> None:
    rng_a = RNG(11111)
    rng_b = RNG(22222)

    draws_a = [rng_a.randint(1, 100) for _ in range(5)]
    draws_b = [rng_b.randint(1, 100) for _ in range(5)]

    assert draws_a != draws_b


def test_draws_return_advanced_seed() -> None:
    value, seed = rand_float01(42)

    assert 0.0 <= value < 1.0
    assert seed == next_seed(42)
    assert rand_float01(42) == (value, seed)


def test_randint_stays_inside_inclusive_bounds() -> None:
    seed = 7
    seen = set()
    for _ in range(500):
        value, seed = rand_int_inclusive(seed, -2, 2)
        seen.add(value)

    assert seen == {-2, -1, 0, 1, 2}


def test_uniform_stays_in_range() -> None:
    rng = RNG(99)
    values = [rng.uniform(4.0, 10.0) for _ in range(200)]

    assert all(4.0 <= value < 10.0 for value in values)


def test_choice_on_empty_sequence_raises() -> None:
    with pytest.raises(ValueError):
        RNG(1).choice([])


def test_seeds_stay_in_signed_32_bit_range() -> None:
    seed = 0
    for _ in range(100):
        seed = next_seed(seed)
        assert -(2**31) <= seed < 2**31

    assert to_int32(2**31) == -(2**31)
    assert to_int32(2**32 + 5) == 5


def test_coerce_seed_rejects_junk() -> None:
    assert coerce_seed(None, 12345) == 12345
    assert coerce_seed(math.nan, 12345) == 12345
    assert coerce_seed(True, 12345) == 12345
    assert coerce_seed("7", 12345) == 12345
    assert coerce_seed(7.9, 12345) == 7
    assert coerce_seed(2**32 + 3, 12345) == 3
