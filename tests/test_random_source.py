import pytest

from blockrisk.quant.monte_carlo.random_source import (
    EntropyRandom,
    SeededRandom,
    create_random_source,
)
from blockrisk.quant.monte_carlo.resampler import (
    resample_with_replacement,
    splice_guaranteed_values,
)


def test_seeded_random_follows_lcg_recurrence():
    rng = SeededRandom(0)
    first_state = 1013904223
    second_state = (first_state * 1664525 + 1013904223) % 2 ** 32

    assert rng.random() == first_state / 2 ** 32
    assert rng.random() == second_state / 2 ** 32


def test_same_seed_same_sequence():
    a, b = SeededRandom(42), SeededRandom(42)
    assert [a.random() for _ in range(20)] == [b.random() for _ in range(20)]


def test_different_seeds_differ():
    a, b = SeededRandom(1), SeededRandom(2)
    assert [a.random() for _ in range(5)] != [b.random() for _ in range(5)]


def test_values_in_unit_interval():
    for rng in (SeededRandom(7), EntropyRandom()):
        for _ in range(500):
            value = rng.random()
            assert 0 <= value < 1


def test_index_stays_in_range():
    rng = SeededRandom(123)
    assert all(0 <= rng.index(7) < 7 for _ in range(1000))


def test_create_random_source_picks_implementation():
    assert isinstance(create_random_source(5), SeededRandom)
    assert isinstance(create_random_source(None), EntropyRandom)


def test_resample_draws_from_pool():
    pool = [1.0, 2.0, 3.0]
    sample = resample_with_replacement(pool, 50, SeededRandom(9))
    assert len(sample) == 50
    assert set(sample.tolist()) <= set(pool)


def test_resample_zero_size_is_empty():
    assert len(resample_with_replacement([1.0], 0, SeededRandom(1))) == 0


def test_resample_empty_pool_raises():
    with pytest.raises(ValueError):
        resample_with_replacement([], 3, SeededRandom(1))


def test_splice_keeps_every_guaranteed_value():
    sample = [1.0] * 7
    spliced = splice_guaranteed_values(sample, [-5.0, -5.0, -5.0], SeededRandom(3), 10)
    assert len(spliced) == 10
    assert spliced.tolist().count(-5.0) == 3
    assert spliced.tolist().count(1.0) == 7
