"""
Bootstrap resampling with replacement.
"""

from typing import List, Sequence

import numpy as np

from .random_source import RandomSource


def resample_with_replacement(
    pool: Sequence[float],
    sample_size: int,
    rng: RandomSource
) -> np.ndarray:
    """
    Draw `sample_size` values uniformly, with replacement, from `pool`.

    Args:
        pool: Values to sample from
        sample_size: Number of draws
        rng: Uniform random source

    Returns:
        Array of resampled values
    """
    pool = np.asarray(pool, dtype=float)
    if sample_size <= 0:
        return np.array([], dtype=float)
    if len(pool) == 0:
        raise ValueError("Cannot resample from an empty pool")

    indices = [rng.index(len(pool)) for _ in range(sample_size)]
    return pool[indices]


def splice_guaranteed_values(
    sample: Sequence[float],
    guaranteed: Sequence[float],
    rng: RandomSource,
    length: int
) -> np.ndarray:
    """
    Insert every guaranteed value at a uniformly random position.

    Positions are drawn against the growing sequence, so a value may land
    before, between or after earlier insertions. The result is cut to
    `length` entries.
    """
    combined: List[float] = list(sample)
    for value in guaranteed:
        position = rng.index(len(combined) + 1)
        combined.insert(position, value)
    return np.asarray(combined[:length], dtype=float)
