"""
Uniform random sources for bootstrap sampling.

Seeded runs use a 32-bit linear congruential generator so that a given seed
reproduces identical paths; unseeded runs draw from numpy's entropy-seeded
PCG64 generator.
"""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np


LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
LCG_MODULUS = 2 ** 32


class RandomSource(ABC):
    """Source of uniform floats in [0, 1)."""

    @abstractmethod
    def random(self) -> float:
        """Return the next uniform value in [0, 1)."""

    def index(self, length: int) -> int:
        """Uniform index in [0, length)."""
        return int(self.random() * length)


class SeededRandom(RandomSource):
    """
    Linear congruential generator (Numerical Recipes constants).

    state = (state * 1664525 + 1013904223) mod 2^32, output state / 2^32.
    """

    def __init__(self, seed: int):
        self.seed = int(seed)
        self._state = self.seed

    def random(self) -> float:
        self._state = (self._state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self._state / LCG_MODULUS


class EntropyRandom(RandomSource):
    """Non-deterministic source backed by numpy's default generator."""

    def __init__(self, generator: Optional[np.random.Generator] = None):
        self._generator = generator or np.random.default_rng()

    def random(self) -> float:
        return float(self._generator.random())


def create_random_source(seed: Optional[int] = None) -> RandomSource:
    """Seeded LCG when a seed is given, entropy source otherwise."""
    if seed is not None:
        return SeededRandom(seed)
    return EntropyRandom()
