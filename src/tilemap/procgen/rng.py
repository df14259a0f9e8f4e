"""
Deterministic random number source for tile placement.

Wraps a numpy PCG64 bit generator so that a given seed reproduces the
same sequence on every platform. Bounded integers are derived from the
uniform stream and normal deviates use a Box-Muller pair with a cached
spare value, so every draw is part of one observable sequence.
"""

import math
from typing import Optional

import numpy as np

# Smallest positive value substituted for a zero uniform draw before log().
_EPSILON = np.finfo(np.float64).eps


class RNG:
    """
    Seeded uniform generator with a derived standard-normal generator.

    Each instance owns its own bit generator and spare cache; nothing is
    shared between instances.
    """

    def __init__(self, seed: int):
        if seed < 0:
            raise ValueError(f"seed must be non-negative, got {seed}")
        self.seed = seed
        self._generator = np.random.Generator(np.random.PCG64(seed))
        self._spare: Optional[float] = None

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return float(self._generator.random())

    def intn(self, n: int) -> int:
        """Uniform integer in [0, n); 0 when n <= 0."""
        if n <= 0:
            return 0
        return int(math.floor(self.random() * n))

    def norm_float64(self) -> float:
        """
        Standard normal deviate.

        Draws two uniforms per pair and returns the cosine branch; the sine
        branch is cached and returned by the next call without drawing.
        """
        if self._spare is not None:
            value = self._spare
            self._spare = None
            return value

        u = self.random() or _EPSILON
        v = self.random() or _EPSILON
        mag = math.sqrt(-2.0 * math.log(u))
        z0 = mag * math.cos(2.0 * math.pi * v)
        z1 = mag * math.sin(2.0 * math.pi * v)
        self._spare = z1
        return z0
