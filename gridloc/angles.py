"""Angle arithmetic and the random samplers used by the filter."""

from __future__ import annotations

import math
import random
from typing import Optional, Protocol


class RandomSource(Protocol):
    """Anything with a ``random()`` method returning a float in [0, 1)."""

    def random(self) -> float: ...


def _source(rng: Optional[RandomSource]) -> RandomSource:
    return rng if rng is not None else random


def gaussian(x: float, std: float, mean: float = 0.0) -> float:
    """Unnormalised Gaussian bell: 1.0 at the mean, falling off with ``std``."""
    return math.exp(-(x - mean) * (x - mean) / (2.0 * (std * std)))


def gaussian_random(mean: float, std: float, rng: Optional[RandomSource] = None) -> float:
    """Draw one sample from N(mean, std) with the Box-Muller transform."""
    source = _source(rng)
    u = 1.0 - source.random()  # in (0, 1], so the logarithm is defined
    v = source.random()
    z = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
    return mean + std * z


def uniform_random(low: float, high: float, rng: Optional[RandomSource] = None) -> float:
    """Draw one sample uniformly between ``low`` and ``high``."""
    return low + _source(rng).random() * (high - low)


def diff_angle(a: float, b: float) -> float:
    """Shortest signed rotation that turns angle ``a`` into angle ``b``."""
    return normalize_theta(b - a)


def normalize_theta(theta: float) -> float:
    """Bring an angle into [-pi, pi) by at most one full turn in each direction."""
    if theta >= math.pi:
        theta -= 2 * math.pi
    if theta < -math.pi:
        theta += 2 * math.pi
    return theta