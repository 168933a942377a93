"""Leader-election sampler: how many blocks a miner wins in one epoch.

The number of wins is Poisson distributed with mean equal to the miner's share
of network power times the expected number of leaders per epoch. Sampling
walks the upper tail of the distribution from a single uniform draw, so every
call consumes exactly one value from the supplied generator.
"""

from __future__ import annotations

import math
import random
from fractions import Fraction

from actor_sim.config.constants import EXPECTED_LEADERS_PER_EPOCH


def factorial(k: int) -> int:
    if k < 0:
        raise ValueError("k must be >= 0")
    result = 1
    for i in range(2, k + 1):
        result *= i
    return result


def poisson_pmf(lam: float, k: int) -> float:
    """Probability of exactly *k* events for a Poisson process with mean *lam*."""
    if k < 0:
        raise ValueError("k must be >= 0")
    return math.exp(-lam) * lam**k / factorial(k)


def win_count(miner_power: int, total_power: int, rng: random.Random) -> int:
    """Sample the number of blocks won by a miner holding *miner_power*.

    Raises :exc:`ValueError` when *total_power* is not positive; callers skip
    sampling entirely when the network has no power.
    """
    if total_power <= 0:
        raise ValueError("total_power must be > 0")
    lam = float(Fraction(miner_power, total_power) * EXPECTED_LEADERS_PER_EPOCH)

    h = rng.random()
    rhs = 1.0 - poisson_pmf(lam, 0)
    k = 0
    while rhs > h:
        k += 1
        rhs -= poisson_pmf(lam, k)
    return k
