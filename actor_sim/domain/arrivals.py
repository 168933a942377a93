"""Poisson arrival clock shared by agents that act at a configured rate."""

from __future__ import annotations

from random import Random


class PoissonArrivals:
    """Event times of a Poisson process with ``rate`` events per epoch.

    Inter-arrival gaps are exponential, so the count falling inside any one
    epoch is Poisson(rate). The clock carries over between epochs.
    """

    def __init__(self, rate: float, rng: Random) -> None:
        if rate < 0.0:
            raise ValueError("rate must be >= 0")
        self.rate = rate
        self._rng = rng
        self._next_event: float | None = None

    def events_in_epoch(self, epoch: int) -> int:
        """Number of events falling in ``[epoch, epoch + 1)``."""
        if self.rate == 0.0:
            return 0
        if self._next_event is None:
            self._next_event = epoch + self._rng.expovariate(self.rate)
        count = 0
        while self._next_event < epoch + 1:
            count += 1
            self._next_event += self._rng.expovariate(self.rate)
        return count
