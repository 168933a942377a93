"""Win-count statistics: empirical versus expected leader election per miner."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from actor_sim.config.constants import EXPECTED_LEADERS_PER_EPOCH


@dataclass(frozen=True)
class MinerWinSummary:
    miner: str
    epochs: int
    """Epochs in which the miner was eligible to win."""
    total_wins: int
    mean_wins: float
    var_wins: float
    expected_mean_wins: float
    """Mean of the per-epoch Poisson rate, power share times leaders per epoch."""
    win_share: float
    """Fraction of all wins in the run that went to this miner."""


def expected_wins(qa_power: Sequence[int], total_qa_power: Sequence[int]) -> np.ndarray:
    """Per-row Poisson rate; rows with no network power have rate 0."""
    power = np.asarray(qa_power, dtype=float)
    total = np.asarray(total_qa_power, dtype=float)
    rate = np.zeros_like(power)
    np.divide(power, total, out=rate, where=total > 0)
    return rate * EXPECTED_LEADERS_PER_EPOCH


def summarize_win_counts(
    miners: Sequence[str],
    wins: Sequence[int],
    expected: Sequence[float],
) -> list[MinerWinSummary]:
    """Aggregate per-epoch win rows by miner, in order of first appearance.

    ``var_wins`` is the population variance; a Poisson sampler should give a
    variance close to the mean when the rate is stable.
    """
    if not (len(miners) == len(wins) == len(expected)):
        raise ValueError("miners, wins and expected must have equal length")
    if not miners:
        return []

    miner_arr = np.asarray(miners, dtype=object)
    win_arr = np.asarray(wins, dtype=np.int64)
    expected_arr = np.asarray(expected, dtype=float)
    grand_total = int(win_arr.sum())

    summaries: list[MinerWinSummary] = []
    for miner in dict.fromkeys(miners):
        mask = miner_arr == miner
        miner_wins = win_arr[mask]
        total = int(miner_wins.sum())
        summaries.append(
            MinerWinSummary(
                miner=miner,
                epochs=int(mask.sum()),
                total_wins=total,
                mean_wins=float(miner_wins.mean()),
                var_wins=float(miner_wins.var()),
                expected_mean_wins=float(expected_arr[mask].mean()),
                win_share=total / grand_total if grand_total else 0.0,
            )
        )
    return summaries
