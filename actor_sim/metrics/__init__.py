"""Run-level statistics."""

from actor_sim.metrics.rewards import MinerWinSummary, expected_wins, summarize_win_counts

__all__ = ["MinerWinSummary", "expected_wins", "summarize_win_counts"]
