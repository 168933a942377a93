"""Tests for the Poisson leader-election sampler."""

from __future__ import annotations

import math
import random

import pytest

from actor_sim.simulation.wincount import factorial, poisson_pmf, win_count


class TestFactorial:
    def test_small_values(self) -> None:
        assert [factorial(k) for k in range(6)] == [1, 1, 2, 6, 24, 120]

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            factorial(-1)


class TestPoissonPmf:
    def test_sums_to_one(self) -> None:
        assert sum(poisson_pmf(3.0, k) for k in range(60)) == pytest.approx(1.0)

    def test_zero_rate_puts_all_mass_on_zero(self) -> None:
        assert poisson_pmf(0.0, 0) == 1.0
        assert poisson_pmf(0.0, 3) == 0.0

    def test_matches_closed_form(self) -> None:
        assert poisson_pmf(2.0, 3) == pytest.approx(math.exp(-2.0) * 8 / 6)


class TestWinCount:
    def test_zero_power_never_wins(self) -> None:
        rng = random.Random(0)
        assert all(win_count(0, 100, rng) == 0 for _ in range(1_000))

    @pytest.mark.parametrize("total", [0, -5])
    def test_non_positive_total_rejected(self, total: int) -> None:
        with pytest.raises(ValueError, match="total_power"):
            win_count(1, total, random.Random(0))

    def test_consumes_one_draw_per_call(self) -> None:
        rng = random.Random(11)
        win_count(60, 100, rng)
        reference = random.Random(11)
        reference.random()
        assert rng.random() == reference.random()

    def test_mean_converges_to_lambda(self) -> None:
        rng = random.Random(2024)
        n = 20_000
        draws = [win_count(60, 100, rng) for _ in range(n)]
        assert min(draws) >= 0
        lam = 0.6 * 5
        # Four standard errors of the sample mean.
        assert sum(draws) / n == pytest.approx(lam, abs=4 * math.sqrt(lam / n))

    def test_reproducible_for_fixed_stream(self) -> None:
        def sample(seed: int) -> tuple[int, int]:
            rng = random.Random(seed)
            return win_count(60, 100, rng), win_count(40, 100, rng)

        assert sample(42) == sample(42)

    def test_larger_share_wins_more_in_the_long_run(self) -> None:
        rng = random.Random(7)
        a_total = 0
        b_total = 0
        for _ in range(5_000):
            a_total += win_count(60, 100, rng)
            b_total += win_count(40, 100, rng)
        assert a_total > b_total
