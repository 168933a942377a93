"""Simulation engine, power table builder and leader-election sampler."""

from actor_sim.simulation.engine import Sim, TickReport
from actor_sim.simulation.power import MinerPower, PowerTable, compute_power_table
from actor_sim.simulation.wincount import factorial, poisson_pmf, win_count

__all__ = [
    "MinerPower",
    "PowerTable",
    "Sim",
    "TickReport",
    "compute_power_table",
    "factorial",
    "poisson_pmf",
    "win_count",
]
