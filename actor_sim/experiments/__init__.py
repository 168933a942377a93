"""Run orchestration and command-line entrypoint."""

from actor_sim.experiments.run import RunResult, add_transfer_agents, run_simulation

__all__ = ["RunResult", "add_transfer_agents", "run_simulation"]
