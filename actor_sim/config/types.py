"""Configuration dataclasses for simulation runs.

All frozen dataclasses that parameterise the engine, the agents and the run
orchestration live here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from actor_sim.config.constants import (
    DEFAULT_PRECOMMIT_RATE,
    DEFAULT_TRANSFER_RATE,
    MAX_RUN_EPOCHS,
)
from actor_sim.ledger.builtin import RegisteredSealProof

__all__ = [
    "MAX_RUN_EPOCHS",
    "MinerAgentConfig",
    "RunConfig",
    "SimConfig",
    "TransferAgentConfig",
]


@dataclass(frozen=True)
class MinerAgentConfig:
    """Tuning passed opaquely through to each miner agent."""

    precommit_rate: float = DEFAULT_PRECOMMIT_RATE
    """Expected pre-commits per epoch."""
    proof_type: RegisteredSealProof = RegisteredSealProof.STACKED_DRG_32GIB_V1_1
    starting_balance: int = 0

    def __post_init__(self) -> None:
        if self.precommit_rate < 0.0:
            raise ValueError("precommit_rate must be >= 0")
        if self.starting_balance < 0:
            raise ValueError("starting_balance must be >= 0")


@dataclass(frozen=True)
class TransferAgentConfig:
    """Tuning for account-holder agents that move funds between accounts."""

    transfer_rate: float = DEFAULT_TRANSFER_RATE
    max_transfer_fraction: float = 0.1
    """Upper bound on a single transfer as a fraction of the sender's balance."""

    def __post_init__(self) -> None:
        if self.transfer_rate < 0.0:
            raise ValueError("transfer_rate must be >= 0")
        if not 0.0 < self.max_transfer_fraction <= 1.0:
            raise ValueError("max_transfer_fraction must be in (0.0, 1.0]")


@dataclass(frozen=True)
class SimConfig:
    """Immutable per-run engine parameters."""

    account_count: int = 10
    account_initial_balance: int = 10_000
    seed: int = 0
    create_miner_probability: float = 0.1
    miner_config: MinerAgentConfig = field(default_factory=MinerAgentConfig)

    def __post_init__(self) -> None:
        if self.account_count < 0:
            raise ValueError("account_count must be >= 0")
        if self.account_initial_balance < 0:
            raise ValueError("account_initial_balance must be >= 0")
        if not 0.0 <= self.create_miner_probability <= 1.0:
            raise ValueError("create_miner_probability must be in [0.0, 1.0]")


@dataclass(frozen=True)
class RunConfig:
    """Run-level settings: how long to tick and where artifacts go."""

    sim: SimConfig = field(default_factory=SimConfig)
    epochs: int = 100
    out_dir: Path = Path("data")
    n_transfer_agents: int = 0
    transfer_accounts_per_agent: int = 2
    transfer_config: TransferAgentConfig = field(default_factory=TransferAgentConfig)

    def __post_init__(self) -> None:
        if self.epochs < 1:
            raise ValueError("epochs must be >= 1")
        if self.epochs > MAX_RUN_EPOCHS:
            raise ValueError("epochs exceeds safety threshold; reduce epochs")
        if self.n_transfer_agents < 0:
            raise ValueError("n_transfer_agents must be >= 0")
        if self.transfer_accounts_per_agent < 1:
            raise ValueError("transfer_accounts_per_agent must be >= 1")
