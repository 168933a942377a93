"""Configuration layer: constants and typed config dataclasses."""

from actor_sim.config.constants import (
    CONSENSUS_MINER_MIN_MINERS,
    CONSENSUS_MINER_MIN_POWER,
    EXPECTED_LEADERS_PER_EPOCH,
    FLUSH_THRESHOLD,
    INITIAL_EPOCH_REWARD,
    MAX_RUN_EPOCHS,
    PRE_COMMIT_CHALLENGE_DELAY,
    PRE_COMMIT_DEPOSIT,
)
from actor_sim.config.types import (
    MinerAgentConfig,
    RunConfig,
    SimConfig,
    TransferAgentConfig,
)

__all__ = [
    "CONSENSUS_MINER_MIN_MINERS",
    "CONSENSUS_MINER_MIN_POWER",
    "EXPECTED_LEADERS_PER_EPOCH",
    "FLUSH_THRESHOLD",
    "INITIAL_EPOCH_REWARD",
    "MAX_RUN_EPOCHS",
    "MinerAgentConfig",
    "PRE_COMMIT_CHALLENGE_DELAY",
    "PRE_COMMIT_DEPOSIT",
    "RunConfig",
    "SimConfig",
    "TransferAgentConfig",
]
