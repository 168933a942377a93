"""Centralized network and simulation constants.

All magic numbers shared between the reference ledger, the agents and the
simulation engine are defined here. Consuming modules should import from this
module rather than defining their own inline literals.
"""

from __future__ import annotations

EXPECTED_LEADERS_PER_EPOCH = 5
"""Expected number of blocks produced network-wide per epoch (Poisson rate scale)."""

CONSENSUS_MINER_MIN_MINERS = 4
"""Number of miners that must meet the minimum power before the minimum is enforced."""

CONSENSUS_MINER_MIN_POWER = 10 << 40
"""Minimum raw byte power (10 TiB) for a miner to be eligible for block rewards."""

SECTOR_SIZE_32GIB = 32 << 30
"""Sector size in bytes for the 32 GiB seal proof."""

SECTOR_SIZE_64GIB = 64 << 30
"""Sector size in bytes for the 64 GiB seal proof."""

PRE_COMMIT_CHALLENGE_DELAY = 10
"""Epochs a pre-committed sector must wait before it can be prove-committed."""

PRE_COMMIT_DEPOSIT = 10
"""Token amount locked per pre-committed sector (released as initial pledge)."""

INITIAL_EPOCH_REWARD = 1_000_000
"""Block reward budget for the genesis epoch, split across expected leaders."""

REWARD_DECAY_DIVISOR = 10_000
"""Per-epoch reward decays by ``reward // REWARD_DECAY_DIVISOR``."""

REWARD_ACTOR_GENESIS_BALANCE = 10**18
"""Funds held by the reward actor at genesis (also the account faucet)."""

FIRST_NON_SINGLETON_ID = 100
"""First actor ID handed out by the init actor."""

DEFAULT_PRECOMMIT_RATE = 2.5
"""Default expected pre-commits per epoch for a miner agent."""

DEFAULT_TRANSFER_RATE = 1.0
"""Default expected transfers per epoch for a transfer agent."""

FLUSH_THRESHOLD = 8_192
"""Flush buffered run rows to Parquet once this in-memory row count is reached."""

MAX_RUN_EPOCHS = 1_000_000
"""Safety cap on epochs for a single run."""
