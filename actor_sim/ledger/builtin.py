"""Builtin actor codes, singleton addresses, method numbers and exit codes."""

from __future__ import annotations

from enum import IntEnum

from actor_sim.ledger.address import new_id_address

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class ExitCode(IntEnum):
    """Outcome of applying a message. Everything but ``OK`` is a failure."""

    OK = 0
    SYS_ERR_SENDER_INVALID = 1
    SYS_ERR_SENDER_STATE_INVALID = 2
    SYS_ERR_INVALID_METHOD = 3
    SYS_ERR_INVALID_RECEIVER = 5
    SYS_ERR_INSUFFICIENT_FUNDS = 6
    SYS_ERR_FORBIDDEN = 8
    SYS_ERR_ILLEGAL_ACTOR = 9
    SYS_ERR_ILLEGAL_ARGUMENT = 10
    ERR_ILLEGAL_ARGUMENT = 16
    ERR_NOT_FOUND = 17
    ERR_FORBIDDEN = 18
    ERR_INSUFFICIENT_FUNDS = 19
    ERR_ILLEGAL_STATE = 20
    ERR_SERIALIZATION = 21


class RegisteredSealProof(IntEnum):
    """Seal proof types a miner may register with."""

    STACKED_DRG_32GIB_V1_1 = 8
    STACKED_DRG_64GIB_V1_1 = 9


# ---------------------------------------------------------------------------
# Actor codes
# ---------------------------------------------------------------------------

SYSTEM_ACTOR_CODE = "system"
INIT_ACTOR_CODE = "init"
REWARD_ACTOR_CODE = "reward"
CRON_ACTOR_CODE = "cron"
STORAGE_POWER_ACTOR_CODE = "storagepower"
STORAGE_MINER_ACTOR_CODE = "storageminer"
ACCOUNT_ACTOR_CODE = "account"
MULTISIG_ACTOR_CODE = "multisig"

# ---------------------------------------------------------------------------
# Singleton addresses
# ---------------------------------------------------------------------------

SYSTEM_ACTOR_ADDR = new_id_address(0)
INIT_ACTOR_ADDR = new_id_address(1)
REWARD_ACTOR_ADDR = new_id_address(2)
CRON_ACTOR_ADDR = new_id_address(3)
STORAGE_POWER_ACTOR_ADDR = new_id_address(4)
BURNT_FUNDS_ACTOR_ADDR = new_id_address(99)

# ---------------------------------------------------------------------------
# Method numbers
# ---------------------------------------------------------------------------

METHOD_SEND = 0
METHOD_CONSTRUCTOR = 1


class MethodsAccount:
    CONSTRUCTOR = METHOD_CONSTRUCTOR
    PUBKEY_ADDRESS = 2


class MethodsInit:
    CONSTRUCTOR = METHOD_CONSTRUCTOR
    EXEC = 2


class MethodsCron:
    CONSTRUCTOR = METHOD_CONSTRUCTOR
    EPOCH_TICK = 2


class MethodsReward:
    CONSTRUCTOR = METHOD_CONSTRUCTOR
    AWARD_BLOCK_REWARD = 2
    THIS_EPOCH_REWARD = 3
    UPDATE_NETWORK_KPI = 4


class MethodsPower:
    CONSTRUCTOR = METHOD_CONSTRUCTOR
    CREATE_MINER = 2
    UPDATE_CLAIMED_POWER = 3
    ON_EPOCH_TICK_END = 5


class MethodsMiner:
    CONSTRUCTOR = METHOD_CONSTRUCTOR
    CONTROL_ADDRESSES = 2
    PRE_COMMIT_SECTOR = 6
    PROVE_COMMIT_SECTOR = 7
    APPLY_REWARDS = 14


class MethodsMultisig:
    CONSTRUCTOR = METHOD_CONSTRUCTOR
    PROPOSE = 2
    APPROVE = 3
