"""Builtin actors of the reference ledger, keyed by actor code."""

from collections.abc import Callable

from actor_sim.ledger.actors import (
    account,
    cron,
    init_actor,
    miner,
    multisig,
    power,
    reward,
    system,
)
from actor_sim.ledger.builtin import (
    ACCOUNT_ACTOR_CODE,
    CRON_ACTOR_CODE,
    INIT_ACTOR_CODE,
    MULTISIG_ACTOR_CODE,
    REWARD_ACTOR_CODE,
    STORAGE_MINER_ACTOR_CODE,
    STORAGE_POWER_ACTOR_CODE,
    SYSTEM_ACTOR_CODE,
)

ACTOR_EXPORTS: dict[str, dict[int, Callable]] = {
    SYSTEM_ACTOR_CODE: system.EXPORTS,
    INIT_ACTOR_CODE: init_actor.EXPORTS,
    ACCOUNT_ACTOR_CODE: account.EXPORTS,
    CRON_ACTOR_CODE: cron.EXPORTS,
    REWARD_ACTOR_CODE: reward.EXPORTS,
    STORAGE_POWER_ACTOR_CODE: power.EXPORTS,
    STORAGE_MINER_ACTOR_CODE: miner.EXPORTS,
    MULTISIG_ACTOR_CODE: multisig.EXPORTS,
}

__all__ = ["ACTOR_EXPORTS"]
