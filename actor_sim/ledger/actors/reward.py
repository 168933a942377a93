"""Reward actor: pays block rewards and tracks the decaying per-epoch reward."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from actor_sim.config.constants import EXPECTED_LEADERS_PER_EPOCH, REWARD_DECAY_DIVISOR
from actor_sim.ledger.actors.params import ApplyRewardParams, AwardBlockRewardParams
from actor_sim.ledger.builtin import (
    BURNT_FUNDS_ACTOR_ADDR,
    METHOD_SEND,
    STORAGE_POWER_ACTOR_ADDR,
    SYSTEM_ACTOR_ADDR,
    ExitCode,
    MethodsMiner,
    MethodsReward,
)

if TYPE_CHECKING:
    from actor_sim.ledger.runtime import Runtime


@dataclass(frozen=True)
class RewardState:
    this_epoch_reward: int
    """Total reward for the epoch; each win pays 1/EXPECTED_LEADERS_PER_EPOCH of it."""
    total_mined: int = 0
    effective_network_power: int = 0


def award_block_reward(rt: Runtime, params: AwardBlockRewardParams) -> None:
    rt.validate_caller_is(SYSTEM_ACTOR_ADDR)
    if params.win_count <= 0:
        rt.abort(ExitCode.ERR_ILLEGAL_ARGUMENT, f"invalid win count {params.win_count}")
    if params.penalty < 0 or params.gas_reward < 0:
        rt.abort(ExitCode.ERR_ILLEGAL_ARGUMENT, "penalty and gas reward must be non-negative")

    miner = rt.resolve_address(params.miner)
    if miner is None:
        rt.abort(ExitCode.ERR_NOT_FOUND, f"failed to resolve miner {params.miner}")

    st = rt.state(RewardState)
    block_reward = st.this_epoch_reward * params.win_count // EXPECTED_LEADERS_PER_EPOCH
    total_reward = block_reward + params.gas_reward
    if total_reward > rt.current_balance():
        rt.abort(
            ExitCode.ERR_ILLEGAL_STATE,
            f"reward {total_reward} exceeds balance {rt.current_balance()}",
        )

    penalty = min(params.penalty, total_reward)
    payable = total_reward - penalty
    rt.set_state(replace(st, total_mined=st.total_mined + block_reward))

    rt.send(miner, MethodsMiner.APPLY_REWARDS, ApplyRewardParams(payable, penalty), payable)
    if penalty > 0:
        rt.send(BURNT_FUNDS_ACTOR_ADDR, METHOD_SEND, None, penalty)


def this_epoch_reward(rt: Runtime, params: object) -> int:
    return rt.state(RewardState).this_epoch_reward


def update_network_kpi(rt: Runtime, current_realized_power: int) -> None:
    rt.validate_caller_is(STORAGE_POWER_ACTOR_ADDR)
    st = rt.state(RewardState)
    rt.set_state(
        replace(
            st,
            this_epoch_reward=st.this_epoch_reward - st.this_epoch_reward // REWARD_DECAY_DIVISOR,
            effective_network_power=current_realized_power,
        )
    )


EXPORTS = {
    MethodsReward.AWARD_BLOCK_REWARD: award_block_reward,
    MethodsReward.THIS_EPOCH_REWARD: this_epoch_reward,
    MethodsReward.UPDATE_NETWORK_KPI: update_network_kpi,
}
