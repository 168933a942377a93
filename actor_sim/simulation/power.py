"""Power table construction from pre-tick ledger state."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from actor_sim.domain.interfaces import Agent, LedgerState
from actor_sim.domain.miner_agent import MinerAgent
from actor_sim.errors import StateReadError
from actor_sim.ledger.actors.power import PowerState
from actor_sim.ledger.actors.reward import RewardState
from actor_sim.ledger.address import Address
from actor_sim.ledger.builtin import REWARD_ACTOR_ADDR, STORAGE_POWER_ACTOR_ADDR
from actor_sim.ledger.errors import LedgerError


@dataclass(frozen=True)
class MinerPower:
    addr: Address
    qa_power: int


@dataclass(frozen=True)
class PowerTable:
    """Reward inputs for one epoch, in miner-agent order."""

    block_reward: int
    total_qa_power: int
    miner_power: tuple[MinerPower, ...] = ()


def compute_power_table(ledger: LedgerState, agents: Sequence[Agent]) -> PowerTable:
    """Collect the epoch reward, network power and every eligible miner's power.

    A miner is listed when it has a claim and its nominal power meets the
    consensus minimum. The network total counts only miners whose raw power
    has reached ``CONSENSUS_MINER_MIN_POWER``, so it stays zero (and no blocks
    are won) until at least one miner gets there. Any ledger lookup failure raises
    :exc:`~actor_sim.errors.StateReadError`.
    """
    try:
        reward_state = ledger.get_state(REWARD_ACTOR_ADDR, RewardState)
        power_state = ledger.get_state(STORAGE_POWER_ACTOR_ADDR, PowerState)
        store = ledger.store()

        miner_power: list[MinerPower] = []
        for agent in agents:
            if not isinstance(agent, MinerAgent):
                continue
            claim = power_state.get_claim(store, agent.id_address)
            if claim is None:
                continue
            if power_state.miner_nominal_power_meets_consensus_minimum(store, agent.id_address):
                miner_power.append(MinerPower(agent.id_address, claim.quality_adj_power))
    except LedgerError as exc:
        raise StateReadError(f"failed to build power table: {exc}") from exc

    return PowerTable(
        block_reward=reward_state.this_epoch_reward,
        total_qa_power=power_state.total_quality_adj_power,
        miner_power=tuple(miner_power),
    )
