"""Simulation engine: drives agents through epochs against a ledger handle."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field, replace

from actor_sim.config.types import SimConfig
from actor_sim.domain.interfaces import Agent, LedgerHandle, LedgerState
from actor_sim.domain.message import Message
from actor_sim.domain.miner_agent import MinerAgent
from actor_sim.errors import (
    AgentError,
    EpochAdvanceError,
    ExecutionError,
    InitializationError,
    SimulationError,
)
from actor_sim.ledger import Ledger
from actor_sim.ledger.actors.params import (
    AwardBlockRewardParams,
    CreateMinerParams,
    CreateMinerReturn,
)
from actor_sim.ledger.address import Address
from actor_sim.ledger.builtin import (
    CRON_ACTOR_ADDR,
    REWARD_ACTOR_ADDR,
    STORAGE_POWER_ACTOR_ADDR,
    SYSTEM_ACTOR_ADDR,
    ExitCode,
    MethodsCron,
    MethodsPower,
    MethodsReward,
)
from actor_sim.ledger.errors import LedgerError
from actor_sim.ledger.stats import CallStats, MethodKey
from actor_sim.simulation.power import PowerTable, compute_power_table
from actor_sim.simulation.wincount import win_count

logger = logging.getLogger(__name__)

LedgerFactory = Callable[[], LedgerHandle]


@dataclass(frozen=True)
class TickReport:
    """What happened during one call to :meth:`Sim.tick`."""

    epoch: int
    power_table: PowerTable
    applied: tuple[Message, ...] = ()
    rewards: dict[Address, int] = field(default_factory=dict)
    """Miner ID address to wins, for miners that won at least one block."""
    miner_created: Address | None = None

    @property
    def messages_applied(self) -> int:
        return len(self.applied)


class Sim:
    """Owns the run state: config, accounts, agents, ledger handle and RNG.

    Every random decision the engine makes (miner creation, batch order and
    win counts) is drawn from one generator seeded from ``config.seed``, so two
    engines built from equal configs and fed equal agents tick identically.
    """

    def __init__(
        self,
        config: SimConfig,
        ledger_factory: LedgerFactory = Ledger.with_singletons,
    ) -> None:
        self.config = config
        self.agents: list[Agent] = []
        self._accounts_used = 0
        self._call_stats: dict[MethodKey, CallStats] = {}
        self.last_tick: TickReport | None = None

        try:
            self._ledger: LedgerHandle = ledger_factory()
            self.accounts: list[Address] = self._ledger.create_accounts(
                config.account_count, config.account_initial_balance, config.seed
            )
        except LedgerError as exc:
            raise InitializationError(f"failed to create accounts: {exc}") from exc
        self._rng = random.Random(config.seed)

    def get_ledger(self) -> LedgerState:
        return self._ledger

    def get_call_stats(self) -> dict[MethodKey, CallStats]:
        """Call statistics of the most recent tick."""
        return self._call_stats

    def add_agent(self, agent: Agent) -> None:
        self.agents.append(agent)

    def fund_accounts(self, count: int, balance: int, seed: int) -> list[Address]:
        """Create and fund extra accounts that are never promoted to miners."""
        try:
            return self._ledger.create_accounts(count, balance, seed)
        except LedgerError as exc:
            raise InitializationError(f"failed to fund accounts: {exc}") from exc

    # -- tick -------------------------------------------------------------------

    def tick(self) -> TickReport:
        ledger = self._ledger
        epoch = ledger.get_epoch()

        power_table = compute_power_table(ledger, self.agents)

        messages: list[Message] = []
        for agent in list(self.agents):
            try:
                messages.extend(agent.tick(ledger))
            except SimulationError:
                raise
            except Exception as exc:
                raise AgentError(f"agent {agent!r} failed at epoch {epoch}: {exc}") from exc

        created: list[Address] = []
        if len(self.agents) < len(self.accounts) and self._accounts_used < len(self.accounts):
            if self._rng.random() < self.config.create_miner_probability:
                messages.append(self._create_miner_message(created))

        self._rng.shuffle(messages)

        for msg in messages:
            self._apply(msg, kind="message")

        rewards = self._award_block_rewards(power_table)

        self._apply(
            Message(
                from_addr=SYSTEM_ACTOR_ADDR,
                to_addr=CRON_ACTOR_ADDR,
                value=0,
                method=MethodsCron.EPOCH_TICK,
            ),
            kind="cron message",
        )

        self._call_stats = ledger.get_call_stats()

        try:
            self._ledger = ledger.with_epoch(epoch + 1)
        except LedgerError as exc:
            raise EpochAdvanceError(f"failed to advance to epoch {epoch + 1}: {exc}") from exc

        self.last_tick = TickReport(
            epoch=epoch,
            power_table=power_table,
            applied=tuple(messages),
            rewards=rewards,
            miner_created=created[0] if created else None,
        )
        logger.debug(
            "epoch %d: applied %d messages, %d winners",
            epoch,
            len(messages),
            len(rewards),
        )
        return self.last_tick

    def _apply(self, msg: Message, kind: str) -> object:
        ret, code = self._ledger.apply_message(
            msg.from_addr, msg.to_addr, msg.value, msg.method, msg.params
        )
        if code != ExitCode.OK:
            raise ExecutionError(code, msg, self._ledger.get_logs(), kind=kind)
        if msg.return_handler is not None:
            msg.return_handler(self._ledger, msg, ret)
        return ret

    def _award_block_rewards(self, power_table: PowerTable) -> dict[Address, int]:
        rewards: dict[Address, int] = {}
        if power_table.total_qa_power <= 0:
            return rewards
        for entry in power_table.miner_power:
            wins = win_count(entry.qa_power, power_table.total_qa_power, self._rng)
            if wins < 1:
                continue
            self._apply(
                Message(
                    from_addr=SYSTEM_ACTOR_ADDR,
                    to_addr=REWARD_ACTOR_ADDR,
                    value=0,
                    method=MethodsReward.AWARD_BLOCK_REWARD,
                    params=AwardBlockRewardParams(
                        miner=entry.addr, penalty=0, gas_reward=0, win_count=wins
                    ),
                ),
                kind="reward message",
            )
            rewards[entry.addr] = wins
        return rewards

    # -- miner creation -----------------------------------------------------------

    def _create_miner_message(self, created: list[Address]) -> Message:
        # the cursor only moves once the miner exists, so an aborted tick
        # retries the same account
        account = self.accounts[self._accounts_used]
        miner_config = replace(
            self.config.miner_config, starting_balance=self.config.account_initial_balance
        )

        def on_created(state: LedgerState, msg: Message, ret: object) -> None:
            if not isinstance(ret, CreateMinerReturn):
                raise ExecutionError(
                    ExitCode.ERR_SERIALIZATION,
                    msg,
                    [f"create miner returned {type(ret).__name__}, expected CreateMinerReturn"],
                )
            agent = MinerAgent(
                owner=account,
                worker=account,
                id_address=ret.id_address,
                robust_address=ret.robust_address,
                rng=random.Random(self._rng.getrandbits(64)),
                config=miner_config,
            )
            self.agents.append(agent)
            self._accounts_used += 1
            created.append(ret.id_address)
            logger.info(
                "epoch %d: account %s became miner %s", state.get_epoch(), account, ret.id_address
            )

        return Message(
            from_addr=account,
            to_addr=STORAGE_POWER_ACTOR_ADDR,
            value=self.config.account_initial_balance,
            method=MethodsPower.CREATE_MINER,
            params=CreateMinerParams(
                owner=account,
                worker=account,
                seal_proof_type=miner_config.proof_type,
            ),
            return_handler=on_created,
        )
