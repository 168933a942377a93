"""In-memory reference ledger: one handle per epoch over a shared object store."""

from __future__ import annotations

import logging
import random
from typing import TypeVar

from actor_sim.config.constants import (
    FIRST_NON_SINGLETON_ID,
    INITIAL_EPOCH_REWARD,
    REWARD_ACTOR_GENESIS_BALANCE,
)
from actor_sim.ledger.actors.account import AccountState
from actor_sim.ledger.actors.cron import CronEntry, CronState
from actor_sim.ledger.actors.init_actor import InitState
from actor_sim.ledger.actors.power import PowerState
from actor_sim.ledger.actors.reward import RewardState
from actor_sim.ledger.actors.system import SystemState
from actor_sim.ledger.address import Address, new_pubkey_address
from actor_sim.ledger.builtin import (
    ACCOUNT_ACTOR_CODE,
    BURNT_FUNDS_ACTOR_ADDR,
    CRON_ACTOR_ADDR,
    CRON_ACTOR_CODE,
    INIT_ACTOR_ADDR,
    INIT_ACTOR_CODE,
    METHOD_SEND,
    REWARD_ACTOR_ADDR,
    REWARD_ACTOR_CODE,
    STORAGE_POWER_ACTOR_ADDR,
    STORAGE_POWER_ACTOR_CODE,
    SYSTEM_ACTOR_ADDR,
    SYSTEM_ACTOR_CODE,
    ExitCode,
    MethodsPower,
)
from actor_sim.ledger.errors import ActorError, DecodeError, LedgerError, NotFoundError
from actor_sim.ledger.runtime import ActorRecord, Transaction
from actor_sim.ledger.stats import CallStats, MethodKey
from actor_sim.ledger.store import Store

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Ledger:
    """State tree for a single epoch.

    Messages applied to a handle mutate only that handle. ``with_epoch``
    returns a fresh handle over a copy of the committed state, with empty logs
    and call statistics; older handles stay readable.
    """

    def __init__(
        self,
        store: Store,
        actors: dict[Address, ActorRecord],
        epoch: int,
    ) -> None:
        self._store = store
        self._actors = dict(actors)
        self._epoch = epoch
        self._logs: list[str] = []
        self._stats: dict[MethodKey, CallStats] = {}

    @classmethod
    def with_singletons(
        cls, store: Store | None = None, network_name: str = "actor-sim"
    ) -> Ledger:
        """Genesis ledger holding the system, init, reward, cron, power and burnt-funds actors."""
        store = store if store is not None else Store()
        actors: dict[Address, ActorRecord] = {}

        def install(addr: Address, code: str, state: object, balance: int = 0) -> None:
            actors[addr] = ActorRecord(code=code, head=store.put(state), balance=balance)

        install(SYSTEM_ACTOR_ADDR, SYSTEM_ACTOR_CODE, SystemState())
        install(
            INIT_ACTOR_ADDR,
            INIT_ACTOR_CODE,
            InitState(address_map={}, next_id=FIRST_NON_SINGLETON_ID, network_name=network_name),
        )
        install(
            REWARD_ACTOR_ADDR,
            REWARD_ACTOR_CODE,
            RewardState(this_epoch_reward=INITIAL_EPOCH_REWARD),
            balance=REWARD_ACTOR_GENESIS_BALANCE,
        )
        install(
            CRON_ACTOR_ADDR,
            CRON_ACTOR_CODE,
            CronState(
                entries=(CronEntry(STORAGE_POWER_ACTOR_ADDR, MethodsPower.ON_EPOCH_TICK_END),)
            ),
        )
        install(STORAGE_POWER_ACTOR_ADDR, STORAGE_POWER_ACTOR_CODE, PowerState.empty(store))
        install(
            BURNT_FUNDS_ACTOR_ADDR, ACCOUNT_ACTOR_CODE, AccountState(address=BURNT_FUNDS_ACTOR_ADDR)
        )
        return cls(store=store, actors=actors, epoch=0)

    # -- read access ----------------------------------------------------------

    def get_epoch(self) -> int:
        return self._epoch

    def store(self) -> Store:
        return self._store

    def normalize_address(self, addr: Address) -> Address | None:
        """Resolve any address form to its ID address, or None if unknown."""
        try:
            return self._transaction().resolve(addr)
        except ActorError as exc:
            raise DecodeError(f"cannot resolve {addr}: {exc}") from exc

    def get_actor(self, addr: Address) -> ActorRecord:
        id_addr = self.normalize_address(addr)
        if id_addr is None:
            raise NotFoundError(f"actor {addr} not found")
        return self._actors[id_addr]

    def get_balance(self, addr: Address) -> int:
        return self.get_actor(addr).balance

    def get_state(self, addr: Address, state_type: type[T]) -> T:
        record = self.get_actor(addr)
        if record.head is None:
            raise NotFoundError(f"actor {addr} has no state")
        state = self._store.get(record.head)
        if not isinstance(state, state_type):
            raise DecodeError(
                f"actor {addr} state is {type(state).__name__}, expected {state_type.__name__}"
            )
        return state

    def get_logs(self) -> list[str]:
        return list(self._logs)

    def get_call_stats(self) -> dict[MethodKey, CallStats]:
        return {
            key: CallStats(
                calls=stats.calls,
                reads=stats.reads,
                writes=stats.writes,
                read_bytes=stats.read_bytes,
                write_bytes=stats.write_bytes,
            )
            for key, stats in self._stats.items()
        }

    # -- state transitions ------------------------------------------------------

    def _transaction(self) -> Transaction:
        return Transaction(
            actors=self._actors,
            store=self._store,
            epoch=self._epoch,
            stats=self._stats,
            logs=self._logs,
        )

    def apply_message(
        self,
        from_addr: Address,
        to_addr: Address,
        value: int,
        method: int,
        params: object,
    ) -> tuple[object, ExitCode]:
        """Apply one message; state changes are kept only when the exit code is OK."""
        tx = self._transaction()
        try:
            ret = tx.send(from_addr, to_addr, value, method, params)
        except ActorError as exc:
            line = f"epoch {self._epoch}: {from_addr} -> {to_addr} method {method} aborted: {exc}"
            self._logs.append(line)
            logger.debug(line)
            return None, exc.code
        self._actors = tx.actors
        return ret, ExitCode.OK

    def with_epoch(self, epoch: int) -> Ledger:
        if epoch <= self._epoch:
            raise LedgerError(f"cannot move from epoch {self._epoch} to epoch {epoch}")
        return Ledger(store=self._store, actors=self._actors, epoch=epoch)

    def create_accounts(self, count: int, balance: int, seed: int) -> list[Address]:
        """Create *count* accounts funded from the reward actor; returns their ID addresses."""
        rng = random.Random(seed)
        addresses: list[Address] = []
        for _ in range(count):
            pubkey = new_pubkey_address(rng.getrandbits(256).to_bytes(32, "big"))
            _, code = self.apply_message(REWARD_ACTOR_ADDR, pubkey, balance, METHOD_SEND, None)
            if code != ExitCode.OK:
                raise LedgerError(
                    f"exitcode {int(code)}: funding account {pubkey} failed\n"
                    + "\n".join(self._logs)
                )
            id_addr = self.normalize_address(pubkey)
            if id_addr is None:
                raise LedgerError(f"account {pubkey} missing after funding")
            addresses.append(id_addr)
        return addresses
