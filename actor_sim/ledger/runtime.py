"""Message execution: the per-message transaction and the runtime handed to actors.

A ``Transaction`` works on a private copy of the actor table. The ledger only
adopts that copy when the top-level message succeeds, so a failing message
(including any nested sends it made) leaves no trace in state.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import NoReturn, TypeVar

from actor_sim.ledger.actors import ACTOR_EXPORTS
from actor_sim.ledger.actors.account import AccountState
from actor_sim.ledger.actors.init_actor import InitState
from actor_sim.ledger.address import Address, is_id_address, is_pubkey_address
from actor_sim.ledger.builtin import (
    ACCOUNT_ACTOR_CODE,
    INIT_ACTOR_ADDR,
    METHOD_SEND,
    ExitCode,
)
from actor_sim.ledger.errors import ActorError
from actor_sim.ledger.stats import CallStats, MethodKey
from actor_sim.ledger.store import Store

T = TypeVar("T")

MAX_CALL_DEPTH = 64
"""Nested sends deeper than this abort the message."""


@dataclass(frozen=True)
class ActorRecord:
    """One entry of the state tree: code, state head and balance."""

    code: str
    head: str | None
    balance: int


class Transaction:
    """Applies one top-level message against a copy of the actor table."""

    def __init__(
        self,
        actors: dict[Address, ActorRecord],
        store: Store,
        epoch: int,
        stats: dict[MethodKey, CallStats],
        logs: list[str],
    ) -> None:
        self.actors = dict(actors)
        self.store = store
        self.epoch = epoch
        self._stats = stats
        self._logs = logs

    # -- address resolution -------------------------------------------------

    def resolve(self, addr: Address) -> Address | None:
        """Return the ID address for *addr*, or None if no such actor exists."""
        if is_id_address(addr):
            return addr if addr in self.actors else None
        init_state = self.read_state(INIT_ACTOR_ADDR, InitState)
        return init_state.resolve_address(addr)

    def _create_account(self, pubkey: Address) -> Address:
        init_state = self.read_state(INIT_ACTOR_ADDR, InitState)
        init_state, id_address = init_state.map_address(pubkey)
        self.write_state(INIT_ACTOR_ADDR, init_state)
        self.actors[id_address] = ActorRecord(
            code=ACCOUNT_ACTOR_CODE,
            head=self.store.put(AccountState(address=pubkey)),
            balance=0,
        )
        return id_address

    # -- state access ---------------------------------------------------------

    def read_state(self, addr: Address, state_type: type[T]) -> T:
        record = self.actors.get(addr)
        if record is None or record.head is None:
            raise ActorError(ExitCode.ERR_ILLEGAL_STATE, f"actor {addr} has no state")
        state = self.store.get(record.head)
        if not isinstance(state, state_type):
            raise ActorError(
                ExitCode.ERR_SERIALIZATION,
                f"actor {addr} state is {type(state).__name__}, expected {state_type.__name__}",
            )
        return state

    def write_state(self, addr: Address, state: object) -> str:
        cid = self.store.put(state)
        self.actors[addr] = replace(self.actors[addr], head=cid)
        return cid

    def stats_for(self, key: MethodKey) -> CallStats:
        stats = self._stats.get(key)
        if stats is None:
            stats = self._stats[key] = CallStats()
        return stats

    def log(self, line: str) -> None:
        self._logs.append(line)

    # -- execution --------------------------------------------------------------

    def _transfer(self, from_id: Address, to_id: Address, value: int) -> None:
        if value < 0:
            raise ActorError(ExitCode.SYS_ERR_ILLEGAL_ARGUMENT, f"negative value {value}")
        if value == 0 or from_id == to_id:
            return
        sender = self.actors[from_id]
        if sender.balance < value:
            raise ActorError(
                ExitCode.SYS_ERR_INSUFFICIENT_FUNDS,
                f"{from_id} balance {sender.balance} < {value}",
            )
        self.actors[from_id] = replace(sender, balance=sender.balance - value)
        receiver = self.actors[to_id]
        self.actors[to_id] = replace(receiver, balance=receiver.balance + value)

    def send(
        self,
        from_addr: Address,
        to_addr: Address,
        value: int,
        method: int,
        params: object,
        depth: int = 0,
    ) -> object:
        if depth > MAX_CALL_DEPTH:
            raise ActorError(ExitCode.SYS_ERR_FORBIDDEN, "maximum call depth exceeded")
        from_id = self.resolve(from_addr)
        if from_id is None:
            raise ActorError(ExitCode.SYS_ERR_SENDER_INVALID, f"sender {from_addr} not found")
        to_id = self.resolve(to_addr)
        if to_id is None:
            if not is_pubkey_address(to_addr):
                raise ActorError(
                    ExitCode.SYS_ERR_INVALID_RECEIVER, f"receiver {to_addr} not found"
                )
            to_id = self._create_account(to_addr)

        self._transfer(from_id, to_id, value)

        code = self.actors[to_id].code
        key = MethodKey(code=code, method=method)
        self.stats_for(key).calls += 1
        if method == METHOD_SEND:
            return None

        handler = ACTOR_EXPORTS.get(code, {}).get(method)
        if handler is None:
            raise ActorError(
                ExitCode.SYS_ERR_INVALID_METHOD, f"actor {to_id} ({code}) has no method {method}"
            )
        rt = Runtime(
            tx=self,
            receiver=to_id,
            caller=from_id,
            value_received=value,
            key=key,
            depth=depth,
        )
        return handler(rt, params)


class Runtime:
    """The actor's view of the ledger while one of its methods executes."""

    def __init__(
        self,
        tx: Transaction,
        receiver: Address,
        caller: Address,
        value_received: int,
        key: MethodKey,
        depth: int,
    ) -> None:
        self._tx = tx
        self.receiver = receiver
        self.caller = caller
        self.value_received = value_received
        self._key = key
        self._depth = depth

    @property
    def epoch(self) -> int:
        return self._tx.epoch

    @property
    def store(self) -> Store:
        return self._tx.store

    def abort(self, code: ExitCode, msg: str) -> NoReturn:
        raise ActorError(code, msg)

    def log(self, msg: str) -> None:
        self._tx.log(f"epoch {self.epoch} [{self.receiver}] {msg}")

    def current_balance(self) -> int:
        return self._tx.actors[self.receiver].balance

    def caller_code(self) -> str:
        return self._tx.actors[self.caller].code

    def validate_caller_is(self, *addrs: Address) -> None:
        if self.caller not in addrs:
            self.abort(ExitCode.SYS_ERR_FORBIDDEN, f"caller {self.caller} not permitted")

    def validate_caller_type(self, *codes: str) -> None:
        if self.caller_code() not in codes:
            self.abort(
                ExitCode.SYS_ERR_FORBIDDEN,
                f"caller {self.caller} of type {self.caller_code()} not permitted",
            )

    def resolve_address(self, addr: Address) -> Address | None:
        return self._tx.resolve(addr)

    def state(self, state_type: type[T]) -> T:
        state = self._tx.read_state(self.receiver, state_type)
        head = self._tx.actors[self.receiver].head
        stats = self._tx.stats_for(self._key)
        stats.reads += 1
        stats.read_bytes += self.store.size(head)  # type: ignore[arg-type]
        return state

    def set_state(self, state: object) -> None:
        cid = self._tx.write_state(self.receiver, state)
        stats = self._tx.stats_for(self._key)
        stats.writes += 1
        stats.write_bytes += self.store.size(cid)

    def create_actor(self, code: str, addr: Address) -> None:
        if addr in self._tx.actors:
            self.abort(ExitCode.SYS_ERR_ILLEGAL_ARGUMENT, f"actor {addr} already exists")
        if code not in ACTOR_EXPORTS:
            self.abort(ExitCode.SYS_ERR_ILLEGAL_ARGUMENT, f"unknown actor code {code}")
        self._tx.actors[addr] = ActorRecord(code=code, head=None, balance=0)

    def send(self, to: Address, method: int, params: object = None, value: int = 0) -> object:
        return self._tx.send(self.receiver, to, value, method, params, depth=self._depth + 1)


