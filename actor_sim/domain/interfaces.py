"""Structural interfaces between the engine, its agents and the ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar

from actor_sim.ledger.address import Address
from actor_sim.ledger.builtin import ExitCode
from actor_sim.ledger.stats import CallStats, MethodKey
from actor_sim.ledger.store import Store

if TYPE_CHECKING:
    from actor_sim.domain.message import Message

T = TypeVar("T")


class LedgerState(Protocol):
    """Read-only view of the ledger handed to agents."""

    def get_epoch(self) -> int: ...

    def get_state(self, addr: Address, state_type: type[T]) -> T: ...

    def get_balance(self, addr: Address) -> int: ...

    def store(self) -> Store: ...


class LedgerHandle(LedgerState, Protocol):
    """Everything the engine needs from a ledger implementation."""

    def apply_message(
        self, from_addr: Address, to_addr: Address, value: int, method: int, params: object
    ) -> tuple[object, ExitCode]: ...

    def get_logs(self) -> list[str]: ...

    def get_call_stats(self) -> dict[MethodKey, CallStats]: ...

    def with_epoch(self, epoch: int) -> LedgerHandle: ...

    def create_accounts(self, count: int, balance: int, seed: int) -> list[Address]: ...


class Agent(Protocol):
    """A unit of autonomous behaviour.

    ``tick`` derives this epoch's messages from ledger state and the agent's
    own random stream. It must not mutate the ledger.
    """

    def tick(self, state: LedgerState) -> list[Message]: ...
