"""Cron actor: fans the end-of-epoch tick out to registered actors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from actor_sim.ledger.address import Address
from actor_sim.ledger.builtin import SYSTEM_ACTOR_ADDR, MethodsCron

if TYPE_CHECKING:
    from actor_sim.ledger.runtime import Runtime


@dataclass(frozen=True)
class CronEntry:
    receiver: Address
    method_num: int


@dataclass(frozen=True)
class CronState:
    entries: tuple[CronEntry, ...]


def epoch_tick(rt: Runtime, params: object) -> None:
    rt.validate_caller_is(SYSTEM_ACTOR_ADDR)
    for entry in rt.state(CronState).entries:
        rt.send(entry.receiver, entry.method_num)


EXPORTS = {
    MethodsCron.EPOCH_TICK: epoch_tick,
}
