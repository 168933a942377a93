"""Pending messages produced during a tick."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from actor_sim.ledger.address import Address

if TYPE_CHECKING:
    from actor_sim.domain.interfaces import LedgerState

ReturnHandler = Callable[["LedgerState", "Message", object], None]
"""Called with (ledger, message, return value) after the message succeeds."""


@dataclass(frozen=True)
class Message:
    """One state-transition request, applied exactly once by the engine.

    The return handler is excluded from equality and repr so two runs that
    produce the same requests compare equal.
    """

    from_addr: Address
    to_addr: Address
    value: int
    method: int
    params: object = None
    return_handler: ReturnHandler | None = field(default=None, compare=False, repr=False)
