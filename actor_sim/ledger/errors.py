"""Ledger-level failures.

``LedgerError`` subclasses escape the ledger to its callers. ``ActorError`` is
raised inside actor code and is always converted into an exit code by the
ledger; it never reaches callers of ``apply_message``.
"""

from __future__ import annotations

from actor_sim.ledger.builtin import ExitCode


class LedgerError(Exception):
    """Base class for failures reported by the ledger interface."""


class NotFoundError(LedgerError):
    """Requested actor or content-addressed object does not exist."""


class DecodeError(LedgerError):
    """Stored state does not have the requested type."""


class ActorError(Exception):
    """Abort of an actor method with a non-success exit code."""

    def __init__(self, code: ExitCode, msg: str) -> None:
        self.code = code
        super().__init__(f"{code.name}({int(code)}): {msg}")
