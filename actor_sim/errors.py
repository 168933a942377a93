"""Error taxonomy for the simulation engine.

Every error aborts the tick in progress. Nothing is retried: in a well-formed
simulation every submitted message succeeds, so a failure is a defect to
surface rather than a transient condition.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from actor_sim.domain.message import Message


class SimulationError(Exception):
    """Base class for all engine failures."""


class InitializationError(SimulationError):
    """Account or ledger bootstrap failed."""


class StateReadError(SimulationError):
    """Required actor state is missing or cannot be decoded."""


class AgentError(SimulationError):
    """An agent failed while producing its messages."""


class EpochAdvanceError(SimulationError):
    """The ledger refused to transition to the next epoch."""


class ExecutionError(SimulationError):
    """A submitted message returned a non-success exit code.

    Carries the exit code, the offending message and the ledger's accumulated
    diagnostic log so the failing actor call can be diagnosed without a re-run.
    """

    def __init__(
        self, code: int, message: Message, logs: Sequence[str], kind: str = "message"
    ) -> None:
        self.code = code
        self.message = message
        self.logs = tuple(logs)
        self.kind = kind
        super().__init__(
            f"exitcode {int(code)}: {kind} failed: {message}\n" + "\n".join(self.logs)
        )
