"""In-memory reference implementation of the ledger interface the engine drives.

It is deliberately small: no gas, no proof verification, no signatures. Actor
state lives in a content-addressed ``Store`` shared by all epoch handles.
"""

from actor_sim.ledger.address import Address
from actor_sim.ledger.builtin import ExitCode, RegisteredSealProof
from actor_sim.ledger.errors import ActorError, DecodeError, LedgerError, NotFoundError
from actor_sim.ledger.ledger import Ledger
from actor_sim.ledger.runtime import ActorRecord, Runtime
from actor_sim.ledger.stats import CallStats, MethodKey
from actor_sim.ledger.store import Store

__all__ = [
    "ActorError",
    "ActorRecord",
    "Address",
    "CallStats",
    "DecodeError",
    "ExitCode",
    "Ledger",
    "LedgerError",
    "MethodKey",
    "NotFoundError",
    "RegisteredSealProof",
    "Runtime",
    "Store",
]
