"""Domain layer: messages, agent protocol and agent variants."""

from actor_sim.domain.arrivals import PoissonArrivals
from actor_sim.domain.interfaces import Agent, LedgerHandle, LedgerState
from actor_sim.domain.message import Message, ReturnHandler
from actor_sim.domain.miner_agent import MinerAgent
from actor_sim.domain.transfer_agent import TransferAgent

__all__ = [
    "Agent",
    "LedgerHandle",
    "LedgerState",
    "Message",
    "MinerAgent",
    "PoissonArrivals",
    "ReturnHandler",
    "TransferAgent",
]
