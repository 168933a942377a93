"""Account-holder agent: moves funds between accounts at a Poisson rate."""

from __future__ import annotations

from collections.abc import Sequence
from random import Random

from actor_sim.config.types import TransferAgentConfig
from actor_sim.domain.arrivals import PoissonArrivals
from actor_sim.domain.interfaces import LedgerState
from actor_sim.domain.message import Message
from actor_sim.ledger.address import Address
from actor_sim.ledger.builtin import METHOD_SEND


class TransferAgent:
    """Sends value from accounts it controls to a set of recipients.

    Balances are read once per tick and debited locally as transfers are
    scheduled, so a sender is never overdrawn by its own batch.
    """

    def __init__(
        self,
        senders: Sequence[Address],
        recipients: Sequence[Address],
        rng: Random,
        config: TransferAgentConfig | None = None,
    ) -> None:
        if not senders:
            raise ValueError("senders must not be empty")
        self.senders = tuple(senders)
        self.recipients = tuple(recipients)
        self.config = config or TransferAgentConfig()
        self._rng = rng
        self._transfers = PoissonArrivals(self.config.transfer_rate, rng)

    def __repr__(self) -> str:
        return f"TransferAgent(senders={len(self.senders)})"

    def tick(self, state: LedgerState) -> list[Message]:
        n_transfers = self._transfers.events_in_epoch(state.get_epoch())
        if n_transfers == 0:
            return []

        balances = {addr: state.get_balance(addr) for addr in self.senders}
        messages: list[Message] = []
        for _ in range(n_transfers):
            sender = self._rng.choice(self.senders)
            candidates = [addr for addr in self.recipients if addr != sender]
            if not candidates:
                continue
            recipient = self._rng.choice(candidates)
            max_amount = int(balances[sender] * self.config.max_transfer_fraction)
            if max_amount < 1:
                continue
            amount = self._rng.randint(1, max_amount)
            balances[sender] -= amount
            messages.append(
                Message(from_addr=sender, to_addr=recipient, value=amount, method=METHOD_SEND)
            )
        return messages
