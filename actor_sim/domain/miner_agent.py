"""Storage-provider agent: pre-commits sectors at a Poisson rate and proves them."""

from __future__ import annotations

import logging
from collections import deque
from random import Random

from actor_sim.config.constants import PRE_COMMIT_CHALLENGE_DELAY, PRE_COMMIT_DEPOSIT
from actor_sim.config.types import MinerAgentConfig
from actor_sim.domain.arrivals import PoissonArrivals
from actor_sim.domain.interfaces import LedgerState
from actor_sim.domain.message import Message
from actor_sim.ledger.actors.miner import (
    MinerState,
    ProveCommitSectorParams,
    SectorPreCommitInfo,
)
from actor_sim.ledger.address import Address
from actor_sim.ledger.builtin import MethodsMiner

logger = logging.getLogger(__name__)

SECTOR_LIFETIME_EPOCHS = 540 * 2880
"""Expiration offset applied to every pre-committed sector (about 540 days)."""


class MinerAgent:
    """Drives one storage miner actor.

    Every tick it prove-commits the sectors whose challenge delay has elapsed,
    then pre-commits as many new sectors as its arrival clock schedules and its
    unlocked balance can cover.
    """

    def __init__(
        self,
        owner: Address,
        worker: Address,
        id_address: Address,
        robust_address: Address,
        rng: Random,
        config: MinerAgentConfig,
    ) -> None:
        self.owner = owner
        self.worker = worker
        self.id_address = id_address
        self.robust_address = robust_address
        self.config = config
        self._rng = rng
        self._precommits = PoissonArrivals(config.precommit_rate, rng)
        self._next_sector_number = 0
        # (ready epoch, sector number), ordered by ready epoch
        self._pending_proofs: deque[tuple[int, int]] = deque()

    def __repr__(self) -> str:
        return f"MinerAgent({self.id_address})"

    def tick(self, state: LedgerState) -> list[Message]:
        epoch = state.get_epoch()
        messages = self._prove_commits(epoch)

        n_precommits = self._precommits.events_in_epoch(epoch)
        if n_precommits == 0:
            return messages

        miner_state = state.get_state(self.id_address, MinerState)
        available = miner_state.available_balance(state.get_balance(self.id_address))
        for _ in range(n_precommits):
            if available < PRE_COMMIT_DEPOSIT:
                logger.debug("%s skipping pre-commit at epoch %d: funds exhausted", self, epoch)
                break
            available -= PRE_COMMIT_DEPOSIT
            messages.append(self._pre_commit(epoch))
        return messages

    def _prove_commits(self, epoch: int) -> list[Message]:
        messages: list[Message] = []
        while self._pending_proofs and self._pending_proofs[0][0] <= epoch:
            _, sector_number = self._pending_proofs.popleft()
            messages.append(
                Message(
                    from_addr=self.worker,
                    to_addr=self.id_address,
                    value=0,
                    method=MethodsMiner.PROVE_COMMIT_SECTOR,
                    params=ProveCommitSectorParams(sector_number=sector_number),
                )
            )
        return messages

    def _pre_commit(self, epoch: int) -> Message:
        sector_number = self._next_sector_number
        self._next_sector_number += 1
        self._pending_proofs.append((epoch + PRE_COMMIT_CHALLENGE_DELAY, sector_number))
        return Message(
            from_addr=self.worker,
            to_addr=self.id_address,
            value=0,
            method=MethodsMiner.PRE_COMMIT_SECTOR,
            params=SectorPreCommitInfo(
                seal_proof=self.config.proof_type,
                sector_number=sector_number,
                sealed_cid=f"sealed-{self._rng.getrandbits(128):032x}",
                seal_rand_epoch=epoch - 1,
                expiration=epoch + SECTOR_LIFETIME_EPOCHS,
            ),
        )
