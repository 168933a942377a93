"""Parameter and return values exchanged between builtin actors."""

from __future__ import annotations

from dataclasses import dataclass

from actor_sim.ledger.address import Address
from actor_sim.ledger.builtin import RegisteredSealProof


@dataclass(frozen=True)
class ExecParams:
    code: str
    constructor_params: object


@dataclass(frozen=True)
class ExecReturn:
    id_address: Address
    robust_address: Address


@dataclass(frozen=True)
class MinerConstructorParams:
    owner: Address
    worker: Address
    seal_proof_type: RegisteredSealProof


@dataclass(frozen=True)
class CreateMinerParams:
    owner: Address
    worker: Address
    seal_proof_type: RegisteredSealProof


@dataclass(frozen=True)
class CreateMinerReturn:
    id_address: Address
    robust_address: Address


@dataclass(frozen=True)
class UpdateClaimedPowerParams:
    raw_byte_delta: int
    quality_adj_delta: int


@dataclass(frozen=True)
class AwardBlockRewardParams:
    miner: Address
    penalty: int
    gas_reward: int
    win_count: int


@dataclass(frozen=True)
class ApplyRewardParams:
    reward: int
    penalty: int
