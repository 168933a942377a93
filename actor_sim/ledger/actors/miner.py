"""Storage miner actor: sector pre-commit/prove-commit lifecycle and rewards.

Proofs are not verified. A sector gains power once its pre-commit has aged
PRE_COMMIT_CHALLENGE_DELAY epochs and the miner prove-commits it; the
pre-commit deposit then becomes the sector's initial pledge.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from actor_sim.config.constants import (
    PRE_COMMIT_CHALLENGE_DELAY,
    PRE_COMMIT_DEPOSIT,
    SECTOR_SIZE_32GIB,
    SECTOR_SIZE_64GIB,
)
from actor_sim.ledger.actors.params import (
    ApplyRewardParams,
    MinerConstructorParams,
    UpdateClaimedPowerParams,
)
from actor_sim.ledger.address import Address
from actor_sim.ledger.builtin import (
    INIT_ACTOR_ADDR,
    REWARD_ACTOR_ADDR,
    STORAGE_POWER_ACTOR_ADDR,
    ExitCode,
    MethodsMiner,
    MethodsPower,
    RegisteredSealProof,
)

if TYPE_CHECKING:
    from actor_sim.ledger.runtime import Runtime

SECTOR_SIZES: dict[RegisteredSealProof, int] = {
    RegisteredSealProof.STACKED_DRG_32GIB_V1_1: SECTOR_SIZE_32GIB,
    RegisteredSealProof.STACKED_DRG_64GIB_V1_1: SECTOR_SIZE_64GIB,
}


@dataclass(frozen=True)
class MinerInfo:
    owner: Address
    worker: Address
    seal_proof_type: RegisteredSealProof
    sector_size: int


@dataclass(frozen=True)
class SectorPreCommitInfo:
    seal_proof: RegisteredSealProof
    sector_number: int
    sealed_cid: str
    seal_rand_epoch: int
    expiration: int


@dataclass(frozen=True)
class SectorPreCommitOnChainInfo:
    info: SectorPreCommitInfo
    pre_commit_deposit: int
    pre_commit_epoch: int


@dataclass(frozen=True)
class SectorOnChainInfo:
    sector_number: int
    seal_proof: RegisteredSealProof
    sealed_cid: str
    activation_epoch: int
    expiration: int
    initial_pledge: int


@dataclass(frozen=True)
class ProveCommitSectorParams:
    sector_number: int
    proof: bytes = b""


@dataclass(frozen=True)
class ControlAddressesReturn:
    owner: Address
    worker: Address


@dataclass(frozen=True)
class MinerState:
    info: MinerInfo
    pre_committed_sectors: dict[int, SectorPreCommitOnChainInfo] = field(default_factory=dict)
    sectors: dict[int, SectorOnChainInfo] = field(default_factory=dict)
    pre_commit_deposits: int = 0
    initial_pledge: int = 0
    total_rewards: int = 0

    def available_balance(self, actor_balance: int) -> int:
        """Balance not locked as pre-commit deposits or initial pledge."""
        return actor_balance - self.pre_commit_deposits - self.initial_pledge

    def has_sector_number(self, sector_number: int) -> bool:
        return sector_number in self.pre_committed_sectors or sector_number in self.sectors


def _validate_control_caller(rt: Runtime, st: MinerState) -> None:
    rt.validate_caller_is(st.info.worker, st.info.owner)


def constructor(rt: Runtime, params: MinerConstructorParams) -> None:
    rt.validate_caller_is(INIT_ACTOR_ADDR)
    owner = rt.resolve_address(params.owner)
    worker = rt.resolve_address(params.worker)
    if owner is None or worker is None:
        rt.abort(ExitCode.ERR_ILLEGAL_ARGUMENT, "owner and worker must exist")
    sector_size = SECTOR_SIZES.get(params.seal_proof_type)
    if sector_size is None:
        rt.abort(ExitCode.ERR_ILLEGAL_ARGUMENT, f"unsupported seal proof {params.seal_proof_type}")
    info = MinerInfo(
        owner=owner,
        worker=worker,
        seal_proof_type=params.seal_proof_type,
        sector_size=sector_size,
    )
    rt.set_state(MinerState(info=info))


def control_addresses(rt: Runtime, params: object) -> ControlAddressesReturn:
    info = rt.state(MinerState).info
    return ControlAddressesReturn(owner=info.owner, worker=info.worker)


def pre_commit_sector(rt: Runtime, params: SectorPreCommitInfo) -> None:
    st = rt.state(MinerState)
    _validate_control_caller(rt, st)
    if params.seal_proof != st.info.seal_proof_type:
        rt.abort(ExitCode.ERR_ILLEGAL_ARGUMENT, f"seal proof {params.seal_proof} not allowed")
    if st.has_sector_number(params.sector_number):
        rt.abort(ExitCode.ERR_ILLEGAL_ARGUMENT, f"sector {params.sector_number} already used")
    if params.expiration <= rt.epoch:
        rt.abort(ExitCode.ERR_ILLEGAL_ARGUMENT, f"expiration {params.expiration} already passed")
    available = st.available_balance(rt.current_balance())
    if available < PRE_COMMIT_DEPOSIT:
        rt.abort(
            ExitCode.ERR_INSUFFICIENT_FUNDS,
            f"insufficient funds for pre-commit deposit: {available} < {PRE_COMMIT_DEPOSIT}",
        )

    pre_committed = dict(st.pre_committed_sectors)
    pre_committed[params.sector_number] = SectorPreCommitOnChainInfo(
        info=params,
        pre_commit_deposit=PRE_COMMIT_DEPOSIT,
        pre_commit_epoch=rt.epoch,
    )
    rt.set_state(
        replace(
            st,
            pre_committed_sectors=pre_committed,
            pre_commit_deposits=st.pre_commit_deposits + PRE_COMMIT_DEPOSIT,
        )
    )


def prove_commit_sector(rt: Runtime, params: ProveCommitSectorParams) -> None:
    st = rt.state(MinerState)
    _validate_control_caller(rt, st)
    pre_commit = st.pre_committed_sectors.get(params.sector_number)
    if pre_commit is None:
        rt.abort(ExitCode.ERR_NOT_FOUND, f"no pre-commit for sector {params.sector_number}")
    ready_at = pre_commit.pre_commit_epoch + PRE_COMMIT_CHALLENGE_DELAY
    if rt.epoch < ready_at:
        rt.abort(
            ExitCode.ERR_FORBIDDEN,
            f"sector {params.sector_number} cannot be proven before epoch {ready_at}",
        )

    pre_committed = dict(st.pre_committed_sectors)
    del pre_committed[params.sector_number]
    sectors = dict(st.sectors)
    sectors[params.sector_number] = SectorOnChainInfo(
        sector_number=params.sector_number,
        seal_proof=pre_commit.info.seal_proof,
        sealed_cid=pre_commit.info.sealed_cid,
        activation_epoch=rt.epoch,
        expiration=pre_commit.info.expiration,
        initial_pledge=pre_commit.pre_commit_deposit,
    )
    rt.set_state(
        replace(
            st,
            pre_committed_sectors=pre_committed,
            sectors=sectors,
            pre_commit_deposits=st.pre_commit_deposits - pre_commit.pre_commit_deposit,
            initial_pledge=st.initial_pledge + pre_commit.pre_commit_deposit,
        )
    )

    sector_size = st.info.sector_size
    rt.send(
        STORAGE_POWER_ACTOR_ADDR,
        MethodsPower.UPDATE_CLAIMED_POWER,
        UpdateClaimedPowerParams(raw_byte_delta=sector_size, quality_adj_delta=sector_size),
    )


def apply_rewards(rt: Runtime, params: ApplyRewardParams) -> None:
    rt.validate_caller_is(REWARD_ACTOR_ADDR)
    st = rt.state(MinerState)
    rt.set_state(replace(st, total_rewards=st.total_rewards + params.reward))


EXPORTS = {
    MethodsMiner.CONSTRUCTOR: constructor,
    MethodsMiner.CONTROL_ADDRESSES: control_addresses,
    MethodsMiner.PRE_COMMIT_SECTOR: pre_commit_sector,
    MethodsMiner.PROVE_COMMIT_SECTOR: prove_commit_sector,
    MethodsMiner.APPLY_REWARDS: apply_rewards,
}
