"""Tests for the storage miner actor's sector lifecycle."""

from __future__ import annotations

from actor_sim.config.constants import (
    PRE_COMMIT_CHALLENGE_DELAY,
    PRE_COMMIT_DEPOSIT,
    SECTOR_SIZE_32GIB,
)
from actor_sim.ledger import ExitCode, Ledger
from actor_sim.ledger.actors.miner import (
    ControlAddressesReturn,
    MinerState,
    ProveCommitSectorParams,
    SectorPreCommitInfo,
)
from actor_sim.ledger.actors.params import CreateMinerParams, CreateMinerReturn
from actor_sim.ledger.actors.power import PowerState
from actor_sim.ledger.builtin import (
    STORAGE_POWER_ACTOR_ADDR,
    MethodsMiner,
    MethodsPower,
    RegisteredSealProof,
)

PROOF = RegisteredSealProof.STACKED_DRG_32GIB_V1_1


def _setup(balance: int = 1_000) -> tuple[Ledger, str, str]:
    ledger = Ledger.with_singletons()
    [owner] = ledger.create_accounts(1, balance, seed=0)
    ret, code = ledger.apply_message(
        owner,
        STORAGE_POWER_ACTOR_ADDR,
        balance,
        MethodsPower.CREATE_MINER,
        CreateMinerParams(owner=owner, worker=owner, seal_proof_type=PROOF),
    )
    assert code == ExitCode.OK
    assert isinstance(ret, CreateMinerReturn)
    return ledger, owner, ret.id_address


def _pre_commit(ledger: Ledger, worker: str, miner: str, sector: int, proof=PROOF) -> ExitCode:
    epoch = ledger.get_epoch()
    _, code = ledger.apply_message(
        worker,
        miner,
        0,
        MethodsMiner.PRE_COMMIT_SECTOR,
        SectorPreCommitInfo(
            seal_proof=proof,
            sector_number=sector,
            sealed_cid=f"sealed-{sector}",
            seal_rand_epoch=epoch - 1,
            expiration=epoch + 1_000,
        ),
    )
    return code


def _prove(ledger: Ledger, worker: str, miner: str, sector: int) -> ExitCode:
    _, code = ledger.apply_message(
        worker,
        miner,
        0,
        MethodsMiner.PROVE_COMMIT_SECTOR,
        ProveCommitSectorParams(sector_number=sector),
    )
    return code


class TestControlAddresses:
    def test_returns_owner_and_worker(self) -> None:
        ledger, owner, miner = _setup()
        ret, code = ledger.apply_message(owner, miner, 0, MethodsMiner.CONTROL_ADDRESSES, None)
        assert code == ExitCode.OK
        assert ret == ControlAddressesReturn(owner=owner, worker=owner)


class TestPreCommit:
    def test_locks_deposit(self) -> None:
        ledger, owner, miner = _setup()
        assert _pre_commit(ledger, owner, miner, 0) == ExitCode.OK
        st = ledger.get_state(miner, MinerState)
        assert st.pre_commit_deposits == PRE_COMMIT_DEPOSIT
        assert st.available_balance(ledger.get_balance(miner)) == 1_000 - PRE_COMMIT_DEPOSIT

    def test_duplicate_sector_number_rejected(self) -> None:
        ledger, owner, miner = _setup()
        assert _pre_commit(ledger, owner, miner, 0) == ExitCode.OK
        assert _pre_commit(ledger, owner, miner, 0) == ExitCode.ERR_ILLEGAL_ARGUMENT

    def test_wrong_proof_type_rejected(self) -> None:
        ledger, owner, miner = _setup()
        code = _pre_commit(
            ledger, owner, miner, 0, proof=RegisteredSealProof.STACKED_DRG_64GIB_V1_1
        )
        assert code == ExitCode.ERR_ILLEGAL_ARGUMENT

    def test_insufficient_balance_rejected(self) -> None:
        ledger, owner, miner = _setup(balance=PRE_COMMIT_DEPOSIT - 1)
        assert _pre_commit(ledger, owner, miner, 0) == ExitCode.ERR_INSUFFICIENT_FUNDS

    def test_non_control_caller_rejected(self) -> None:
        ledger, _, miner = _setup()
        [stranger] = ledger.create_accounts(1, 10, seed=99)
        assert _pre_commit(ledger, stranger, miner, 0) == ExitCode.SYS_ERR_FORBIDDEN


class TestProveCommit:
    def test_before_challenge_delay_rejected(self) -> None:
        ledger, owner, miner = _setup()
        _pre_commit(ledger, owner, miner, 0)
        ledger = ledger.with_epoch(PRE_COMMIT_CHALLENGE_DELAY - 1)
        assert _prove(ledger, owner, miner, 0) == ExitCode.ERR_FORBIDDEN

    def test_unknown_sector_rejected(self) -> None:
        ledger, owner, miner = _setup()
        assert _prove(ledger, owner, miner, 7) == ExitCode.ERR_NOT_FOUND

    def test_activates_sector_and_claims_power(self) -> None:
        ledger, owner, miner = _setup()
        _pre_commit(ledger, owner, miner, 0)
        ledger = ledger.with_epoch(PRE_COMMIT_CHALLENGE_DELAY)

        assert _prove(ledger, owner, miner, 0) == ExitCode.OK

        st = ledger.get_state(miner, MinerState)
        assert 0 in st.sectors
        assert st.pre_committed_sectors == {}
        assert st.pre_commit_deposits == 0
        assert st.initial_pledge == PRE_COMMIT_DEPOSIT
        power = ledger.get_state(STORAGE_POWER_ACTOR_ADDR, PowerState)
        claim = power.get_claim(ledger.store(), miner)
        assert claim is not None
        assert claim.raw_byte_power == SECTOR_SIZE_32GIB
        assert claim.quality_adj_power == SECTOR_SIZE_32GIB
        assert power.total_qa_bytes_committed == SECTOR_SIZE_32GIB
