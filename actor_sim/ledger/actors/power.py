"""Storage power actor: miner registration and consensus power accounting."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from actor_sim.config.constants import CONSENSUS_MINER_MIN_MINERS, CONSENSUS_MINER_MIN_POWER
from actor_sim.ledger.actors.params import (
    CreateMinerParams,
    CreateMinerReturn,
    ExecParams,
    ExecReturn,
    MinerConstructorParams,
    UpdateClaimedPowerParams,
)
from actor_sim.ledger.address import Address
from actor_sim.ledger.builtin import (
    ACCOUNT_ACTOR_CODE,
    CRON_ACTOR_ADDR,
    INIT_ACTOR_ADDR,
    MULTISIG_ACTOR_CODE,
    REWARD_ACTOR_ADDR,
    STORAGE_MINER_ACTOR_CODE,
    ExitCode,
    MethodsInit,
    MethodsPower,
    MethodsReward,
    RegisteredSealProof,
)
from actor_sim.ledger.errors import DecodeError, NotFoundError
from actor_sim.ledger.store import Store

if TYPE_CHECKING:
    from actor_sim.ledger.runtime import Runtime


@dataclass(frozen=True)
class Claim:
    seal_proof_type: RegisteredSealProof
    raw_byte_power: int = 0
    quality_adj_power: int = 0


@dataclass(frozen=True)
class PowerState:
    """Network power totals plus a content-addressed table of per-miner claims.

    ``total_*_power`` only count miners above the consensus minimum;
    ``total_*_committed`` count every claim. ``this_epoch_*`` are the consensus
    totals snapshotted by the cron tick at the end of each epoch.
    """

    claims: str
    total_raw_byte_power: int = 0
    total_bytes_committed: int = 0
    total_quality_adj_power: int = 0
    total_qa_bytes_committed: int = 0
    this_epoch_raw_byte_power: int = 0
    this_epoch_quality_adj_power: int = 0
    miner_count: int = 0
    miner_above_min_power_count: int = 0

    @classmethod
    def empty(cls, store: Store) -> PowerState:
        return cls(claims=store.put({}))

    def load_claims(self, store: Store) -> dict[Address, Claim]:
        claims = store.get(self.claims)
        if not isinstance(claims, dict):
            raise DecodeError(f"claims table {self.claims} is {type(claims).__name__}")
        return claims

    def get_claim(self, store: Store, miner: Address) -> Claim | None:
        return self.load_claims(store).get(miner)

    def miner_nominal_power_meets_consensus_minimum(self, store: Store, miner: Address) -> bool:
        """Whether *miner* may win blocks.

        Miners at or above the minimum always qualify. While fewer than
        CONSENSUS_MINER_MIN_MINERS miners have reached it, any miner with
        positive power ranked in the top CONSENSUS_MINER_MIN_MINERS also does.
        """
        claims = self.load_claims(store)
        claim = claims.get(miner)
        if claim is None:
            raise NotFoundError(f"no power claim for miner {miner}")

        nominal_power = claim.raw_byte_power
        if nominal_power >= CONSENSUS_MINER_MIN_POWER:
            return True
        if self.miner_above_min_power_count >= CONSENSUS_MINER_MIN_MINERS:
            return False
        if nominal_power <= 0:
            return False

        ranked = sorted(claims.items(), key=lambda item: (-item[1].raw_byte_power, item[0]))
        top = {addr for addr, _ in ranked[:CONSENSUS_MINER_MIN_MINERS]}
        return miner in top

    def current_total_power(self) -> tuple[int, int]:
        """Raw and quality-adjusted power used for consensus this epoch."""
        if self.miner_above_min_power_count < CONSENSUS_MINER_MIN_MINERS:
            return self.total_bytes_committed, self.total_qa_bytes_committed
        return self.total_raw_byte_power, self.total_quality_adj_power

    def with_claim_added(
        self, store: Store, miner: Address, seal_proof_type: RegisteredSealProof
    ) -> PowerState:
        claims = dict(self.load_claims(store))
        claims[miner] = Claim(seal_proof_type=seal_proof_type)
        return replace(self, claims=store.put(claims), miner_count=self.miner_count + 1)

    def with_power_added(
        self, store: Store, miner: Address, raw_delta: int, qa_delta: int
    ) -> PowerState:
        claims = dict(self.load_claims(store))
        old = claims[miner]
        new = replace(
            old,
            raw_byte_power=old.raw_byte_power + raw_delta,
            quality_adj_power=old.quality_adj_power + qa_delta,
        )
        claims[miner] = new

        prev_below = old.raw_byte_power < CONSENSUS_MINER_MIN_POWER
        still_below = new.raw_byte_power < CONSENSUS_MINER_MIN_POWER
        above_count = self.miner_above_min_power_count
        total_raw = self.total_raw_byte_power
        total_qa = self.total_quality_adj_power
        if prev_below and not still_below:
            above_count += 1
            total_raw += new.raw_byte_power
            total_qa += new.quality_adj_power
        elif not prev_below and still_below:
            above_count -= 1
            total_raw -= old.raw_byte_power
            total_qa -= old.quality_adj_power
        elif not prev_below and not still_below:
            total_raw += raw_delta
            total_qa += qa_delta

        return replace(
            self,
            claims=store.put(claims),
            total_raw_byte_power=total_raw,
            total_quality_adj_power=total_qa,
            total_bytes_committed=self.total_bytes_committed + raw_delta,
            total_qa_bytes_committed=self.total_qa_bytes_committed + qa_delta,
            miner_above_min_power_count=above_count,
        )


def create_miner(rt: Runtime, params: CreateMinerParams) -> CreateMinerReturn:
    rt.validate_caller_type(ACCOUNT_ACTOR_CODE, MULTISIG_ACTOR_CODE)
    ret = rt.send(
        INIT_ACTOR_ADDR,
        MethodsInit.EXEC,
        ExecParams(
            code=STORAGE_MINER_ACTOR_CODE,
            constructor_params=MinerConstructorParams(
                owner=params.owner,
                worker=params.worker,
                seal_proof_type=params.seal_proof_type,
            ),
        ),
        rt.value_received,
    )
    if not isinstance(ret, ExecReturn):
        rt.abort(ExitCode.ERR_SERIALIZATION, f"unexpected exec return {ret!r}")

    st = rt.state(PowerState)
    rt.set_state(st.with_claim_added(rt.store, ret.id_address, params.seal_proof_type))
    rt.log(f"created miner {ret.id_address} owned by {params.owner}")
    return CreateMinerReturn(id_address=ret.id_address, robust_address=ret.robust_address)


def update_claimed_power(rt: Runtime, params: UpdateClaimedPowerParams) -> None:
    rt.validate_caller_type(STORAGE_MINER_ACTOR_CODE)
    st = rt.state(PowerState)
    if st.get_claim(rt.store, rt.caller) is None:
        rt.abort(ExitCode.ERR_NOT_FOUND, f"no claim for miner {rt.caller}")
    rt.set_state(
        st.with_power_added(rt.store, rt.caller, params.raw_byte_delta, params.quality_adj_delta)
    )


def on_epoch_tick_end(rt: Runtime, params: object) -> None:
    rt.validate_caller_is(CRON_ACTOR_ADDR)
    st = rt.state(PowerState)
    raw, qa = st.current_total_power()
    rt.set_state(replace(st, this_epoch_raw_byte_power=raw, this_epoch_quality_adj_power=qa))
    rt.send(REWARD_ACTOR_ADDR, MethodsReward.UPDATE_NETWORK_KPI, raw)


EXPORTS = {
    MethodsPower.CREATE_MINER: create_miner,
    MethodsPower.UPDATE_CLAIMED_POWER: update_claimed_power,
    MethodsPower.ON_EPOCH_TICK_END: on_epoch_tick_end,
}
