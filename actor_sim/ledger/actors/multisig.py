"""Multi-signature wallet actor: N-of-M approval with linear vesting.

A wallet created with a non-zero unlock duration locks the value it was
funded with; spends must leave at least ``amount_locked`` behind.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from actor_sim.ledger.address import Address
from actor_sim.ledger.builtin import (
    INIT_ACTOR_ADDR,
    ExitCode,
    MethodsMultisig,
)

if TYPE_CHECKING:
    from actor_sim.ledger.runtime import Runtime


@dataclass(frozen=True)
class Transaction:
    to: Address
    value: int
    method: int
    params: object
    approved: tuple[Address, ...]


@dataclass(frozen=True)
class MultisigState:
    signers: tuple[Address, ...]
    num_approvals_threshold: int
    next_txn_id: int = 0
    initial_balance: int = 0
    start_epoch: int = 0
    unlock_duration: int = 0
    pending_txns: dict[int, Transaction] = field(default_factory=dict)

    def amount_locked(self, elapsed_epoch: int) -> int:
        if elapsed_epoch >= self.unlock_duration:
            return 0
        # integer quotient: 1 at elapsed 0, 0 for every later epoch
        locked_proportion = (self.unlock_duration - elapsed_epoch) // self.unlock_duration
        return self.initial_balance * locked_proportion

    def is_signer(self, party: Address) -> bool:
        return party in self.signers

    def has_available(self, balance: int, amount_to_spend: int, current_epoch: int) -> bool:
        """Whether spending *amount_to_spend* keeps the locked amount in place."""
        if amount_to_spend < 0 or balance < amount_to_spend:
            return False
        locked = self.amount_locked(current_epoch - self.start_epoch)
        return balance - amount_to_spend >= locked


@dataclass(frozen=True)
class MultisigConstructorParams:
    signers: tuple[Address, ...]
    num_approvals_threshold: int
    unlock_duration: int = 0


@dataclass(frozen=True)
class ProposeParams:
    to: Address
    value: int
    method: int = 0
    params: object = None


@dataclass(frozen=True)
class ProposeReturn:
    txn_id: int
    applied: bool
    ret: object = None


@dataclass(frozen=True)
class TxnIDParams:
    txn_id: int


@dataclass(frozen=True)
class ApproveReturn:
    applied: bool
    ret: object = None


def constructor(rt: Runtime, params: MultisigConstructorParams) -> None:
    rt.validate_caller_is(INIT_ACTOR_ADDR)
    if not params.signers:
        rt.abort(ExitCode.ERR_ILLEGAL_ARGUMENT, "must have at least one signer")

    signers: list[Address] = []
    for signer in params.signers:
        resolved = rt.resolve_address(signer)
        if resolved is None:
            rt.abort(ExitCode.ERR_ILLEGAL_ARGUMENT, f"signer {signer} does not exist")
        if resolved in signers:
            rt.abort(ExitCode.ERR_ILLEGAL_ARGUMENT, f"duplicate signer {signer}")
        signers.append(resolved)

    if not 1 <= params.num_approvals_threshold <= len(signers):
        rt.abort(
            ExitCode.ERR_ILLEGAL_ARGUMENT,
            f"invalid approvals threshold {params.num_approvals_threshold}",
        )
    if params.unlock_duration < 0:
        rt.abort(ExitCode.ERR_ILLEGAL_ARGUMENT, "negative unlock duration")

    st = MultisigState(signers=tuple(signers), num_approvals_threshold=params.num_approvals_threshold)
    if params.unlock_duration > 0:
        st = replace(
            st,
            initial_balance=rt.value_received,
            start_epoch=rt.epoch,
            unlock_duration=params.unlock_duration,
        )
    rt.set_state(st)


def _execute_if_approved(
    rt: Runtime, st: MultisigState, txn_id: int, txn: Transaction
) -> tuple[bool, object]:
    pending = dict(st.pending_txns)
    if len(txn.approved) < st.num_approvals_threshold:
        pending[txn_id] = txn
        rt.set_state(replace(st, pending_txns=pending))
        return False, None

    if not st.has_available(rt.current_balance(), txn.value, rt.epoch):
        rt.abort(ExitCode.ERR_INSUFFICIENT_FUNDS, f"insufficient unlocked funds for {txn.value}")
    pending.pop(txn_id, None)
    rt.set_state(replace(st, pending_txns=pending))
    ret = rt.send(txn.to, txn.method, txn.params, txn.value)
    return True, ret


def propose(rt: Runtime, params: ProposeParams) -> ProposeReturn:
    st = rt.state(MultisigState)
    if not st.is_signer(rt.caller):
        rt.abort(ExitCode.ERR_FORBIDDEN, f"{rt.caller} is not a signer")

    txn_id = st.next_txn_id
    st = replace(st, next_txn_id=txn_id + 1)
    txn = Transaction(
        to=params.to,
        value=params.value,
        method=params.method,
        params=params.params,
        approved=(rt.caller,),
    )
    applied, ret = _execute_if_approved(rt, st, txn_id, txn)
    return ProposeReturn(txn_id=txn_id, applied=applied, ret=ret)


def approve(rt: Runtime, params: TxnIDParams) -> ApproveReturn:
    st = rt.state(MultisigState)
    if not st.is_signer(rt.caller):
        rt.abort(ExitCode.ERR_FORBIDDEN, f"{rt.caller} is not a signer")
    txn = st.pending_txns.get(params.txn_id)
    if txn is None:
        rt.abort(ExitCode.ERR_NOT_FOUND, f"no pending transaction {params.txn_id}")
    if rt.caller in txn.approved:
        rt.abort(ExitCode.ERR_FORBIDDEN, f"{rt.caller} already approved {params.txn_id}")

    txn = replace(txn, approved=txn.approved + (rt.caller,))
    applied, ret = _execute_if_approved(rt, st, params.txn_id, txn)
    return ApproveReturn(applied=applied, ret=ret)


EXPORTS = {
    MethodsMultisig.CONSTRUCTOR: constructor,
    MethodsMultisig.PROPOSE: propose,
    MethodsMultisig.APPROVE: approve,
}
