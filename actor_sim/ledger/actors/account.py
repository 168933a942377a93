"""Account actor: holds a balance and remembers its public-key address."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from actor_sim.ledger.address import Address
from actor_sim.ledger.builtin import MethodsAccount

if TYPE_CHECKING:
    from actor_sim.ledger.runtime import Runtime


@dataclass(frozen=True)
class AccountState:
    address: Address


def pubkey_address(rt: Runtime, params: object) -> Address:
    return rt.state(AccountState).address


EXPORTS = {
    MethodsAccount.PUBKEY_ADDRESS: pubkey_address,
}
