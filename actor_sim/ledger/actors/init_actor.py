"""Init actor: assigns ID addresses and constructs new actors."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from actor_sim.ledger.actors.params import ExecParams, ExecReturn
from actor_sim.ledger.address import Address, new_actor_address, new_id_address
from actor_sim.ledger.builtin import (
    METHOD_CONSTRUCTOR,
    MULTISIG_ACTOR_CODE,
    STORAGE_MINER_ACTOR_CODE,
    STORAGE_POWER_ACTOR_ADDR,
    ExitCode,
    MethodsInit,
)

if TYPE_CHECKING:
    from actor_sim.ledger.runtime import Runtime


@dataclass(frozen=True)
class InitState:
    address_map: dict[Address, int]
    """Robust or public-key address -> actor ID."""
    next_id: int
    network_name: str

    def resolve_address(self, addr: Address) -> Address | None:
        actor_id = self.address_map.get(addr)
        return None if actor_id is None else new_id_address(actor_id)

    def map_address(self, addr: Address) -> tuple[InitState, Address]:
        """Allocate the next ID for *addr*; returns the new state and the ID address."""
        address_map = dict(self.address_map)
        address_map[addr] = self.next_id
        new_state = replace(self, address_map=address_map, next_id=self.next_id + 1)
        return new_state, new_id_address(self.next_id)


def exec_actor(rt: Runtime, params: ExecParams) -> ExecReturn:
    if params.code == STORAGE_MINER_ACTOR_CODE:
        rt.validate_caller_is(STORAGE_POWER_ACTOR_ADDR)
    elif params.code != MULTISIG_ACTOR_CODE:
        rt.abort(ExitCode.ERR_FORBIDDEN, f"actor code {params.code} cannot be exec'd")

    st = rt.state(InitState)
    robust_address = new_actor_address(rt.caller, st.next_id)
    st, id_address = st.map_address(robust_address)
    rt.set_state(st)

    rt.create_actor(params.code, id_address)
    rt.send(id_address, METHOD_CONSTRUCTOR, params.constructor_params, rt.value_received)
    return ExecReturn(id_address=id_address, robust_address=robust_address)


EXPORTS = {
    MethodsInit.EXEC: exec_actor,
}
