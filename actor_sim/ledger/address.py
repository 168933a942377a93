"""Actor address helpers.

Addresses are plain strings with a protocol prefix:

- ``f0<n>``   ID address, assigned by the init actor
- ``f1<hex>`` public-key address of an account
- ``f2<hex>`` robust actor address, derived from the creator and a nonce
"""

from __future__ import annotations

import hashlib

Address = str

ID_PREFIX = "f0"
PUBKEY_PREFIX = "f1"
ACTOR_PREFIX = "f2"

_PAYLOAD_HEX_LEN = 40


def new_id_address(actor_id: int) -> Address:
    if actor_id < 0:
        raise ValueError("actor_id must be >= 0")
    return f"{ID_PREFIX}{actor_id}"


def new_pubkey_address(public_key: bytes) -> Address:
    return PUBKEY_PREFIX + hashlib.sha256(public_key).hexdigest()[:_PAYLOAD_HEX_LEN]


def new_actor_address(creator: Address, nonce: int) -> Address:
    payload = f"{creator}:{nonce}".encode()
    return ACTOR_PREFIX + hashlib.sha256(payload).hexdigest()[:_PAYLOAD_HEX_LEN]


def is_id_address(addr: Address) -> bool:
    return addr.startswith(ID_PREFIX) and addr[len(ID_PREFIX) :].isdigit()


def is_pubkey_address(addr: Address) -> bool:
    return addr.startswith(PUBKEY_PREFIX) and len(addr) == len(PUBKEY_PREFIX) + _PAYLOAD_HEX_LEN
