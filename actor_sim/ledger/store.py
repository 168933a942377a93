"""Content-addressed, append-only object store shared by every epoch handle."""

from __future__ import annotations

import hashlib

from actor_sim.ledger.errors import NotFoundError

CID_PREFIX = "bafy"


def _encode(obj: object) -> bytes:
    """Canonical encoding: the repr of a frozen dataclass tree is deterministic."""
    return repr(obj).encode()


class Store:
    """Maps content identifiers to immutable values.

    Stored values are shared, never copied: callers must treat anything they
    ``get`` as read-only and ``put`` a new value instead of mutating it.
    """

    def __init__(self) -> None:
        self._blocks: dict[str, tuple[object, int]] = {}

    def put(self, obj: object) -> str:
        encoded = _encode(obj)
        cid = CID_PREFIX + hashlib.sha256(encoded).hexdigest()
        self._blocks.setdefault(cid, (obj, len(encoded)))
        return cid

    def get(self, cid: str) -> object:
        try:
            return self._blocks[cid][0]
        except KeyError:
            raise NotFoundError(f"no object stored under {cid}") from None

    def size(self, cid: str) -> int:
        """Encoded size in bytes of the object stored under *cid*."""
        try:
            return self._blocks[cid][1]
        except KeyError:
            raise NotFoundError(f"no object stored under {cid}") from None

    def __contains__(self, cid: object) -> bool:
        return cid in self._blocks

    def __len__(self) -> int:
        return len(self._blocks)
