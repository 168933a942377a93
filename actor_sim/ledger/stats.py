"""Per-method call statistics collected by a ledger handle."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class MethodKey:
    """Statistics key: target actor code and method number."""

    code: str
    method: int


@dataclass
class CallStats:
    calls: int = 0
    reads: int = 0
    writes: int = 0
    read_bytes: int = 0
    write_bytes: int = 0

    def merge(self, other: CallStats) -> None:
        self.calls += other.calls
        self.reads += other.reads
        self.writes += other.writes
        self.read_bytes += other.read_bytes
        self.write_bytes += other.write_bytes
