"""System actor: the sender of implicit messages (rewards, cron). Exports no methods."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SystemState:
    pass


EXPORTS: dict = {}
