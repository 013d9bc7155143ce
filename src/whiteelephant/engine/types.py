from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Phase = Literal["setup", "game"]
RoundType = Literal["normal", "finalSwap", "done"]
ConfigKey = Literal["max_steals", "allow_steal_backs", "timer_enabled", "default_timer_duration_secs"]

CONFIG_KEYS: tuple[ConfigKey, ...] = (
    "max_steals",
    "allow_steal_backs",
    "timer_enabled",
    "default_timer_duration_secs",
)


class ContractError(RuntimeError):
    """Raised when the caller breaks the engine's contract (a bug, not a user action)."""


@dataclass(frozen=True)
class Configuration:
    max_steals: int = 3
    allow_steal_backs: bool = False
    timer_enabled: bool = False
    default_timer_duration_secs: int = 30


@dataclass(frozen=True)
class Gift:
    label: str
    steals_taken: int = 0
    last_owner_index: int | None = None
    # cap in force when the gift was opened; later settings changes don't touch it
    max_steals: int = 3

    @property
    def steals_left(self) -> int:
        return max(0, self.max_steals - self.steals_taken)
