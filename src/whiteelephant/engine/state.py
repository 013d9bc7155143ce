from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Literal, Union

from .types import CONFIG_KEYS, Configuration, ContractError, Gift, RoundType


@dataclass(frozen=True)
class SetupState:
    configuration: Configuration = field(default_factory=Configuration)
    players: tuple[str, ...] = ()
    phase: Literal["setup"] = "setup"


@dataclass(frozen=True)
class GameState:
    """A running game.

    `player_order` is indexed by slot; `gifts[slot]` is None until that slot
    receives a gift. `players` and `configuration` are what `reset_game`
    hands back to setup.
    """

    configuration: Configuration
    players: tuple[str, ...]
    player_order: tuple[str, ...]
    gifts: tuple[Gift | None, ...]
    round_type: RoundType
    current_player_index: int | None
    next_player_index: int | None
    phase: Literal["game"] = "game"

    @property
    def num_players(self) -> int:
        return len(self.player_order)

    def gift_of(self, slot: int) -> Gift | None:
        if slot < 0 or slot >= len(self.gifts):
            return None
        return self.gifts[slot]


State = Union[SetupState, GameState]


def empty_state() -> SetupState:
    return SetupState()


def reset_all(state: State | None = None) -> SetupState:
    """Discard everything, including roster and settings."""
    return empty_state()


def require_setup(state: State, op: str) -> SetupState:
    if not isinstance(state, SetupState):
        raise ContractError(f"{op} is only valid during setup (phase is {state.phase!r}).")
    return state


def require_game(state: State, op: str) -> GameState:
    if not isinstance(state, GameState):
        raise ContractError(f"{op} is only valid during a game (phase is {state.phase!r}).")
    return state


def config_value_ok(key: str, value: object) -> bool:
    if key not in CONFIG_KEYS:
        raise ContractError(f"Unknown configuration key: {key}")
    if key == "max_steals":
        return isinstance(value, int) and not isinstance(value, bool) and value >= 0
    if key == "default_timer_duration_secs":
        return isinstance(value, int) and not isinstance(value, bool) and value > 0
    return isinstance(value, bool)


def merge_config(config: Configuration, key: str, value: object) -> Configuration:
    """Return `config` with one field replaced, or `config` itself if the value is out of range."""
    if not config_value_ok(key, value):
        return config
    return replace(config, **{key: value})


def initial_round(
    configuration: Configuration, players: tuple[str, ...], order: tuple[str, ...]
) -> GameState:
    n = len(order)
    return GameState(
        configuration=configuration,
        players=players,
        player_order=order,
        gifts=tuple(None for _ in range(n)),
        round_type="normal",
        current_player_index=0,
        next_player_index=1 if n > 1 else 0,
    )
