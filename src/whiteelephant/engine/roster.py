"""Pre-game roster and settings.

All functions take a `SetupState` and return a new one (or the same object
when the request is rejected). Passing a `GameState` is a caller bug and
raises `ContractError`.
"""

from __future__ import annotations

import random
from dataclasses import replace

from .state import SetupState, State, initial_round, merge_config, require_game, require_setup


def add_player(state: State, name: str) -> SetupState:
    setup = require_setup(state, "add_player")
    if not name or name in setup.players:
        return setup
    return replace(setup, players=setup.players + (name,))


def remove_player(state: State, name: str) -> SetupState:
    setup = require_setup(state, "remove_player")
    if name not in setup.players:
        return setup
    return replace(setup, players=tuple(p for p in setup.players if p != name))


def update_config(state: State, key: str, value: object) -> SetupState:
    setup = require_setup(state, "update_config")
    config = merge_config(setup.configuration, key, value)
    if config is setup.configuration:
        return setup
    return replace(setup, configuration=config)


def can_start_game(state: State) -> bool:
    setup = require_setup(state, "can_start_game")
    return len(setup.players) > 0


def shuffled(players: tuple[str, ...], rng: random.Random | None = None) -> tuple[str, ...]:
    # random.shuffle is Fisher-Yates: every permutation is equally likely
    order = list(players)
    (rng or random.Random()).shuffle(order)
    return tuple(order)


def start_game(state: State, rng: random.Random | None = None) -> State:
    setup = require_setup(state, "start_game")
    if not can_start_game(setup):
        return setup
    return initial_round(setup.configuration, setup.players, shuffled(setup.players, rng))


def reset_game(state: State) -> SetupState:
    """Abandon the running game and go back to setup, keeping roster and settings."""
    game = require_game(state, "reset_game")
    return SetupState(configuration=game.configuration, players=game.players)
