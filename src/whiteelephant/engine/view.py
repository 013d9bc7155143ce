"""Read-only accessors for whatever draws the game board."""

from __future__ import annotations

from dataclasses import dataclass

from .round import can_steal_gift
from .state import State, require_game
from .types import Gift


@dataclass(frozen=True)
class PlayerSlot:
    index: int
    name: str
    gift: Gift | None
    is_current: bool
    is_next: bool
    can_steal: bool


def board(state: State) -> list[PlayerSlot]:
    game = require_game(state, "board")
    return [
        PlayerSlot(
            index=i,
            name=name,
            gift=game.gifts[i],
            is_current=i == game.current_player_index,
            is_next=i == game.next_player_index,
            can_steal=can_steal_gift(game, i),
        )
        for i, name in enumerate(game.player_order)
    ]


def current_player(state: State) -> str | None:
    game = require_game(state, "current_player")
    if game.current_player_index is None:
        return None
    return game.player_order[game.current_player_index]


def next_player(state: State) -> str | None:
    game = require_game(state, "next_player")
    if game.next_player_index is None:
        return None
    return game.player_order[game.next_player_index]


def steal_targets(state: State) -> list[int]:
    game = require_game(state, "steal_targets")
    return [i for i in range(game.num_players) if can_steal_gift(game, i)]


def is_done(state: State) -> bool:
    return require_game(state, "is_done").round_type == "done"
