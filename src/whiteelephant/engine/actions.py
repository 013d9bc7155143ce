from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable, Union

from .roster import start_game
from .round import can_open_gift, can_pass_turn, can_steal_gift, open_gift, pass_turn, steal_gift
from .state import GameState, SetupState, require_game

Event = dict[str, object]


@dataclass(frozen=True)
class OpenGiftAction:
    label: str


@dataclass(frozen=True)
class StealGiftAction:
    target: int


@dataclass(frozen=True)
class PassTurnAction:
    pass


Action = Union[OpenGiftAction, StealGiftAction, PassTurnAction]


@dataclass
class StepResult:
    ok: bool
    state: GameState
    events: list[Event] = field(default_factory=list)
    error: str | None = None


def _round_events(before: GameState, after: GameState) -> list[Event]:
    if before.round_type == after.round_type:
        return []
    return [{"type": "ROUND_CHANGED", "from": before.round_type, "to": after.round_type}]


def _open(game: GameState, action: OpenGiftAction) -> StepResult:
    if not can_open_gift(game):
        return StepResult(ok=False, state=game, error="Gifts can only be opened in the normal round.")
    player = game.current_player_index
    after = open_gift(game, action.label)
    events: list[Event] = [{"type": "GIFT_OPENED", "player": player, "label": action.label}]
    return StepResult(ok=True, state=after, events=events + _round_events(game, after))


def _steal(game: GameState, action: StealGiftAction) -> StepResult:
    # out-of-range targets raise inside steal_gift; probe only for the message
    if 0 <= action.target < game.num_players and not can_steal_gift(game, action.target):
        return StepResult(ok=False, state=game, error="That gift can't be stolen right now.")
    gift = game.gift_of(action.target)
    player = game.current_player_index
    after = steal_gift(game, action.target)
    events: list[Event] = [
        {
            "type": "GIFT_STOLEN",
            "player": player,
            "target": action.target,
            "label": gift.label if gift is not None else None,
        }
    ]
    return StepResult(ok=True, state=after, events=events + _round_events(game, after))


def _pass(game: GameState) -> StepResult:
    if not can_pass_turn(game):
        return StepResult(ok=False, state=game, error="Passing is only allowed in the final swap.")
    after = pass_turn(game)
    events: list[Event] = [{"type": "TURN_PASSED", "player": game.current_player_index}]
    return StepResult(ok=True, state=after, events=events + _round_events(game, after))


def step(state: SetupState | GameState, action: Action) -> StepResult:
    """Apply a single action and describe what happened."""
    game = require_game(state, "step")
    if game.round_type == "done":
        return StepResult(ok=False, state=game, error="The game is already over.")

    if isinstance(action, OpenGiftAction):
        return _open(game, action)
    if isinstance(action, StealGiftAction):
        return _steal(game, action)
    if isinstance(action, PassTurnAction):
        return _pass(game)
    return StepResult(ok=False, state=game, error="Unknown action.")


def replay(setup: SetupState, seed: int, actions: Iterable[Action]) -> GameState:
    """Start a seeded game from `setup` and apply `actions` in order."""
    state = start_game(setup, rng=random.Random(seed))
    game = require_game(state, "replay")
    for a in actions:
        game = step(game, a).state
        if game.round_type == "done":
            break
    return game
