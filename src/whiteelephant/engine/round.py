"""Round engine: open / steal / pass and the turn-order state machine.

Every verb is guarded by a `can_*` predicate. Calling a verb while its
predicate is false returns the same `GameState` object untouched, so a
presentation layer can probe eligibility freely. Handing a `SetupState` to
any of these functions raises `ContractError`.
"""

from __future__ import annotations

import random
from dataclasses import replace

from .roster import shuffled
from .state import GameState, State, initial_round, merge_config, require_game
from .types import ContractError, Gift


def _to_next_round(game: GameState) -> GameState:
    n = game.num_players
    if game.round_type == "normal":
        nxt = game.next_player_index
        assert nxt is not None
        if nxt == n - 1 and n > 1:
            return replace(game, current_player_index=nxt, next_player_index=0)
        if nxt == 0:
            # slot 0 went first with nothing to steal; it gets one closing turn
            return replace(game, round_type="finalSwap", current_player_index=0, next_player_index=None)
        return replace(game, current_player_index=nxt, next_player_index=nxt + 1)
    if game.round_type == "finalSwap":
        return _finish(game)
    return game


def _finish(game: GameState) -> GameState:
    return replace(game, round_type="done", current_player_index=None, next_player_index=None)


# -------- Open --------
def can_open_gift(state: State) -> bool:
    game = require_game(state, "can_open_gift")
    return game.round_type == "normal"


def open_gift(state: State, label: str) -> GameState:
    game = require_game(state, "open_gift")
    if not can_open_gift(game):
        return game
    current = game.current_player_index
    assert current is not None
    gift = Gift(label=label, steals_taken=0, last_owner_index=None, max_steals=game.configuration.max_steals)
    gifts = list(game.gifts)
    gifts[current] = gift
    return _to_next_round(replace(game, gifts=tuple(gifts)))


# -------- Steal --------
def can_steal_gift(state: State, target: int) -> bool:
    game = require_game(state, "can_steal_gift")
    if game.round_type == "done":
        return False
    current = game.current_player_index
    if current is None or target == current:
        return False
    gift = game.gift_of(target)
    if gift is None:
        return False
    if gift.steals_taken >= gift.max_steals:
        return False
    if not game.configuration.allow_steal_backs and gift.last_owner_index == current:
        return False
    return True


def steal_gift(state: State, target: int) -> GameState:
    """Move the target's gift to the current player; the target acts next.

    The current player's own gift, if any (only in the final swap), goes
    to the target. In the final swap a successful steal ends the game.
    """
    game = require_game(state, "steal_gift")
    if target < 0 or target >= game.num_players:
        raise ContractError(f"Steal target {target} is not a slot (0..{game.num_players - 1}).")
    if not can_steal_gift(game, target):
        return game
    current = game.current_player_index
    assert current is not None
    stolen = game.gifts[target]
    assert stolen is not None

    gifts = list(game.gifts)
    gifts[target] = gifts[current]
    gifts[current] = replace(stolen, steals_taken=stolen.steals_taken + 1, last_owner_index=target)
    moved = replace(game, gifts=tuple(gifts))

    if game.round_type == "finalSwap":
        return _finish(moved)
    return replace(moved, current_player_index=target)


# -------- Pass --------
def can_pass_turn(state: State) -> bool:
    game = require_game(state, "can_pass_turn")
    return game.round_type == "finalSwap"


def pass_turn(state: State) -> GameState:
    game = require_game(state, "pass_turn")
    if not can_pass_turn(game):
        return game
    return _to_next_round(game)


# -------- Mid-game management --------
def reset_gifts(state: State) -> GameState:
    """Take every gift back and restart the round with the same play order."""
    game = require_game(state, "reset_gifts")
    return initial_round(game.configuration, game.players, game.player_order)


def can_reshuffle_order(state: State) -> bool:
    game = require_game(state, "can_reshuffle_order")
    return game.round_type == "normal" and all(g is None for g in game.gifts)


def reshuffle_order(state: State, rng: random.Random | None = None) -> GameState:
    game = require_game(state, "reshuffle_order")
    if not can_reshuffle_order(game):
        return game
    return initial_round(game.configuration, game.players, shuffled(game.player_order, rng))


def can_add_late_player(state: State, name: str) -> bool:
    game = require_game(state, "can_add_late_player")
    if game.round_type != "normal":
        return False
    return bool(name) and name not in game.player_order and name not in game.players


def _late_slot_range(game: GameState) -> tuple[int, int]:
    # slots from next_player_index onwards have not had a turn yet
    nxt = game.next_player_index
    assert nxt is not None
    n = game.num_players
    if nxt > 0:
        return nxt, n
    return n, n


def add_late_player(state: State, name: str, rng: random.Random | None = None) -> GameState:
    """Seat a latecomer at a random slot that has not had its turn yet."""
    game = require_game(state, "add_late_player")
    if not can_add_late_player(game, name):
        return game
    lo, hi = _late_slot_range(game)
    slot = (rng or random.Random()).randint(lo, hi)

    # every slot at or after `slot` is still empty, so nothing already
    # recorded (gifts, last owners, current player) has to move
    gifts = list(game.gifts)
    gifts.insert(slot, None)

    order = list(game.player_order)
    order.insert(slot, name)

    nxt = game.next_player_index
    return replace(
        game,
        players=game.players + (name,),
        player_order=tuple(order),
        gifts=tuple(gifts),
        next_player_index=nxt if nxt else slot,
    )


def update_game_config(state: State, key: str, value: object) -> GameState:
    """Change a setting mid-game. Gifts already opened keep their steal cap."""
    game = require_game(state, "update_game_config")
    config = merge_config(game.configuration, key, value)
    if config is game.configuration:
        return game
    return replace(game, configuration=config)
