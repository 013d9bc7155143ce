from __future__ import annotations

import random

from whiteelephant.engine import GameState, SetupState, add_player, empty_state, start_game, update_config


def make_setup(*names: str, **config: object) -> SetupState:
    state = empty_state()
    for name in names:
        state = add_player(state, name)
    for key, value in config.items():
        state = update_config(state, key, value)
    return state


def make_game(*names: str, seed: int = 0, **config: object) -> GameState:
    game = start_game(make_setup(*names, **config), rng=random.Random(seed))
    assert isinstance(game, GameState)
    return game


def check_invariants(game: GameState) -> None:
    n = game.num_players
    gifted = {i for i, g in enumerate(game.gifts) if g is not None}
    cur, nxt = game.current_player_index, game.next_player_index

    for g in game.gifts:
        if g is not None:
            assert g.steals_taken <= g.max_steals

    if game.round_type == "done":
        assert cur is None and nxt is None
        assert gifted == set(range(n))
    elif game.round_type == "finalSwap":
        assert cur == 0 and nxt is None
        assert gifted == set(range(n))
    else:
        assert cur is not None and nxt is not None
        # the player about to act never holds a gift in the normal round
        assert game.gifts[cur] is None
        visited = set(range(nxt)) if nxt > 0 else set(range(n))
        assert gifted == visited - {cur}
