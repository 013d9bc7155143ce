from __future__ import annotations

import random

from whiteelephant.engine import (
    OpenGiftAction,
    PassTurnAction,
    StealGiftAction,
    can_open_gift,
    replay,
    snapshot,
    start_game,
    step,
    steal_targets,
)

from helpers import make_setup


def _choose_action(game, rng: random.Random) -> object:
    # Prefer stealing the most-stolen gift, otherwise open, otherwise pass
    targets = steal_targets(game)
    if targets and rng.random() < 0.5:
        return StealGiftAction(max(targets, key=lambda t: (game.gifts[t].steals_taken, t)))
    if can_open_gift(game):
        return OpenGiftAction(f"gift-{rng.randrange(100)}")
    if targets:
        return StealGiftAction(targets[0])
    return PassTurnAction()


def test_engine_determinism_replay() -> None:
    setup = make_setup("Alice", "Bob", "Carol", "Dave", "Erin", max_steals=2)
    seed = 424242
    state1 = start_game(setup, rng=random.Random(seed))
    rng = random.Random(7)

    actions = []
    for _ in range(100):
        if state1.round_type == "done":
            break
        a = _choose_action(state1, rng)
        actions.append(a)
        state1 = step(state1, a).state

    assert state1.round_type == "done"
    state2 = replay(setup, seed=seed, actions=actions)
    assert snapshot(state1) == snapshot(state2)
