from __future__ import annotations

import random

from whiteelephant.engine import (
    SetupState,
    add_late_player,
    can_add_late_player,
    can_reshuffle_order,
    can_steal_gift,
    open_gift,
    pass_turn,
    reset_game,
    reset_gifts,
    reshuffle_order,
    steal_gift,
    update_game_config,
)

from helpers import check_invariants, make_game


def test_reset_gifts_keeps_order() -> None:
    game = make_game("a", "b", "c", seed=5)
    played = steal_gift(open_gift(game, "Socks"), 0)
    fresh = reset_gifts(played)
    assert fresh.player_order == game.player_order
    assert fresh == game


def test_reshuffle_only_before_first_gift() -> None:
    game = make_game("a", "b", "c", "d", seed=1)
    assert can_reshuffle_order(game)
    shuffled = reshuffle_order(game, rng=random.Random(9))
    assert sorted(shuffled.player_order) == ["a", "b", "c", "d"]
    assert shuffled.current_player_index == 0

    opened = open_gift(game, "Socks")
    assert not can_reshuffle_order(opened)
    assert reshuffle_order(opened) is opened


def test_late_player_sits_in_unplayed_slot() -> None:
    game = make_game("a", "b", "c", seed=2)
    game = open_gift(game, "Socks")
    assert game.next_player_index == 2

    for seed in range(20):
        late = add_late_player(game, "Zed", rng=random.Random(seed))
        slot = late.player_order.index("Zed")
        assert slot in (2, 3)
        assert late.num_players == 4
        assert late.next_player_index == 2
        assert late.gifts[0] is not None and late.gifts[0].label == "Socks"
        assert "Zed" in late.players
        check_invariants(late)


def test_late_player_after_everyone_else_has_played() -> None:
    game = make_game("a", "b", seed=3)
    game = open_gift(game, "Socks")
    assert game.next_player_index == 0

    late = add_late_player(game, "Zed")
    assert late.player_order[2] == "Zed"
    assert late.next_player_index == 2
    check_invariants(late)

    late = open_gift(late, "Candle")
    assert (late.current_player_index, late.next_player_index) == (2, 0)
    late = open_gift(late, "Mug")
    assert late.round_type == "finalSwap"
    check_invariants(late)


def test_late_player_joins_a_solo_game() -> None:
    game = make_game("Solo")
    late = add_late_player(game, "Zed")
    assert late.player_order == ("Solo", "Zed")
    assert (late.current_player_index, late.next_player_index) == (0, 1)


def test_late_player_rejections() -> None:
    game = make_game("a", "b", seed=4)
    assert not can_add_late_player(game, "")
    assert not can_add_late_player(game, "a")
    assert add_late_player(game, "a") is game

    final = open_gift(open_gift(game, "Socks"), "Candle")
    assert final.round_type == "finalSwap"
    assert not can_add_late_player(final, "Zed")
    assert add_late_player(final, "Zed") is final


def test_late_player_survives_reset_game() -> None:
    game = add_late_player(make_game("a", "b"), "Zed")
    setup = reset_game(game)
    assert isinstance(setup, SetupState)
    assert setup.players == ("a", "b", "Zed")


def test_settings_change_does_not_touch_opened_gifts() -> None:
    game = make_game("a", "b", "c", max_steals=1)
    game = open_gift(game, "Socks")
    game = update_game_config(game, "max_steals", 3)
    assert game.configuration.max_steals == 3
    game = open_gift(game, "Candle")

    socks, candle = game.gifts[0], game.gifts[1]
    assert socks is not None and socks.max_steals == 1
    assert candle is not None and candle.max_steals == 3

    game = steal_gift(game, 0)  # slot 2 takes the socks; now capped
    game = open_gift(game, "Mug")  # slot 0 replaces them
    assert game.round_type == "finalSwap"
    assert not can_steal_gift(game, 2)
    assert can_steal_gift(game, 1)


def test_settings_change_rejects_bad_values() -> None:
    game = make_game("a", "b")
    assert update_game_config(game, "max_steals", -2) is game
    assert update_game_config(game, "default_timer_duration_secs", 0) is game


def test_reset_gifts_after_done_restarts_round() -> None:
    game = pass_turn(open_gift(make_game("Solo"), "Socks"))
    assert game.round_type == "done"
    fresh = reset_gifts(game)
    assert fresh.round_type == "normal"
    assert fresh.gifts == (None,)
