from __future__ import annotations

import json
from typing import Mapping

from whiteelephant.schema import ValidationFailed, state_validator, validate_json

from .state import GameState, SetupState, State
from .types import Configuration, Gift

FORMAT_VERSION = 1


def _config_to_dict(c: Configuration) -> dict[str, object]:
    return {
        "max_steals": c.max_steals,
        "allow_steal_backs": c.allow_steal_backs,
        "timer_enabled": c.timer_enabled,
        "default_timer_duration_secs": c.default_timer_duration_secs,
    }


def _gift_to_dict(g: Gift | None) -> dict[str, object] | None:
    if g is None:
        return None
    return {
        "label": g.label,
        "steals_taken": g.steals_taken,
        "last_owner_index": g.last_owner_index,
        "max_steals": g.max_steals,
    }


def _state_to_dict(state: State) -> dict[str, object]:
    if isinstance(state, SetupState):
        return {
            "phase": "setup",
            "configuration": _config_to_dict(state.configuration),
            "players": list(state.players),
        }
    return {
        "phase": "game",
        "configuration": _config_to_dict(state.configuration),
        "players": list(state.players),
        "player_order": list(state.player_order),
        "gifts": [_gift_to_dict(g) for g in state.gifts],
        "round_type": state.round_type,
        "current_player_index": state.current_player_index,
        "next_player_index": state.next_player_index,
    }


def snapshot(state: State) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the presenter state."""
    return {"version": FORMAT_VERSION, "state": _state_to_dict(state)}


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int) or isinstance(v, bool):
        raise ValidationFailed(f"Expected int for {key}")
    return v


def _optional_int(obj: Mapping[str, object], key: str) -> int | None:
    if obj.get(key) is None:
        return None
    return _require_int(obj, key)


def _config_from_dict(d: Mapping[str, object]) -> Configuration:
    return Configuration(
        max_steals=_require_int(d, "max_steals"),
        allow_steal_backs=d["allow_steal_backs"],  # type: ignore[arg-type]
        timer_enabled=d["timer_enabled"],  # type: ignore[arg-type]
        default_timer_duration_secs=_require_int(d, "default_timer_duration_secs"),
    )


def _gift_from_dict(d: Mapping[str, object] | None) -> Gift | None:
    if d is None:
        return None
    return Gift(
        label=d["label"],  # type: ignore[arg-type]
        steals_taken=_require_int(d, "steals_taken"),
        last_owner_index=_optional_int(d, "last_owner_index"),
        max_steals=_require_int(d, "max_steals"),
    )


def _check_game(game: GameState) -> None:
    n = game.num_players
    if len(game.gifts) != n:
        raise ValidationFailed("gifts must have one entry per slot")
    if set(game.player_order) != set(game.players):
        raise ValidationFailed("player_order must be a permutation of players")

    cur, nxt = game.current_player_index, game.next_player_index
    for idx in (cur, nxt):
        if idx is not None and idx >= n:
            raise ValidationFailed(f"player index {idx} out of range")
    if game.round_type == "done" and (cur is not None or nxt is not None):
        raise ValidationFailed("a finished game has no current or next player")
    if game.round_type == "finalSwap" and (cur != 0 or nxt is not None):
        raise ValidationFailed("the final swap revisits slot 0 and has no next player")
    if game.round_type == "normal" and (cur is None or nxt is None):
        raise ValidationFailed("the normal round needs a current and next player")

    for g in game.gifts:
        if g is None:
            continue
        if g.steals_taken > g.max_steals:
            raise ValidationFailed(f"gift {g.label!r} stolen more often than allowed")
        if g.last_owner_index is not None and g.last_owner_index >= n:
            raise ValidationFailed(f"gift {g.label!r} has an unknown last owner")

    gifted = {i for i, g in enumerate(game.gifts) if g is not None}
    if game.round_type == "normal":
        assert cur is not None and nxt is not None
        # slots before `next` have had a turn; only the player about to act lacks a gift
        visited = set(range(nxt)) if nxt > 0 else set(range(n))
        expected = visited - {cur}
    else:
        expected = set(range(n))
    if gifted != expected:
        raise ValidationFailed(f"gifts held by slots {sorted(gifted)} don't match the round")


def restore(raw: object) -> State:
    """Rebuild a state from a snapshot. Raises ValidationFailed on bad input."""
    validate_json(raw, state_validator(), context="presenter state")
    assert isinstance(raw, dict)
    d = raw["state"]
    config = _config_from_dict(d["configuration"])
    players = tuple(d["players"])
    if d["phase"] == "setup":
        return SetupState(configuration=config, players=players)

    game = GameState(
        configuration=config,
        players=players,
        player_order=tuple(d["player_order"]),
        gifts=tuple(_gift_from_dict(g) for g in d["gifts"]),
        round_type=d["round_type"],
        current_player_index=_optional_int(d, "current_player_index"),
        next_player_index=_optional_int(d, "next_player_index"),
    )
    _check_game(game)
    return game


def serialize(state: State) -> str:
    return json.dumps(snapshot(state), ensure_ascii=False)


def deserialize(blob: str | None) -> State | None:
    """Parse a stored blob; None when it is missing, malformed or inconsistent."""
    if not blob:
        return None
    try:
        raw = json.loads(blob)
    except json.JSONDecodeError:
        return None
    try:
        return restore(raw)
    except ValidationFailed:
        return None
