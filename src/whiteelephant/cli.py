from __future__ import annotations

import argparse
import random
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from whiteelephant.engine import (
    ContractError,
    GameState,
    OpenGiftAction,
    PassTurnAction,
    SetupState,
    State,
    StealGiftAction,
    StepResult,
    add_late_player,
    add_player,
    board,
    can_add_late_player,
    can_reshuffle_order,
    can_start_game,
    current_player,
    next_player,
    remove_player,
    reset_all,
    reset_game,
    reset_gifts,
    reshuffle_order,
    start_game,
    step,
    update_config,
    update_game_config,
)
from whiteelephant.engine.state import require_game
from whiteelephant.engine.types import CONFIG_KEYS
from whiteelephant.paths import get_paths
from whiteelephant.services.store import StateStore
from whiteelephant.services.telemetry import EventLog

Event = dict[str, object]

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class Outcome:
    state: State
    ok: bool
    message: str = ""
    events: list[Event] = field(default_factory=list)


Handler = Callable[[State, argparse.Namespace], Outcome]


# -------- Rendering --------
def render(state: State) -> str:
    c = state.configuration
    settings = (
        f"max steals {c.max_steals}, steal-backs {'on' if c.allow_steal_backs else 'off'}, "
        f"timer {'on' if c.timer_enabled else 'off'} ({c.default_timer_duration_secs}s)"
    )
    if isinstance(state, SetupState):
        lines = ["Setup", f"Settings: {settings}", f"Players ({len(state.players)}):"]
        lines.extend(f"  - {name}" for name in state.players)
        return "\n".join(lines)

    lines = [f"Round: {state.round_type}", f"Settings: {settings}"]
    cur = current_player(state)
    if cur is None:
        lines.append("Game finished!")
    else:
        nxt = next_player(state)
        lines.append(f"Current player: {cur}" + (f" (next: {nxt})" if nxt is not None else ""))
    for slot in board(state):
        marker = ">" if slot.is_current else " "
        if slot.gift is None:
            gift = "-"
        else:
            gift = f"{slot.gift.label} ({slot.gift.steals_left} steals left)"
        flag = "  [can steal]" if slot.can_steal else ""
        lines.append(f"{marker} {slot.index}. {slot.name}: {gift}{flag}")
    return "\n".join(lines)


# -------- Argument parsing helpers --------
def _parse_config_value(key: str, raw: str) -> object:
    if key in ("max_steals", "default_timer_duration_secs"):
        try:
            return int(raw)
        except ValueError as e:
            raise argparse.ArgumentTypeError(f"{key} expects a whole number, got {raw!r}") from e
    low = raw.strip().lower()
    if low in _TRUE:
        return True
    if low in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"{key} expects on/off, got {raw!r}")


def _resolve_target(game: GameState, raw: str) -> int | None:
    # names win over slot numbers, so a player called "3" is still reachable
    if raw in game.player_order:
        return game.player_order.index(raw)
    if raw.lstrip("-").isdigit():
        return int(raw)
    return None


def _rng(args: argparse.Namespace) -> random.Random | None:
    seed = getattr(args, "seed", None)
    return random.Random(seed) if seed is not None else None


def _from_step(result: StepResult) -> Outcome:
    if not result.ok:
        return Outcome(result.state, False, result.error or "Not allowed.")
    return Outcome(result.state, True, render(result.state), list(result.events))


# -------- Handlers --------
def _cmd_status(state: State, args: argparse.Namespace) -> Outcome:
    return Outcome(state, True, render(state))


def _cmd_add_player(state: State, args: argparse.Namespace) -> Outcome:
    events: list[Event] = []
    skipped: list[str] = []
    for name in args.names:
        after = add_player(state, name)
        if after is state:
            skipped.append(name)
        else:
            events.append({"type": "PLAYER_ADDED", "name": name})
        state = after
    message = render(state)
    if skipped:
        message += "\nSkipped (empty or already present): " + ", ".join(repr(s) for s in skipped)
    return Outcome(state, not skipped, message, events)


def _cmd_remove_player(state: State, args: argparse.Namespace) -> Outcome:
    after = remove_player(state, args.name)
    if after is state:
        return Outcome(state, False, f"No player named {args.name!r}.")
    return Outcome(after, True, render(after), [{"type": "PLAYER_REMOVED", "name": args.name}])


def _cmd_config(state: State, args: argparse.Namespace) -> Outcome:
    key = args.key.replace("-", "_")
    value = _parse_config_value(key, args.value)
    if isinstance(state, SetupState):
        after: State = update_config(state, key, value)
    else:
        after = update_game_config(state, key, value)
    if after is state:
        return Outcome(state, False, f"Rejected {key}={value!r}.")
    return Outcome(after, True, render(after), [{"type": "CONFIG_CHANGED", "key": key, "value": value}])


def _cmd_start(state: State, args: argparse.Namespace) -> Outcome:
    if not can_start_game(state):
        return Outcome(state, False, "Add at least one player first.")
    after = start_game(state, rng=_rng(args))
    assert isinstance(after, GameState)
    return Outcome(after, True, render(after), [{"type": "GAME_STARTED", "order": list(after.player_order)}])


def _cmd_open(state: State, args: argparse.Namespace) -> Outcome:
    return _from_step(step(state, OpenGiftAction(label=args.label)))


def _cmd_steal(state: State, args: argparse.Namespace) -> Outcome:
    game = require_game(state, "steal")
    target = _resolve_target(game, args.target)
    if target is None:
        return Outcome(state, False, f"No player named {args.target!r}.")
    return _from_step(step(game, StealGiftAction(target=target)))


def _cmd_pass(state: State, args: argparse.Namespace) -> Outcome:
    return _from_step(step(state, PassTurnAction()))


def _cmd_reshuffle(state: State, args: argparse.Namespace) -> Outcome:
    if not can_reshuffle_order(state):
        return Outcome(state, False, "The order can only be reshuffled before any gift is opened.")
    after = reshuffle_order(state, rng=_rng(args))
    return Outcome(after, True, render(after), [{"type": "ORDER_RESHUFFLED", "order": list(after.player_order)}])


def _cmd_late_player(state: State, args: argparse.Namespace) -> Outcome:
    if not can_add_late_player(state, args.name):
        return Outcome(state, False, f"Can't seat {args.name!r} now.")
    after = add_late_player(state, args.name, rng=_rng(args))
    slot = after.player_order.index(args.name)
    return Outcome(after, True, render(after), [{"type": "LATE_PLAYER_ADDED", "name": args.name, "slot": slot}])


def _cmd_reset_gifts(state: State, args: argparse.Namespace) -> Outcome:
    after = reset_gifts(state)
    return Outcome(after, True, render(after), [{"type": "GIFTS_RESET"}])


def _cmd_reset_game(state: State, args: argparse.Namespace) -> Outcome:
    after = reset_game(state)
    return Outcome(after, True, render(after), [{"type": "GAME_RESET"}])


def _cmd_reset_all(state: State, args: argparse.Namespace) -> Outcome:
    after = reset_all(state)
    return Outcome(after, True, render(after), [{"type": "ALL_RESET"}])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="white-elephant", description="Run a White Elephant gift exchange.")
    parser.add_argument("--state-file", type=Path, default=None, help="where the game state is kept")
    parser.add_argument("--event-log", type=Path, default=None, help="JSON Lines file of game events")
    sub = parser.add_subparsers(dest="command", required=True)

    def add(name: str, handler: Handler, help_text: str) -> argparse.ArgumentParser:
        p = sub.add_parser(name, help=help_text)
        p.set_defaults(handler=handler)
        return p

    add("status", _cmd_status, "show the current state")
    p = add("add-player", _cmd_add_player, "add players during setup")
    p.add_argument("names", nargs="+")
    p = add("remove-player", _cmd_remove_player, "remove a player during setup")
    p.add_argument("name")
    p = add("config", _cmd_config, "change a setting")
    p.add_argument("key", choices=[k.replace("_", "-") for k in CONFIG_KEYS])
    p.add_argument("value")
    p = add("start", _cmd_start, "shuffle the players and start the game")
    p.add_argument("--seed", type=int, default=None)
    p = add("open", _cmd_open, "the current player opens a gift")
    p.add_argument("label")
    p = add("steal", _cmd_steal, "the current player steals a gift (slot number or name)")
    p.add_argument("target")
    add("pass", _cmd_pass, "decline the final swap")
    p = add("reshuffle", _cmd_reshuffle, "reshuffle the play order before any gift is opened")
    p.add_argument("--seed", type=int, default=None)
    p = add("late-player", _cmd_late_player, "seat a latecomer in a slot that hasn't played yet")
    p.add_argument("name")
    p.add_argument("--seed", type=int, default=None)
    add("reset-gifts", _cmd_reset_gifts, "take back all gifts and restart the round")
    add("reset-game", _cmd_reset_game, "go back to setup, keeping players and settings")
    add("reset-all", _cmd_reset_all, "forget everything")
    p = sub.add_parser("history", help="show recent game events")
    p.add_argument("-n", type=int, default=20)
    return parser


def _print_history(log: EventLog, n: int) -> int:
    for rec in log.tail(n):
        payload = rec.get("payload", {})
        details = ""
        if isinstance(payload, dict) and payload:
            details = " " + ", ".join(f"{k}={v}" for k, v in payload.items())
        print(f"{rec.get('ts', '?')} {rec.get('type', '?')}{details}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    paths = get_paths()
    store = StateStore(args.state_file or paths.state_file)
    log = EventLog(args.event_log or paths.event_log_file)

    if args.command == "history":
        return _print_history(log, args.n)

    state = store.load()
    try:
        outcome = args.handler(state, args)
    except ContractError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    if outcome.state is not state:
        store.save(outcome.state)
        log.record_events(outcome.events)

    if outcome.ok:
        print(outcome.message)
        return 0
    print(outcome.message, file=sys.stderr)
    return 1
