"""Headless rules engine for a White Elephant gift exchange.

Pure value-in/value-out functions over frozen state snapshots; no I/O.
"""

from .actions import OpenGiftAction, PassTurnAction, StepResult, StealGiftAction, replay, step
from .roster import add_player, can_start_game, remove_player, reset_game, start_game, update_config
from .round import (
    add_late_player,
    can_add_late_player,
    can_open_gift,
    can_pass_turn,
    can_reshuffle_order,
    can_steal_gift,
    open_gift,
    pass_turn,
    reset_gifts,
    reshuffle_order,
    steal_gift,
    update_game_config,
)
from .serialize import deserialize, restore, serialize, snapshot
from .state import GameState, SetupState, State, empty_state, reset_all
from .types import Configuration, ContractError, Gift, RoundType
from .view import PlayerSlot, board, current_player, is_done, next_player, steal_targets

__all__ = [
    "Configuration",
    "ContractError",
    "GameState",
    "Gift",
    "OpenGiftAction",
    "PassTurnAction",
    "PlayerSlot",
    "RoundType",
    "SetupState",
    "State",
    "StealGiftAction",
    "StepResult",
    "add_late_player",
    "add_player",
    "board",
    "can_add_late_player",
    "can_open_gift",
    "can_pass_turn",
    "can_reshuffle_order",
    "can_start_game",
    "can_steal_gift",
    "current_player",
    "deserialize",
    "empty_state",
    "is_done",
    "next_player",
    "open_gift",
    "pass_turn",
    "remove_player",
    "replay",
    "reset_all",
    "reset_game",
    "reset_gifts",
    "reshuffle_order",
    "restore",
    "serialize",
    "snapshot",
    "start_game",
    "steal_gift",
    "steal_targets",
    "step",
    "update_config",
    "update_game_config",
]
