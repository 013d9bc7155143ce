from __future__ import annotations

from whiteelephant.engine import empty_state, snapshot
from whiteelephant.paths import get_paths
from whiteelephant.schema import state_validator, validate_json

from helpers import make_game


def test_state_schema_ships_with_package() -> None:
    assert (get_paths().schema_dir / "state.schema.json").is_file()


def test_snapshots_validate_against_schema() -> None:
    validator = state_validator()
    validate_json(snapshot(empty_state()), validator, context="empty state")
    validate_json(snapshot(make_game("a", "b", "c")), validator, context="new game")
