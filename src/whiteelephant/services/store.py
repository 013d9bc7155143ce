from __future__ import annotations

from pathlib import Path

from whiteelephant.engine.serialize import deserialize, serialize
from whiteelephant.engine.state import State, empty_state


class StateStore:
    """Keeps the presenter state in a single file between runs."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> State:
        if not self._path.exists():
            return empty_state()
        try:
            blob = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return empty_state()
        state = deserialize(blob)
        if state is None:
            return empty_state()
        return state

    def save(self, state: State) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(serialize(state), encoding="utf-8")
