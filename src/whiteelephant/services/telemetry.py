from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Mapping


@dataclass
class EventLog:
    """Append-only JSON Lines record of what happened at the party."""

    path: Path

    def record(self, event_type: str, payload: Mapping[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rec = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "type": event_type,
            "payload": dict(payload),
        }
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    def record_events(self, events: Iterable[Mapping[str, object]]) -> None:
        for ev in events:
            payload = {k: v for k, v in ev.items() if k != "type"}
            self.record(str(ev.get("type", "UNKNOWN")), payload)

    def tail(self, n: int = 20) -> list[dict[str, object]]:
        if n <= 0 or not self.path.exists():
            return []
        try:
            # undecodable bytes only spoil their own line
            text = self.path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return []
        out: list[dict[str, object]] = []
        for line in text.splitlines()[-n:]:
            try:
                rec = json.loads(line)
            except json.JSONDecodeError:
                # a torn write from an interrupted run
                continue
            if isinstance(rec, dict):
                out.append(rec)
        return out
