from __future__ import annotations

from whiteelephant.services.telemetry import EventLog


def test_record_and_tail(tmp_path) -> None:
    log = EventLog(tmp_path / "logs" / "events.jsonl")
    assert log.tail() == []
    log.record("GAME_STARTED", {"order": ["a", "b"]})
    log.record_events(
        [
            {"type": "GIFT_OPENED", "player": 0, "label": "Socks"},
            {"type": "ROUND_CHANGED", "from": "normal", "to": "finalSwap"},
        ]
    )
    recs = log.tail(2)
    assert [r["type"] for r in recs] == ["GIFT_OPENED", "ROUND_CHANGED"]
    assert recs[0]["payload"] == {"player": 0, "label": "Socks"}
    assert "ts" in recs[0]
    assert len(log.tail(10)) == 3


def test_tail_skips_torn_lines(tmp_path) -> None:
    log = EventLog(tmp_path / "events.jsonl")
    log.record("ALL_RESET", {})
    with log.path.open("a", encoding="utf-8") as f:
        f.write('{"ts": "2026-')
    assert [r["type"] for r in log.tail()] == ["ALL_RESET"]


def test_tail_survives_undecodable_bytes(tmp_path) -> None:
    log = EventLog(tmp_path / "events.jsonl")
    log.record("GAME_RESET", {})
    with log.path.open("ab") as f:
        f.write(b"\xff\xfe\x00garbage\n")
    log.record("ALL_RESET", {})
    assert [r["type"] for r in log.tail()] == ["GAME_RESET", "ALL_RESET"]
