from __future__ import annotations

import pytest


@pytest.fixture
def userdata(tmp_path, monkeypatch):
    home = tmp_path / "userdata"
    monkeypatch.setenv("WHITE_ELEPHANT_HOME", str(home))
    return home
