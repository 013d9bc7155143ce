from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

HOME_ENV = "WHITE_ELEPHANT_HOME"


@dataclass(frozen=True)
class Paths:
    repo_root: Path
    data_dir: Path
    schema_dir: Path
    userdata_dir: Path

    @property
    def state_file(self) -> Path:
        return self.userdata_dir / "presenter-state.json"

    @property
    def event_log_file(self) -> Path:
        return self.userdata_dir / "events.jsonl"


def default_userdata_dir(repo_root: Path) -> Path:
    """Checkouts keep state beside the code; installed copies use the user's home."""
    home = os.environ.get(HOME_ENV)
    if home:
        return Path(home)
    if (repo_root / "pyproject.toml").is_file():
        return repo_root / "userdata"
    return Path.home() / ".white-elephant"


def get_paths() -> Paths:
    # src/whiteelephant/paths.py -> parents: [whiteelephant, src, repo_root]
    package_dir = Path(__file__).resolve().parent
    repo_root = package_dir.parents[1]
    data_dir = package_dir / "data"
    schema_dir = data_dir / "schemas"
    return Paths(
        repo_root=repo_root,
        data_dir=data_dir,
        schema_dir=schema_dir,
        userdata_dir=default_userdata_dir(repo_root),
    )
