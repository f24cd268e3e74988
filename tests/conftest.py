"""Test configuration."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from dotlink.core.backup import BackupStore
from dotlink.core.platform import PosixPlatform
from dotlink.core.reconcile import Reconciler


class FakeClock:
    """Clock returning a fixed time that tests can move forward."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int = 1) -> None:
        self.now += timedelta(seconds=seconds)


def make_unit(source_dir: Path, name: str, files: dict) -> Path:
    """Create a config unit folder with the given relative file contents."""
    unit = source_dir / name
    for rel_path, content in files.items():
        path = unit / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    unit.mkdir(parents=True, exist_ok=True)
    return unit


@pytest.fixture(name="make_unit")
def make_unit_fixture():
    return make_unit


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """Create a dotfiles repository with two units, alpha and beta."""
    root = tmp_path / "dotfiles"
    make_unit(root / "config", "alpha", {"init.lua": "-- alpha", "lua/plugins.lua": "return {}"})
    make_unit(root / "config", "beta", {"beta.toml": "enabled = true"})
    (root / "config" / "README.md").write_text("not a unit")
    return root


@pytest.fixture
def source_dir(repo_root: Path) -> Path:
    return repo_root / "config"


@pytest.fixture
def home(tmp_path: Path) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def target_dir(home: Path) -> Path:
    """Target configuration directory, not created yet."""
    return home / ".config"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 6, 1, 12, 0, 0))


@pytest.fixture
def backup_store(repo_root: Path, clock: FakeClock) -> BackupStore:
    return BackupStore(repo_root / "backups", clock=clock)


@pytest.fixture
def platform() -> PosixPlatform:
    return PosixPlatform(["powershell"])


@pytest.fixture
def reconciler(
    source_dir: Path, target_dir: Path, backup_store: BackupStore, platform: PosixPlatform
) -> Reconciler:
    return Reconciler(source_dir, target_dir, backup_store, platform)
