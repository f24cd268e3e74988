"""Tests for link state inspection."""

import os
from pathlib import Path

from dotlink.core.platform import PosixPlatform
from dotlink.core.state import LinkState, exists_or_dangling, inspect


def test_absent(tmp_path: Path, source_dir: Path, platform: PosixPlatform) -> None:
    assert inspect(tmp_path / "alpha", source_dir / "alpha", platform) is LinkState.ABSENT


def test_linked_correctly(tmp_path: Path, source_dir: Path, platform: PosixPlatform) -> None:
    target = tmp_path / "alpha"
    target.symlink_to(source_dir / "alpha")

    assert inspect(target, source_dir / "alpha", platform) is LinkState.LINKED_CORRECTLY


def test_relative_link_is_correct(tmp_path: Path, source_dir: Path, platform: PosixPlatform) -> None:
    target = tmp_path / "alpha"
    target.symlink_to(os.path.relpath(source_dir / "alpha", tmp_path))

    assert inspect(target, source_dir / "alpha", platform) is LinkState.LINKED_CORRECTLY


def test_link_through_alias_is_correct(
    tmp_path: Path, source_dir: Path, platform: PosixPlatform
) -> None:
    """A link made through a symlinked parent still matches the real source."""
    alias = tmp_path / "alias"
    alias.symlink_to(source_dir)
    target = tmp_path / "alpha"
    target.symlink_to(alias / "alpha")

    assert inspect(target, source_dir / "alpha", platform) is LinkState.LINKED_CORRECTLY
    assert inspect(target, alias / "alpha", platform) is LinkState.LINKED_CORRECTLY


def test_wrong_target(tmp_path: Path, source_dir: Path, platform: PosixPlatform) -> None:
    target = tmp_path / "alpha"
    target.symlink_to(source_dir / "beta")

    assert inspect(target, source_dir / "alpha", platform) is LinkState.LINKED_INCORRECTLY


def test_dangling_link_is_not_absent(
    tmp_path: Path, source_dir: Path, platform: PosixPlatform
) -> None:
    target = tmp_path / "alpha"
    target.symlink_to(tmp_path / "gone")

    assert exists_or_dangling(target)
    assert inspect(target, source_dir / "alpha", platform) is LinkState.LINKED_INCORRECTLY


def test_real_directory_and_file(tmp_path: Path, source_dir: Path, platform: PosixPlatform) -> None:
    real_dir = tmp_path / "alpha"
    real_dir.mkdir()
    real_file = tmp_path / "beta"
    real_file.write_text("x")

    assert inspect(real_dir, source_dir / "alpha", platform) is LinkState.REAL_ENTRY
    assert inspect(real_file, source_dir / "beta", platform) is LinkState.REAL_ENTRY


def test_labels() -> None:
    assert [state.label for state in LinkState] == [
        "Not linked",
        "Linked",
        "Wrong target",
        "Exists (not symlink)",
    ]
    assert LinkState.LINKED_INCORRECTLY.is_link
    assert not LinkState.REAL_ENTRY.is_link
