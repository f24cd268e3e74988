"""Tests for editor launching."""

from pathlib import Path

import pytest

from dotlink.core.editor import find_editor, open_in_editor
from dotlink.core.errors import EditorError


def which_only(*names):
    return lambda name: f"/usr/bin/{name}" if name in names else None


def test_editor_env_wins() -> None:
    command = find_editor(["code", "vim"], {"EDITOR": "code --wait"}, which_only("vim"))
    assert command == ["code", "--wait"]


def test_first_available_editor() -> None:
    assert find_editor(["code", "nvim", "vim"], {}, which_only("vim", "nvim")) == ["nvim"]


def test_no_editor() -> None:
    assert find_editor(["code"], {"EDITOR": "  "}, which_only()) is None


def test_open_in_editor(tmp_path: Path) -> None:
    calls = []

    command = open_in_editor(
        tmp_path, ["vim"], {}, which_only("vim"), run=lambda cmd, check: calls.append(cmd)
    )

    assert command == ["vim", str(tmp_path)]
    assert calls == [["vim", str(tmp_path)]]


def test_open_without_editor_raises(tmp_path: Path) -> None:
    with pytest.raises(EditorError, match="No editor found"):
        open_in_editor(tmp_path, ["vim"], {}, which_only())


def test_editor_that_cannot_start(tmp_path: Path) -> None:
    def missing(cmd, check):
        raise FileNotFoundError(2, "No such file or directory")

    with pytest.raises(EditorError, match="Could not start vim"):
        open_in_editor(tmp_path, ["vim"], {"EDITOR": "vim"}, which_only(), run=missing)
