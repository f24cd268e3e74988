"""Tests for XDG_CONFIG_HOME persistence."""

from pathlib import Path

from dotlink.core.environment import EXPORT_LINE, ensure_config_home


def test_already_set(home: Path) -> None:
    environ = {"XDG_CONFIG_HOME": str(home / ".config")}

    target, written = ensure_config_home(home, environ)

    assert target == home / ".config"
    assert not written
    assert not (home / ".profile").exists()


def test_appends_export_line(home: Path) -> None:
    (home / ".profile").write_text("export PATH=$PATH:~/bin\n")
    environ = {}

    target, written = ensure_config_home(home, environ)

    assert written
    assert target == home / ".config"
    assert environ["XDG_CONFIG_HOME"] == str(home / ".config")
    lines = (home / ".profile").read_text().splitlines()
    assert lines[0] == "export PATH=$PATH:~/bin"
    assert lines[-1] == EXPORT_LINE


def test_does_not_duplicate_export_line(home: Path) -> None:
    (home / ".profile").write_text(f"{EXPORT_LINE}\n")

    _, written = ensure_config_home(home, {})

    assert not written
    assert (home / ".profile").read_text().count(EXPORT_LINE) == 1


def test_overrides_other_location(home: Path) -> None:
    environ = {"XDG_CONFIG_HOME": "/somewhere/else"}

    target, written = ensure_config_home(home, environ)

    assert written
    assert target == home / ".config"
    assert environ["XDG_CONFIG_HOME"] == str(home / ".config")
