"""Tests for configuration management."""

from pathlib import Path
from typing import Dict

import pytest
import yaml

from dotlink.core.config import Config, find_config_file
from dotlink.core.errors import ConfigError


def write_config(path: Path, config_data: Dict) -> Path:
    with open(path, "w") as f:
        yaml.safe_dump(config_data, f)
    return path


def test_default_config(tmp_path: Path) -> None:
    """Test default configuration loading."""
    config = Config(tmp_path)
    assert config.repo_root == tmp_path
    assert config.source_dir == tmp_path / "config"
    assert config.backup_dir == tmp_path / "backups"
    assert config.target_dir is None
    assert config.excluded_units == {"posix": ["powershell"], "windows": []}
    assert config.tools["nvim"]["apt"] == "neovim"
    assert config.tools["wezterm"]["apt"] is None
    assert "opencode" in config.script_installers
    assert config.editors == ["code", "nvim", "vim", "nano"]


def test_config_validation(tmp_path: Path) -> None:
    config = Config(tmp_path)
    errors = config.validate()
    assert not errors, f"Default config should be valid, got errors: {errors}"


def test_load_config_file(tmp_path: Path) -> None:
    config_path = write_config(
        tmp_path / "dotlink.yaml",
        {
            "source_dir": ".config",
            "backup_dir": "~/dotlink-backups",
            "target_dir": "~/custom",
            "excluded_units": {"posix": ["powershell", "windows-terminal"]},
            "tools": {"fish": {"apt": "fish"}},
            "editors": ["hx"],
        },
    )

    config = Config(tmp_path, config_path)

    assert config.source_dir == tmp_path / ".config"
    assert config.backup_dir == Path("~/dotlink-backups").expanduser()
    assert config.target_dir == Path("~/custom").expanduser()
    assert config.excluded_units["posix"] == ["powershell", "windows-terminal"]
    assert config.excluded_units["windows"] == []
    assert "nvim" in config.tools
    assert config.tools["fish"] == {"apt": "fish"}
    assert config.editors == ["hx"]


def test_empty_config_file(tmp_path: Path) -> None:
    config_path = tmp_path / "dotlink.yaml"
    config_path.write_text("")

    config = Config(tmp_path, config_path)

    assert config.source_dir == tmp_path / "config"


@pytest.mark.parametrize(
    "config_data, message",
    [
        ({"source_dir": 3}, "source_dir must be a string"),
        ({"excluded_units": ["powershell"]}, "excluded_units must be a dictionary"),
        ({"excluded_units": {"posix": "powershell"}}, "must be a list"),
        ({"tools": {"nvim": "neovim"}}, "must be a dictionary"),
        ({"editors": "vim"}, "editors must be a list"),
    ],
)
def test_invalid_config(tmp_path: Path, config_data: Dict, message: str) -> None:
    config_path = write_config(tmp_path / "dotlink.yaml", config_data)

    with pytest.raises(ConfigError, match=message):
        Config(tmp_path, config_path)


def test_unparseable_config(tmp_path: Path) -> None:
    config_path = tmp_path / "dotlink.yaml"
    config_path.write_text("source_dir: [unclosed")

    with pytest.raises(ConfigError, match="Error loading config file"):
        Config(tmp_path, config_path)


def test_non_mapping_config(tmp_path: Path) -> None:
    config_path = tmp_path / "dotlink.yaml"
    config_path.write_text("- just\n- a list\n")

    with pytest.raises(ConfigError, match="must be a dictionary"):
        Config(tmp_path, config_path)


def test_validate_reports_problems(tmp_path: Path) -> None:
    config = Config(tmp_path)
    config._merge_config(
        {
            "backup_dir": "config",
            "excluded_units": {"beos": ["a/b"]},
            "script_installers": {"tool": "http://insecure.example"},
        }
    )

    errors = config.validate()

    assert "source_dir and backup_dir must differ" in errors
    assert "unknown platform beos in excluded_units" in errors
    assert "excluded unit 'a/b' must be a plain folder name" in errors
    assert "installer for tool must be an https URL" in errors


def test_find_config_file(tmp_path: Path) -> None:
    assert find_config_file(tmp_path) is None
    (tmp_path / "dotlink.yaml").write_text("{}")
    assert find_config_file(tmp_path) == tmp_path / "dotlink.yaml"


def test_get(tmp_path: Path) -> None:
    config = Config(tmp_path)
    assert config.get("source_dir") == "config"
    assert config.get("missing", "fallback") == "fallback"
