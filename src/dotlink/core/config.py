"""Configuration management for dotlink."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError

CONFIG_FILE_NAME = "dotlink.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "source_dir": "config",
    "backup_dir": "backups",
    "target_dir": None,
    "log_file": None,
    "excluded_units": {
        "posix": ["powershell"],
        "windows": [],
    },
    "tools": {
        "wezterm": {"apt": None, "dnf": "wezterm", "pacman": "wezterm", "brew": "wezterm"},
        "nvim": {"apt": "neovim", "dnf": "neovim", "pacman": "neovim", "brew": "neovim"},
    },
    "script_installers": {
        "opencode": "https://opencode.ai/install",
        "copilot": "https://gh.io/copilot-install",
    },
    "editors": ["code", "nvim", "vim", "nano"],
    "optional_tools": ["git", "nvim", "code", "opencode", "copilot"],
}


class Config:
    """Configuration class for dotlink.

    Attributes:
        repo_root (Path): Root of the dotfiles repository.
        source_dir (Path): Directory holding the config units.
        backup_dir (Path): Directory holding backup snapshots.
        target_dir (Optional[Path]): Explicit target override, if configured.
    """

    def __init__(self, repo_root: Optional[Path] = None, config_file: Optional[Path] = None) -> None:
        """Initialize configuration.

        Args:
            repo_root: Repository root, defaults to the current directory.
            config_file: Optional YAML file merged over the defaults.
        """
        self.repo_root = Path(repo_root or Path.cwd()).expanduser().absolute()
        self.config: Dict[str, Any] = {}
        self.source_dir: Path = self.repo_root / "config"
        self.backup_dir: Path = self.repo_root / "backups"
        self.target_dir: Optional[Path] = None
        self.log_file: Optional[str] = None
        self.excluded_units: Dict[str, List[str]] = {}
        self.tools: Dict[str, Dict[str, Optional[str]]] = {}
        self.script_installers: Dict[str, str] = {}
        self.editors: List[str] = []
        self.optional_tools: List[str] = []
        self.load_config(config_file)

    def load_config(self, config_file: Optional[Path] = None) -> None:
        """Load configuration from file.

        Raises:
            ConfigError: If the file cannot be read or parsed.
        """
        self._merge_config(copy.deepcopy(DEFAULT_CONFIG))

        if config_file is None:
            return
        try:
            with open(config_file, "r") as f:
                user_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Error loading config file {config_file}: {e}") from e
        if user_config:
            self._merge_config(user_config)

    def _resolve(self, value: str) -> Path:
        path = Path(value).expanduser()
        return path if path.is_absolute() else self.repo_root / path

    def _merge_config(self, config: Dict[str, Any]) -> None:
        """Merge configuration with current configuration."""
        if not isinstance(config, dict):
            raise ConfigError("Configuration must be a dictionary")

        self.config.update(config)

        for key in ("source_dir", "backup_dir"):
            if key in config:
                if not isinstance(config[key], str):
                    raise ConfigError(f"{key} must be a string")
                setattr(self, key, self._resolve(config[key]))

        for key in ("target_dir", "log_file"):
            if key in config and config[key] is not None and not isinstance(config[key], str):
                raise ConfigError(f"{key} must be a string")
        if "target_dir" in config:
            target = config["target_dir"]
            self.target_dir = Path(target).expanduser() if target else None
        if "log_file" in config:
            self.log_file = config["log_file"]

        if "excluded_units" in config:
            excluded = config["excluded_units"]
            if not isinstance(excluded, dict):
                raise ConfigError("excluded_units must be a dictionary")
            for platform_name, names in excluded.items():
                if not isinstance(names, list):
                    raise ConfigError(f"excluded_units for {platform_name} must be a list")
                self.excluded_units[platform_name] = [str(name) for name in names]

        if "tools" in config:
            if not isinstance(config["tools"], dict):
                raise ConfigError("tools must be a dictionary")
            for tool, packages in config["tools"].items():
                if not isinstance(packages, dict):
                    raise ConfigError(f"Packages for tool {tool} must be a dictionary")
                self.tools[tool] = dict(packages)

        if "script_installers" in config:
            if not isinstance(config["script_installers"], dict):
                raise ConfigError("script_installers must be a dictionary")
            self.script_installers.update(config["script_installers"])

        for key in ("editors", "optional_tools"):
            if key in config:
                if not isinstance(config[key], list):
                    raise ConfigError(f"{key} must be a list")
                setattr(self, key, [str(item) for item in config[key]])

    def validate(self) -> List[str]:
        """Validate configuration."""
        errors = []

        if self.source_dir == self.backup_dir:
            errors.append("source_dir and backup_dir must differ")

        for platform_name, names in self.excluded_units.items():
            if platform_name not in ("posix", "windows"):
                errors.append(f"unknown platform {platform_name} in excluded_units")
            for name in names:
                if not name or "/" in name or "\\" in name:
                    errors.append(f"excluded unit {name!r} must be a plain folder name")

        for tool, packages in self.tools.items():
            for manager, package in packages.items():
                if package is not None and not isinstance(package, str):
                    errors.append(f"package for {tool} on {manager} must be a string or null")

        for tool, url in self.script_installers.items():
            if not isinstance(url, str) or not url.startswith("https://"):
                errors.append(f"installer for {tool} must be an https URL")

        return errors

    def get(self, key: str, default: Any = None) -> Any:
        """Get a raw configuration value.

        Args:
            key: The configuration key to get.
            default: The default value to return if the key is not found.

        Returns:
            The configuration value, or the default if not found.
        """
        return self.config.get(key, default)


def find_config_file(repo_root: Path) -> Optional[Path]:
    """Return ``<repo_root>/dotlink.yaml`` if it exists."""
    candidate = Path(repo_root) / CONFIG_FILE_NAME
    return candidate if candidate.is_file() else None
