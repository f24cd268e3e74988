"""Exceptions raised by the dotlink engine."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class DotlinkError(Exception):
    """Base class for all dotlink errors."""


class ConfigError(DotlinkError, ValueError):
    """Raised when a configuration file cannot be loaded or is invalid."""


class InstallError(DotlinkError):
    """Raised when tools cannot be installed at all (no package manager)."""


class EditorError(DotlinkError):
    """Raised when no editor can be found or launched."""


class EnumerationError(DotlinkError):
    """Raised when a directory the engine depends on exists but cannot be listed."""

    def __init__(self, directory: Path, reason: str, what: str = "config units") -> None:
        super().__init__(f"Cannot list {what} in {directory}: {reason}")
        self.directory = directory


class BackupError(DotlinkError):
    """Raised when a real entry could not be moved into a snapshot.

    The original entry is guaranteed to still be at its original location.
    """

    def __init__(self, source: Path, destination: Path, reason: str) -> None:
        super().__init__(f"Failed to back up {source} to {destination}: {reason}")
        self.source = source
        self.destination = destination


class RestoreConflictError(DotlinkError):
    """Raised when a restore would overwrite something at the target."""

    def __init__(self, target: Path) -> None:
        super().__init__(f"Refusing to restore over existing entry: {target}")
        self.target = target


class SymlinkError(DotlinkError):
    """Raised when a symlink cannot be created or removed."""

    def __init__(self, target: Path, reason: str, source: Optional[Path] = None) -> None:
        if source is not None:
            message = f"Failed to link {target} -> {source}: {reason}"
        else:
            message = f"Failed to remove link {target}: {reason}"
        super().__init__(message)
        self.target = target
        self.source = source
