"""Platform capabilities used by the reconciliation engine.

Everything that differs between operating systems lives here: where the
configuration directory is, how paths are compared, how symlinks are
created, and which units do not apply to the platform. The reconciler only
talks to a :class:`Platform` and never branches on ``os.name`` itself.
"""

from __future__ import annotations

import os
import stat
import sys
from pathlib import Path
from typing import Iterable, Mapping, Optional, Tuple

from .errors import SymlinkError

XDG_CONFIG_HOME = "XDG_CONFIG_HOME"


class Platform:
    """Base platform capability.

    Attributes:
        name (str): Platform key used in configuration (``posix``/``windows``).
        excluded_units (Tuple[str, ...]): Unit names that are never managed on
            this platform. Matching is case-insensitive.
    """

    name = "base"

    def __init__(self, excluded_units: Iterable[str] = ()) -> None:
        self.excluded_units: Tuple[str, ...] = tuple(excluded_units)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(excluded_units={list(self.excluded_units)})"

    def is_excluded(self, unit_name: str) -> bool:
        """Return True if the unit does not apply to this platform."""
        folded = unit_name.casefold()
        return any(folded == excluded.casefold() for excluded in self.excluded_units)

    def default_target_dir(
        self, environ: Optional[Mapping[str, str]] = None, home: Optional[Path] = None
    ) -> Path:
        """Return the configuration directory that units are linked into."""
        raise NotImplementedError

    def canonical(self, path: Path) -> str:
        """Return a comparable canonical form of ``path``.

        All symlinks are resolved, including intermediate ones, so two paths
        naming the same directory through different aliases compare equal.
        """
        return os.path.normcase(os.path.realpath(path))

    def same_path(self, first: Path, second: Path) -> bool:
        """Return True if both paths canonicalize to the same location."""
        return self.canonical(first) == self.canonical(second)

    def create_symlink(self, target: Path, source: Path) -> None:
        """Create ``target`` as a symlink pointing at ``source``.

        Raises:
            SymlinkError: If the link cannot be created.
        """
        try:
            target.symlink_to(source, target_is_directory=source.is_dir())
        except OSError as e:
            raise SymlinkError(target, e.strerror or str(e), source) from e

    def remove_symlink(self, target: Path) -> None:
        """Remove the link entry at ``target`` without touching what it points to.

        Raises:
            SymlinkError: If ``target`` is not a symlink or cannot be removed.
        """
        if not target.is_symlink():
            raise SymlinkError(target, "not a symlink")
        try:
            target.unlink()
        except OSError as e:
            raise SymlinkError(target, e.strerror or str(e)) from e


class PosixPlatform(Platform):
    """Linux, WSL and macOS."""

    name = "posix"

    def default_target_dir(
        self, environ: Optional[Mapping[str, str]] = None, home: Optional[Path] = None
    ) -> Path:
        environ = os.environ if environ is None else environ
        home = Path.home() if home is None else home
        configured = environ.get(XDG_CONFIG_HOME)
        if configured:
            return Path(configured).expanduser()
        return home / ".config"


class WindowsPlatform(Platform):
    """Windows, where directory links must be created as directory symlinks."""

    name = "windows"

    def default_target_dir(
        self, environ: Optional[Mapping[str, str]] = None, home: Optional[Path] = None
    ) -> Path:
        home = Path.home() if home is None else home
        return home / ".config"

    def remove_symlink(self, target: Path) -> None:
        if not target.is_symlink():
            raise SymlinkError(target, "not a symlink")
        try:
            # Directory symlinks on Windows are removed with rmdir, not unlink.
            if _link_attributes(target) & stat.FILE_ATTRIBUTE_DIRECTORY:
                target.rmdir()
            else:
                target.unlink()
        except OSError as e:
            raise SymlinkError(target, e.strerror or str(e)) from e


def _link_attributes(path: Path) -> int:
    """Return the Windows file attributes of the link itself, not its target."""
    return getattr(os.lstat(path), "st_file_attributes", 0)


def current_platform_name() -> str:
    """Return the configuration key of the running platform."""
    return "windows" if sys.platform.startswith("win") else "posix"


def get_platform(
    excluded_units: Optional[Mapping[str, Iterable[str]]] = None,
    name: Optional[str] = None,
) -> Platform:
    """Build the platform capability for ``name`` (default: the running one).

    Args:
        excluded_units: Mapping of platform key to unit names excluded there.
        name: Platform key, ``posix`` or ``windows``.

    Returns:
        Platform: The matching platform implementation.

    Raises:
        ValueError: If ``name`` is not a known platform.
    """
    name = name or current_platform_name()
    excluded = list((excluded_units or {}).get(name, []))
    if name == "posix":
        return PosixPlatform(excluded)
    if name == "windows":
        return WindowsPlatform(excluded)
    raise ValueError(f"Unknown platform: {name}")
