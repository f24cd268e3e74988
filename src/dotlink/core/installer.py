"""Installation of the tools the dotfiles configure.

Installs run as external commands through the system package manager or a
vendor install script. dotlink itself never downloads anything.
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from .config import Config
from .errors import InstallError
from .platform import Platform

logger = logging.getLogger(__name__)

# (name, executable probed on PATH, install command prefix)
PACKAGE_MANAGERS: Dict[str, List[Tuple[str, str, List[str]]]] = {
    "posix": [
        ("apt", "apt-get", ["sudo", "apt-get", "install", "-y"]),
        ("dnf", "dnf", ["sudo", "dnf", "install", "-y"]),
        ("pacman", "pacman", ["sudo", "pacman", "-S", "--noconfirm"]),
        ("brew", "brew", ["brew", "install"]),
    ],
    "windows": [
        ("winget", "winget", ["winget", "install", "-e", "--id"]),
        ("scoop", "scoop", ["scoop", "install"]),
    ],
}

# Extra commands a manager needs before it can install a package.
PRE_INSTALL: Dict[Tuple[str, str], List[List[str]]] = {
    ("dnf", "wezterm"): [["sudo", "dnf", "copr", "enable", "-y", "wezfurlong/wezterm-nightly"]],
}


class InstallStatus(Enum):
    ALREADY_INSTALLED = "already installed"
    INSTALLED = "installed"
    PLANNED = "would install"
    MANUAL = "manual install required"
    NOT_ON_PATH = "installed but not on PATH"
    FAILED = "failed"


@dataclass
class InstallResult:
    tool: str
    status: InstallStatus
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status is not InstallStatus.FAILED


class Installer:
    """Installs configured tools that are missing from ``PATH``."""

    def __init__(
        self,
        config: Config,
        platform: Platform,
        dry_run: bool = False,
        which: Callable[[str], Optional[str]] = shutil.which,
        run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> None:
        self.config = config
        self.platform = platform
        self.dry_run = dry_run
        self.which = which
        self.run = run

    def detect_package_manager(self) -> Optional[Tuple[str, List[str]]]:
        """Return the first available package manager and its install prefix."""
        for name, executable, prefix in PACKAGE_MANAGERS.get(self.platform.name, []):
            if self.which(executable):
                return name, prefix
        return None

    def _execute(self, command: List[str]) -> None:
        logger.info("Running: %s", shlex.join(command))
        if not self.dry_run:
            self.run(command, check=True)

    def _finish(self, tool: str, detail: str) -> InstallResult:
        if self.dry_run:
            return InstallResult(tool, InstallStatus.PLANNED, detail)
        if self.which(tool):
            return InstallResult(tool, InstallStatus.INSTALLED, detail)
        return InstallResult(tool, InstallStatus.NOT_ON_PATH, "restart your terminal")

    def install_package(self, tool: str, manager: str, prefix: List[str]) -> InstallResult:
        package = self.config.tools.get(tool, {}).get(manager)
        if not package:
            return InstallResult(tool, InstallStatus.MANUAL, f"no {manager} package")

        commands = PRE_INSTALL.get((manager, tool), []) + [prefix + [package]]
        try:
            for command in commands:
                self._execute(command)
        except (subprocess.CalledProcessError, OSError) as e:
            logger.error("Failed to install %s: %s", tool, e)
            return InstallResult(tool, InstallStatus.FAILED, str(e))
        return self._finish(tool, shlex.join(commands[-1]))

    def install_script(self, tool: str, url: str) -> InstallResult:
        if self.platform.name != "posix":
            return InstallResult(tool, InstallStatus.MANUAL, url)
        command = ["bash", "-c", f"curl -fsSL {shlex.quote(url)} | bash"]
        try:
            self._execute(command)
        except (subprocess.CalledProcessError, OSError) as e:
            logger.error("Failed to install %s: %s", tool, e)
            return InstallResult(tool, InstallStatus.FAILED, str(e))
        return self._finish(tool, url)

    def install(self) -> List[InstallResult]:
        """Install every configured tool that is not already on ``PATH``.

        Raises:
            InstallError: If package-managed tools are configured but no
                supported package manager is available.
        """
        results: List[InstallResult] = []
        if self.config.tools:
            detected = self.detect_package_manager()
            if detected is None:
                names = ", ".join(name for name, _, _ in PACKAGE_MANAGERS.get(self.platform.name, []))
                raise InstallError(f"No supported package manager found ({names}).")
            manager, prefix = detected

            for tool in self.config.tools:
                if self.which(tool):
                    results.append(InstallResult(tool, InstallStatus.ALREADY_INSTALLED))
                    continue
                results.append(self.install_package(tool, manager, prefix))

        for tool, url in self.config.script_installers.items():
            if self.which(tool):
                results.append(InstallResult(tool, InstallStatus.ALREADY_INSTALLED))
                continue
            results.append(self.install_script(tool, url))

        return results
