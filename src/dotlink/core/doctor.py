"""Read-only diagnostics for a dotlink checkout."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .backup import BackupStore
from .errors import EnumerationError
from .platform import Platform
from .units import list_units


class Level(Enum):
    OK = "ok"
    INFO = "info"
    WARNING = "warning"
    ISSUE = "issue"


@dataclass
class Check:
    """A single diagnostic line."""

    level: Level
    message: str


def is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def run_diagnostics(
    source_dir: Path,
    target_dir: Path,
    backups: BackupStore,
    platform: Platform,
    tools: Iterable[str] = (),
    which: Callable[[str], Optional[str]] = shutil.which,
) -> List[Check]:
    """Inspect the checkout without changing anything.

    Only a missing or unreadable source directory, or an unreadable backup
    directory, counts as an issue; everything else is informational.
    """
    checks: List[Check] = []

    if platform.name == "posix":
        if is_root():
            checks.append(Check(Level.WARNING, "Running as root (not required for symlinks)"))
        else:
            checks.append(Check(Level.OK, "Running as regular user"))

    if source_dir.is_dir():
        try:
            count = len(list_units(source_dir, platform))
        except EnumerationError as e:
            checks.append(Check(Level.ISSUE, str(e)))
        else:
            checks.append(Check(Level.OK, f"Config source exists: {count} configs found"))
    else:
        checks.append(Check(Level.ISSUE, f"Config source not found: {source_dir}"))

    if target_dir.is_dir():
        checks.append(Check(Level.OK, f"Config target exists: {target_dir}"))
    else:
        checks.append(Check(Level.INFO, f"Config target will be created: {target_dir}"))

    try:
        snapshots = backups.snapshots() if backups.root.is_dir() else None
    except EnumerationError as e:
        checks.append(Check(Level.ISSUE, str(e)))
    else:
        if snapshots is None:
            checks.append(Check(Level.INFO, "No backups yet"))
        else:
            checks.append(Check(Level.OK, f"Backup directory exists: {len(snapshots)} backups"))

    for tool in tools:
        if which(tool):
            checks.append(Check(Level.OK, f"{tool} is installed"))
        else:
            checks.append(Check(Level.INFO, f"{tool} not found (optional)"))

    return checks


def count_issues(checks: Iterable[Check]) -> int:
    return sum(1 for check in checks if check.level is Level.ISSUE)
