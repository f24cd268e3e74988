"""Link, unlink and status reconciliation.

The reconciler brings the target configuration directory into agreement with
the source tree. It is idempotent: running ``link`` again after an
interrupted or completed run converges to the same state and creates no new
backup snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from .backup import BackupStore
from .errors import (
    BackupError,
    DotlinkError,
    EnumerationError,
    RestoreConflictError,
    SymlinkError,
)
from .platform import Platform
from .state import LinkState, inspect
from .units import ConfigUnit, list_units

logger = logging.getLogger(__name__)


class Action(Enum):
    """What the reconciler did to a unit."""

    ALREADY_LINKED = "already linked"
    LINKED = "linked"
    RELINKED = "relinked"
    BACKED_UP = "backed up and linked"
    LINK_FAILED = "link failed"
    BACKUP_FAILED = "backup failed"
    EXCLUDED_REMOVED = "removed excluded link"
    NOT_LINKED = "not linked"
    UNLINKED = "unlinked"
    RESTORED = "unlinked and restored"
    SKIPPED_REAL = "skipped (not a symlink)"
    RESTORE_SKIPPED = "restore skipped"
    UNLINK_FAILED = "unlink failed"


FAILURES = frozenset(
    {Action.LINK_FAILED, Action.BACKUP_FAILED, Action.UNLINK_FAILED, Action.RESTORE_SKIPPED}
)


@dataclass
class UnitResult:
    """Outcome for a single unit."""

    name: str
    action: Action
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.action not in FAILURES


@dataclass
class RunReport:
    """Outcome of a whole ``link`` or ``unlink`` run."""

    operation: str
    source_dir: Path
    target_dir: Path
    snapshot: Optional[Path] = None
    results: List[UnitResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(result.ok for result in self.results)

    @property
    def failures(self) -> List[UnitResult]:
        return [result for result in self.results if not result.ok]

    def add(self, name: str, action: Action, message: str = "") -> UnitResult:
        result = UnitResult(name=name, action=action, message=message)
        self.results.append(result)
        return result


class Reconciler:
    """Creates and removes the symlinks for every configuration unit.

    Attributes:
        source_dir (Path): Directory whose subdirectories are the units.
        target_dir (Path): Already-resolved configuration directory.
        backups (BackupStore): Store used for displaced entries.
        platform (Platform): Platform capability for links and exclusions.
    """

    def __init__(
        self, source_dir: Path, target_dir: Path, backups: BackupStore, platform: Platform
    ) -> None:
        self.source_dir = Path(source_dir).absolute()
        self.target_dir = Path(target_dir).absolute()
        self.backups = backups
        self.platform = platform

    def units(self) -> List[ConfigUnit]:
        return list_units(self.source_dir, self.platform)

    def _new_report(self, operation: str) -> RunReport:
        return RunReport(operation=operation, source_dir=self.source_dir, target_dir=self.target_dir)

    def status(self) -> List[Tuple[ConfigUnit, LinkState]]:
        """Return the live state of every unit. Never modifies anything."""
        return [
            (unit, inspect(unit.target_path(self.target_dir), unit.source_path, self.platform))
            for unit in self.units()
        ]

    def link(self) -> RunReport:
        """Link every unit into the target directory.

        Real entries in the way are moved into a snapshot created for this
        run. Failures are recorded per unit and never stop the run.

        Raises:
            EnumerationError: If the source or target directory cannot be listed.
        """
        report = self._new_report("link")
        units = self.units()
        if self.target_dir.is_dir():
            self._remove_excluded_links(report)
        if not units:
            logger.warning("No config units found in %s", self.source_dir)
            return report

        try:
            self.target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DotlinkError(
                f"Cannot create target directory {self.target_dir}: {e.strerror or e}"
            ) from e

        snapshot = self.backups.snapshot_path()
        for unit in units:
            self._link_unit(unit, snapshot, report)

        if any(result.action is Action.BACKED_UP for result in report.results):
            report.snapshot = snapshot
        return report

    def _remove_excluded_links(self, report: RunReport) -> None:
        # Exclusions match in any letter case.
        try:
            stale = sorted(
                entry
                for entry in self.target_dir.iterdir()
                if entry.is_symlink() and self.platform.is_excluded(entry.name)
            )
        except OSError as e:
            raise EnumerationError(self.target_dir, e.strerror or str(e), "links") from e

        for target in stale:
            name = target.name
            try:
                self.platform.remove_symlink(target)
            except SymlinkError as e:
                logger.warning("%s", e)
                report.add(name, Action.UNLINK_FAILED, str(e))
                continue
            logger.info("Removed %s link, not used on %s", name, self.platform.name)
            report.add(name, Action.EXCLUDED_REMOVED, f"not used on {self.platform.name}")

    def _link_unit(self, unit: ConfigUnit, snapshot: Path, report: RunReport) -> None:
        target = unit.target_path(self.target_dir)
        state = inspect(target, unit.source_path, self.platform)
        logger.debug("%s: %s", unit.name, state.label)

        if state is LinkState.LINKED_CORRECTLY:
            report.add(unit.name, Action.ALREADY_LINKED)
            return

        action = Action.LINKED
        message = ""
        if state is LinkState.LINKED_INCORRECTLY:
            try:
                self.platform.remove_symlink(target)
            except SymlinkError as e:
                logger.warning("%s", e)
                report.add(unit.name, Action.LINK_FAILED, str(e))
                return
            action = Action.RELINKED
        elif state is LinkState.REAL_ENTRY:
            try:
                moved_to = self.backups.move_into(snapshot, unit.name, target)
            except BackupError as e:
                logger.error("%s", e)
                report.add(unit.name, Action.BACKUP_FAILED, str(e))
                return
            action = Action.BACKED_UP
            message = f"backup at {moved_to}"

        try:
            self.platform.create_symlink(target, unit.source_path)
        except SymlinkError as e:
            logger.error("%s", e)
            report.add(unit.name, Action.LINK_FAILED, str(e))
            return

        logger.info("Linked %s -> %s", target, unit.source_path)
        report.add(unit.name, action, message or f"{target} -> {unit.source_path}")

    def unlink(self) -> RunReport:
        """Remove every unit's symlink and restore from the latest snapshot.

        The latest snapshot is chosen once, before any unit is touched, and
        used for the whole run.

        Raises:
            EnumerationError: If the source or backup directory cannot be listed.
        """
        report = self._new_report("unlink")
        units = self.units()
        snapshot = self.backups.latest_snapshot()
        report.snapshot = snapshot
        logger.debug("Restoring from snapshot: %s", snapshot)

        for unit in units:
            self._unlink_unit(unit, snapshot, report)
        return report

    def _unlink_unit(self, unit: ConfigUnit, snapshot: Optional[Path], report: RunReport) -> None:
        target = unit.target_path(self.target_dir)
        state = inspect(target, unit.source_path, self.platform)
        logger.debug("%s: %s", unit.name, state.label)

        if state is LinkState.ABSENT:
            report.add(unit.name, Action.NOT_LINKED)
            return
        if state is LinkState.REAL_ENTRY:
            logger.warning("%s is not a symlink, skipping", target)
            report.add(unit.name, Action.SKIPPED_REAL, f"{target} is not a symlink")
            return

        try:
            self.platform.remove_symlink(target)
        except SymlinkError as e:
            logger.warning("%s", e)
            report.add(unit.name, Action.UNLINK_FAILED, str(e))
            return
        logger.info("Removed symlink %s", target)

        if snapshot is None or not self.backups.has_entry(snapshot, unit.name):
            report.add(unit.name, Action.UNLINKED)
            return

        try:
            self.backups.restore_from(snapshot, unit.name, target)
        except (RestoreConflictError, BackupError) as e:
            logger.warning("%s", e)
            report.add(unit.name, Action.RESTORE_SKIPPED, str(e))
            return
        report.add(unit.name, Action.RESTORED, f"restored from {snapshot.name}")
