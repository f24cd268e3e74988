"""Timestamped backup snapshots of displaced configuration entries.

A snapshot is a directory ``<backup_root>/<YYYYMMDD_HHMMSS>/`` holding the
real files and folders that ``link`` had to move out of the way. Snapshots
accumulate and are never deleted by dotlink. ``unlink`` restores from the
newest one.
"""

from __future__ import annotations

import errno
import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from .errors import BackupError, EnumerationError, RestoreConflictError
from .state import exists_or_dangling

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


@dataclass
class BackupSnapshot:
    """A snapshot directory and the unit names stored in it."""

    path: Path
    entries: List[str] = field(default_factory=list)

    @property
    def timestamp(self) -> str:
        return self.path.name


class BackupStore:
    """Owns the backup directory and every move in and out of it.

    Attributes:
        root (Path): Directory holding all snapshots.
        clock (Callable[[], datetime]): Source of the snapshot timestamp.
    """

    def __init__(self, root: Path, clock: Callable[[], datetime] = datetime.now) -> None:
        """Initialize the backup store.

        Args:
            root (Path): Directory holding all snapshots. Not created here.
            clock (Callable[[], datetime]): Returns the current time. Tests
                pass a fixed clock to get predictable snapshot names.
        """
        self.root = Path(root)
        self.clock = clock

    def snapshot_path(self) -> Path:
        """Return the snapshot path for a run starting now.

        The directory is not created. :meth:`move_into` creates it on first
        use so a run that displaces nothing leaves no trace.
        """
        return self.root / self.clock().strftime(TIMESTAMP_FORMAT)

    def snapshots(self) -> List[Path]:
        """Return all snapshot directories, newest first.

        Raises:
            EnumerationError: If the backup root exists but cannot be read.
        """
        try:
            if not self.root.is_dir():
                return []
            dirs = [d for d in self.root.iterdir() if d.is_dir()]
        except OSError as e:
            raise EnumerationError(self.root, e.strerror or str(e), "backups") from e
        dirs.sort(key=lambda d: d.name, reverse=True)
        return dirs

    def latest_snapshot(self) -> Optional[Path]:
        """Return the newest snapshot directory, or None if there is none."""
        snapshots = self.snapshots()
        return snapshots[0] if snapshots else None

    def list_snapshots(self) -> List[BackupSnapshot]:
        """Return every snapshot with the names of the entries it holds."""
        snapshots = []
        for path in self.snapshots():
            try:
                entries = sorted(entry.name for entry in path.iterdir())
            except OSError as e:
                raise EnumerationError(path, e.strerror or str(e), "backup entries") from e
            snapshots.append(BackupSnapshot(path=path, entries=entries))
        return snapshots

    def has_entry(self, snapshot: Optional[Path], name: str) -> bool:
        """Return True if ``snapshot`` holds an entry called ``name``."""
        return snapshot is not None and exists_or_dangling(snapshot / name)

    def move_into(self, snapshot: Path, name: str, source_entry: Path) -> Path:
        """Move a real entry into ``snapshot/name``.

        Args:
            snapshot (Path): Snapshot directory for this run, created if missing.
            name (str): Name to store the entry under.
            source_entry (Path): The file or directory to displace.

        Returns:
            Path: Where the entry now lives.

        Raises:
            BackupError: If the entry could not be moved. The original is
                still in place when this is raised.
        """
        destination = snapshot / name
        if exists_or_dangling(destination):
            raise BackupError(source_entry, destination, "destination already exists")

        created = not snapshot.exists()
        try:
            snapshot.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BackupError(source_entry, destination, e.strerror or str(e)) from e

        try:
            _relocate(source_entry, destination)
        except OSError as e:
            if created:
                _discard_empty_dir(snapshot)
            raise BackupError(source_entry, destination, e.strerror or str(e)) from e

        logger.info("Backed up %s to %s", source_entry, destination)
        return destination

    def restore_from(self, snapshot: Path, name: str, target: Path) -> Path:
        """Move ``snapshot/name`` back to ``target``.

        Raises:
            RestoreConflictError: If anything exists at ``target``.
            FileNotFoundError: If the snapshot has no entry called ``name``.
            BackupError: If the move itself failed.
        """
        source = snapshot / name
        if not exists_or_dangling(source):
            raise FileNotFoundError(f"No entry {name} in snapshot {snapshot}")
        if exists_or_dangling(target):
            raise RestoreConflictError(target)

        try:
            _relocate(source, target)
        except OSError as e:
            raise BackupError(source, target, e.strerror or str(e)) from e

        logger.info("Restored %s from %s", target, snapshot)
        return target


def _relocate(source: Path, destination: Path) -> None:
    """Rename ``source`` to ``destination``, copying across filesystems.

    The cross-device path copies first and deletes the original only after
    the copy succeeded. A failed copy is cleaned up and the original kept.
    """
    try:
        source.rename(destination)
        return
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise

    logger.debug("Cross-device move of %s, copying instead", source)
    is_tree = source.is_dir() and not source.is_symlink()
    try:
        if is_tree:
            shutil.copytree(source, destination, symlinks=True)
        else:
            shutil.copy2(source, destination, follow_symlinks=False)
    except OSError:
        _remove_entry(destination)
        raise

    if is_tree:
        shutil.rmtree(source)
    else:
        source.unlink()


def _remove_entry(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path, ignore_errors=True)
    elif exists_or_dangling(path):
        path.unlink()


def _discard_empty_dir(path: Path) -> None:
    try:
        path.rmdir()
    except OSError:
        logger.debug("Could not remove snapshot directory %s", path)
