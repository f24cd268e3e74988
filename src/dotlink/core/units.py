"""Discovery of configuration units in the source tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

from .errors import EnumerationError
from .platform import Platform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigUnit:
    """A named configuration folder managed as one linking target."""

    name: str
    source_path: Path

    def target_path(self, target_dir: Path) -> Path:
        """Return where this unit is linked inside ``target_dir``."""
        return target_dir / self.name


def list_units(source_dir: Path, platform: Platform) -> List[ConfigUnit]:
    """List the configuration units under ``source_dir``.

    Only first-level real directories are units; symlinks inside the source
    tree are skipped. Units excluded by ``platform`` are left out. The result
    is sorted by name.

    Args:
        source_dir: Root of the versioned configuration tree.
        platform: Platform whose exclusion rules apply.

    Returns:
        List[ConfigUnit]: Units in name order, empty if ``source_dir`` is missing.

    Raises:
        EnumerationError: If ``source_dir`` exists but cannot be read.
    """
    source_dir = Path(source_dir).absolute()
    if not source_dir.is_dir():
        logger.debug("Source directory %s does not exist", source_dir)
        return []

    try:
        entries = [
            entry
            for entry in source_dir.iterdir()
            if entry.is_dir() and not entry.is_symlink()
        ]
    except OSError as e:
        raise EnumerationError(source_dir, e.strerror or str(e)) from e

    units = []
    for entry in entries:
        if platform.is_excluded(entry.name):
            logger.debug("Skipping %s: excluded on %s", entry.name, platform.name)
            continue
        units.append(ConfigUnit(name=entry.name, source_path=entry))

    units.sort(key=lambda unit: unit.name)
    return units
