"""Classification of link targets against the live filesystem."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from .platform import Platform


class LinkState(Enum):
    """Current state of a unit's target path."""

    ABSENT = "Not linked"
    LINKED_CORRECTLY = "Linked"
    LINKED_INCORRECTLY = "Wrong target"
    REAL_ENTRY = "Exists (not symlink)"

    @property
    def label(self) -> str:
        return self.value

    @property
    def is_link(self) -> bool:
        return self in (LinkState.LINKED_CORRECTLY, LinkState.LINKED_INCORRECTLY)


def exists_or_dangling(path: Path) -> bool:
    """Return True if anything is at ``path``, including a dangling symlink."""
    return path.is_symlink() or path.exists()


def inspect(target: Path, expected_source: Path, platform: Platform) -> LinkState:
    """Classify ``target`` relative to the source it should link to.

    Never cached: every call reads the filesystem.
    """
    if target.is_symlink():
        if platform.same_path(target, expected_source):
            return LinkState.LINKED_CORRECTLY
        return LinkState.LINKED_INCORRECTLY
    if target.exists():
        return LinkState.REAL_ENTRY
    return LinkState.ABSENT
