"""Persisting ``XDG_CONFIG_HOME`` in the user's shell profile."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import MutableMapping, Optional, Tuple

from .platform import XDG_CONFIG_HOME

logger = logging.getLogger(__name__)

EXPORT_LINE = 'export XDG_CONFIG_HOME="$HOME/.config"'


def ensure_config_home(
    home: Optional[Path] = None,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Tuple[Path, bool]:
    """Make sure ``XDG_CONFIG_HOME`` points at ``~/.config``.

    If the environment already has it, nothing changes. Otherwise the export
    line is appended to ``~/.profile`` (unless it is already there) and set
    in ``environ`` for the rest of this process.

    Args:
        home: Home directory, defaults to ``Path.home()``.
        environ: Environment to read and update, defaults to ``os.environ``.

    Returns:
        Tuple[Path, bool]: The config home and whether the profile was written.
    """
    home = Path.home() if home is None else Path(home)
    environ = os.environ if environ is None else environ
    desired = home / ".config"

    if environ.get(XDG_CONFIG_HOME) == str(desired):
        logger.debug("%s already set: %s", XDG_CONFIG_HOME, desired)
        return desired, False

    profile = home / ".profile"
    written = False
    if profile.is_file() and EXPORT_LINE in profile.read_text().splitlines():
        logger.debug("%s already configured in %s", XDG_CONFIG_HOME, profile)
    else:
        with open(profile, "a") as f:
            f.write(f"\n{EXPORT_LINE}\n")
        logger.info("Configured %s in %s", XDG_CONFIG_HOME, profile)
        written = True

    environ[XDG_CONFIG_HOME] = str(desired)
    return desired, written
