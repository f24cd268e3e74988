"""Opening the dotfiles repository in an editor."""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Iterable, List, Mapping, Optional

from .errors import EditorError


def find_editor(
    editors: Iterable[str],
    environ: Optional[Mapping[str, str]] = None,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> Optional[List[str]]:
    """Return the editor command line to use, or None.

    ``$EDITOR`` wins when set; it may carry arguments (``code --wait``).
    Otherwise the first of ``editors`` found on ``PATH`` is used.
    """
    environ = os.environ if environ is None else environ
    configured = environ.get("EDITOR", "").strip()
    if configured:
        return shlex.split(configured)
    for editor in editors:
        if which(editor):
            return [editor]
    return None


def open_in_editor(
    path: Path,
    editors: Iterable[str],
    environ: Optional[Mapping[str, str]] = None,
    which: Callable[[str], Optional[str]] = shutil.which,
    run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> List[str]:
    """Open ``path`` in the chosen editor and return the command used.

    Raises:
        EditorError: If no editor is available or it cannot be started.
    """
    command = find_editor(editors, environ, which)
    if command is None:
        raise EditorError("No editor found")
    command = command + [str(path)]
    try:
        run(command, check=False)
    except OSError as e:
        raise EditorError(f"Could not start {command[0]}: {e}") from e
    return command
