"""Logging configuration for dotlink.

Console logging goes through rich so warnings from the engine line up with
the reporter's output. An optional log file receives everything at debug
level in a plain, greppable format.

Example:
    ```python
    from dotlink.core.logging import setup_logging

    setup_logging(debug=True, log_file="~/.local/state/dotlink.log")
    ```
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    debug: bool = False,
    log_file: Optional[str] = None,
    console: Optional[Console] = None,
) -> None:
    """Set up logging for the dotlink loggers.

    Without ``debug`` only warnings reach the console; per-unit progress is
    printed by the reporter instead.

    Args:
        debug: Show debug messages, source paths and local variables in
            tracebacks on the console.
        log_file: Optional path to a log file, ``~`` is expanded and parent
            directories are created.
        console: Console to log to, stderr by default.
    """
    logger = logging.getLogger("dotlink")
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=debug,
        enable_link_path=debug,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=debug,
    )
    console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    logger.debug("Logging initialized (debug=%s)", debug)
    if log_file:
        logger.debug("Log file: %s", log_file)
