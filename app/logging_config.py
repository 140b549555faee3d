from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

PROJECT_LOGGERS = ("domain", "adapters", "app")


def setup_logging(level: int | str = logging.WARNING, console: Console | None = None) -> None:
    """Route project loggers to a rich handler on stderr.

    Safe to call more than once; previous handlers are replaced.
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%X]"))
    for name in PROJECT_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        if logger.hasHandlers():
            logger.handlers.clear()
        logger.addHandler(handler)
        logger.propagate = False
