"""Logging setup shared by the server and the CLI."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Route log records through a single rich handler on the root logger.

    Calling this more than once only updates the level.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())
    if any(isinstance(handler, RichHandler) for handler in root.handlers):
        return
    handler = RichHandler(rich_tracebacks=True, show_time=True, show_level=True)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="[%X]"))
    root.addHandler(handler)


__all__ = ["configure_logging"]
