"""
Logging helpers shared across the package.

Modules log through ``logger`` (or a child from ``get_logger``); the
application entry point calls ``setup_logger`` once to attach a handler.
"""

import logging
import sys
from typing import Optional, Union

_LOGGER_NAME = "airdrop_claim"
_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"

logger = logging.getLogger(_LOGGER_NAME)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the package logger, or one of its children (``airdrop_claim.<name>``)."""
    if not name:
        return logger
    return logger.getChild(name)


def setup_logger(level: Union[int, str] = "INFO", stream=None) -> logging.Logger:
    """
    Attach a single stream handler to the package logger.

    Calling it again only updates the level, so repeated application
    start-ups (tests, reloads) do not duplicate log lines.

    Args:
        level: Logging level name or number (e.g. "DEBUG").
        stream: Output stream; defaults to stderr.

    Returns:
        The configured package logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger.setLevel(level)
    if not any(getattr(h, "_airdrop_claim", False) for h in logger.handlers):
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._airdrop_claim = True
        logger.addHandler(handler)
    logger.propagate = False
    return logger
