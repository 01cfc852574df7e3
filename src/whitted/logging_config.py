"""Logging setup for command-line use.

Library modules only create module loggers; handlers are installed here and
nowhere else.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def setup_logging(level: str | int = "INFO") -> logging.Logger:
    """Configure the ``src.whitted`` logger hierarchy.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR) or number.

    Returns:
        The package root logger.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("src.whitted")
    logger.setLevel(level)

    # Re-running setup (tests, repeated CLI calls) must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(console_handler)
    logger.propagate = False

    return logger
