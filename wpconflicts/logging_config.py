"""Logging configuration for wpconflicts.

Log records go to stderr; stdout carries the generated document only.
"""

import logging
import sys

LOGGER_NAME = "wpconflicts"


def setup_logging(level: str = "WARNING", verbose: bool = False) -> logging.Logger:
    """Configure the ``wpconflicts`` logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        verbose: Log at DEBUG with source locations, overriding ``level``.

    Returns:
        The configured package logger.
    """
    numeric_level = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    if verbose:
        fmt = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
    else:
        fmt = "%(levelname)s - %(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)

    return logger
