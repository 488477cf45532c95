"""Logging setup for the flexcon namespace.

Log records go to stderr. The console calls configure_logging() after
entering prompt_toolkit's patch_stdout() so that the handler binds to the
patched stream and log lines are printed above the input prompt instead of
through it.
"""

from __future__ import annotations

import logging
import sys

FLEXCON_LOGGER_NAME = "flexcon"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


def configure_logging(level: int | str = logging.WARNING) -> logging.Handler:
    """Attach a stderr handler to the flexcon namespace logger.

    Safe to call more than once; previous handlers are replaced so a
    reconfigure (e.g. after stdout/stderr were patched) does not duplicate
    output.

    Args:
        level: Logging level as int or name ("DEBUG", "INFO", ...).

    Returns:
        The installed handler.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    flexcon_logger = logging.getLogger(FLEXCON_LOGGER_NAME)
    flexcon_logger.setLevel(level)

    # Remove any existing handlers to avoid duplicates on reconfigure
    for old in list(flexcon_logger.handlers):
        flexcon_logger.removeHandler(old)
    flexcon_logger.addHandler(handler)

    # Don't propagate to root logger
    flexcon_logger.propagate = False

    return handler
