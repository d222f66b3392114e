"""Logging for the repodock CLI, pipeline workers and HTTP service.

Everything logs under the ``repodock`` hierarchy to stderr, which keeps stdout
free for the JSON documents the CLI prints.
"""

from __future__ import annotations

import logging
import sys

_LOGGER_NAME = "repodock"

CONSOLE_FORMAT = "[repodock] %(levelname)s %(message)s"
# Generation and checking run on pipeline worker threads; name them in debug output.
VERBOSE_FORMAT = "[repodock] %(levelname)s %(threadName)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the repodock hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def resolve_level(*, verbose: bool = False, quiet: bool = False) -> int:
    """``--verbose`` wins over ``--quiet`` when both are given."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Attach a single stderr handler to the repodock logger."""
    level = resolve_level(verbose=verbose, quiet=quiet)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated CLI invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(VERBOSE_FORMAT if verbose else CONSOLE_FORMAT))
    logger.addHandler(handler)
    return logger


__all__ = ["CONSOLE_FORMAT", "VERBOSE_FORMAT", "configure_logging", "get_logger", "resolve_level"]
