"""Logging setup for microbench.

Every microbench module logs through the ``microbench`` logger
hierarchy.  The console handler writes to stderr so that machine-readable
output (``--format json``/``csv``) on stdout stays clean; an optional file
handler records everything at DEBUG, including per-phase progress.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_LOGGER_NAME = "microbench"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_CONSOLE_FORMAT = "%(levelname)-8s %(message)s"


def _console_level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure and return the ``microbench`` logger.

    Calling it again replaces the handlers from the previous call.

    Args:
        verbose: Show DEBUG messages (progress of every phase) on the console.
        quiet: Only show warnings and errors.  Ignored if *verbose* is True.
        log_file: Also write every message, at DEBUG, to this file.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(_console_level(verbose, quiet))
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the ``microbench.<name>`` child logger."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")
