"""Logging setup for perfpair.

The comparison report itself is written to an output stream; this module
only configures the diagnostic log: a console handler on stderr whose level
follows the verbosity flags, and an optional file handler that always
records DEBUG output (per-trial timings, per-input verification results).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

_LOGGER_NAME = "perfpair"
_DEFAULT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_CONSOLE_FORMAT = "%(levelname)-8s %(message)s"


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure and return the root perfpair logger.

    Args:
        verbose: If True, set console log level to DEBUG.
        quiet: If True, set console log level to WARNING. Ignored if *verbose* is True.
        log_file: If provided, add a file handler at DEBUG level to this path.
        stream: Console destination. Defaults to stderr, keeping diagnostics
            out of the report written to stdout.

    Returns:
        The configured root logger for perfpair.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    # Allow reconfiguration when called more than once in a process.
    logger.handlers.clear()

    console = logging.StreamHandler(stream if stream is not None else sys.stderr)
    if verbose:
        console.setLevel(logging.DEBUG)
    elif quiet:
        console.setLevel(logging.WARNING)
    else:
        console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        logger.addHandler(fh)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a named child logger under the perfpair namespace."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")
