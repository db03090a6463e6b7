"""Logging levels and verbosity handling for saferenv.

Modules log through ``logging.getLogger(__name__)``; only the CLI calls
:func:`setup_logging`.  Diagnostics go to stderr so that the printed
environment on stdout stays machine-readable.
"""
from __future__ import annotations

import logging
import sys
from typing import TextIO

from saferenv.core.errors import InvalidVerbosity

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_FORMAT = "[%(levelname)s %(name)s] %(message)s"

# -v count -> level.
VERBOSITY_LEVELS: tuple[int, ...] = (
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
    TRACE,
)
MAX_VERBOSITY = len(VERBOSITY_LEVELS) - 1


def level_for_verbosity(verbosity: int) -> int:
    """Map a ``-v`` count to a logging level.

    Raises
    ------
    InvalidVerbosity
        If *verbosity* is greater than :data:`MAX_VERBOSITY`.
    """
    if verbosity < 0 or verbosity > MAX_VERBOSITY:
        raise InvalidVerbosity(details={"verbosity": verbosity, "max": MAX_VERBOSITY})
    return VERBOSITY_LEVELS[verbosity]


def setup_logging(verbosity: int, stream: TextIO | None = None) -> int:
    """Configure the root logger for *verbosity* and return the chosen level."""
    level = level_for_verbosity(verbosity)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        stream=stream or sys.stderr,
        force=True,
    )
    return level
