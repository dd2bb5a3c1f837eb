"""Logging configuration for critpath with semantic verbosity levels."""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

# Custom levels between the standard ones
CHANGES_LEVEL = 25  # Between INFO and WARNING - build summaries (verbosity 1)
CHECKS_LEVEL = 15  # Between DEBUG and INFO - resolution and path checks (verbosity 2)

logging.addLevelName(CHANGES_LEVEL, "CHANGES")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

VERBOSITY_SILENT = 0
VERBOSITY_CHANGES = 1
VERBOSITY_CHECKS = 2
VERBOSITY_DEBUG = 3

_LEVELS = {
    VERBOSITY_SILENT: logging.ERROR,
    VERBOSITY_CHANGES: CHANGES_LEVEL,
    VERBOSITY_CHECKS: CHECKS_LEVEL,
    VERBOSITY_DEBUG: logging.DEBUG,
}


class CritpathLogger(logging.Logger):
    """Logger with methods named after what the engine reports.

    - changes(): one line per build (task count, edges, critical path)
    - checks(): dependency resolution and root comparisons
    - debug(): node-by-node path expansion
    """

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a build summary (verbosity level 1)."""
        if self.isEnabledFor(CHANGES_LEVEL):
            self._log(CHANGES_LEVEL, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a resolution or comparison check (verbosity level 2)."""
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)


def get_logger() -> CritpathLogger:
    """Return the shared ``critpath`` logger.

    Configure it with setup_logger() before first use; until then only
    errors are emitted.
    """
    logging.setLoggerClass(CritpathLogger)
    logger = logging.getLogger("critpath")
    assert isinstance(logger, CritpathLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Configure the critpath logger.

    Safe to call repeatedly; existing handlers are replaced.

    Args:
        verbosity: 0=errors only, 1=changes, 2=checks, 3=debug
        stream: Output stream, defaults to sys.stderr
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(_LEVELS.get(verbosity, logging.ERROR))

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Drop handlers and return to errors-only (used between tests)."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.ERROR)


def is_silent() -> bool:
    return get_logger().level >= logging.ERROR


def changes_enabled() -> bool:
    return get_logger().isEnabledFor(CHANGES_LEVEL)


def checks_enabled() -> bool:
    return get_logger().isEnabledFor(CHECKS_LEVEL)


def debug_enabled() -> bool:
    return get_logger().isEnabledFor(logging.DEBUG)
