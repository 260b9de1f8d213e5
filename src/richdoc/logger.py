"""Logging for richdoc.

Rendering never raises on bad content, so the log is the only record of
degraded output. Two custom levels sit between the standard ones:

- CHANGES (25): markers emitted, tables filtered, sections dropped
- CHECKS (15): heading hints derived, key-match rules tried
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

LOGGER_NAME = "richdoc"

CHANGES_LEVEL = 25
CHECKS_LEVEL = 15

logging.addLevelName(CHANGES_LEVEL, "CHANGES")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

# Index is the CLI --verbose value
VERBOSITY_LEVELS = (logging.WARNING, CHANGES_LEVEL, CHECKS_LEVEL, logging.DEBUG)


class RichdocLogger(logging.Logger):
    """Logger with one method per verbosity step."""

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(CHANGES_LEVEL):
            self._log(CHANGES_LEVEL, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)


def get_logger() -> RichdocLogger:
    """Return the shared richdoc logger."""
    logging.setLoggerClass(RichdocLogger)
    logger = logging.getLogger(LOGGER_NAME)
    assert isinstance(logger, RichdocLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Point the richdoc logger at a stream for the given verbosity.

    Safe to call repeatedly; earlier handlers are dropped. Verbosity is
    clamped to 0-3, and even 0 shows warnings.
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(VERBOSITY_LEVELS[max(0, min(verbosity, len(VERBOSITY_LEVELS) - 1))])

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Drop handlers and restore defaults. Tests call this between cases."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.WARNING)
    logger.propagate = True


def checks_enabled() -> bool:
    """Whether CHECKS output is on, for callers that build costly messages."""
    return get_logger().isEnabledFor(CHECKS_LEVEL)
