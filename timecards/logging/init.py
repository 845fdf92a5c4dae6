from __future__ import annotations

import logging
import sys

"""Console logging for the converter.

Lines look like ``LABEL message`` where LABEL is one of
DEBUG | INFO | WARN | ERROR | SUMMARY. Output shares stdout with the
confirmation prompts so the two read in order.

Modules log through ``logging.getLogger(__name__)``; their records reach the
``timecards`` logger. In debug mode a DEBUG line also names the module it
came from, e.g. ``DEBUG [excel.timecards] parsed 3 employees``.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "get_logger",
    "log_summary",
    "reset_logging",
    "set_debug",
    "setup_logging",
]

LOGGER_NAME = "timecards"

# between INFO=20 and WARNING=30
SUMMARY_LEVEL = 25
SUMMARY_LABEL = "SUMMARY"

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Formatter producing ``LABEL message`` lines."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: SUMMARY_LABEL,
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        origin = _module_origin(record.name)
        if record.levelno == logging.DEBUG and origin:
            return f"{label} [{origin}] {record.getMessage()}"
        return f"{label} {record.getMessage()}"


def _module_origin(name: str) -> str:
    """``timecards.excel.timecards`` -> ``excel.timecards``; app logger -> ``""``."""
    prefix = LOGGER_NAME + "."
    return name[len(prefix):] if name.startswith(prefix) else ""


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure the ``timecards`` logger once and return it.

    A second call returns the same logger; ``debug=True`` still lowers its
    level so ``--debug`` works after an earlier setup.
    """
    global _logger

    if _logger is None:
        logging.addLevelName(SUMMARY_LEVEL, SUMMARY_LABEL)

        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(logging.INFO)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(logging.INFO)
        handler.setFormatter(LabeledFormatter())
        logger.addHandler(handler)

        # the root logger must not print the same record again
        logger.propagate = False
        _logger = logger

    if debug:
        set_debug(_logger)
    return _logger


def get_logger() -> logging.Logger:
    if _logger is None:
        return setup_logging()
    return _logger


def set_debug(logger: logging.Logger) -> None:
    """Lower the logger and its handlers to DEBUG."""
    for h in logger.handlers:
        h.setLevel(logging.DEBUG)
    logger.setLevel(logging.DEBUG)


def log_summary(line: str) -> None:
    """Log a run summary at SUMMARY level.

    Accepts either the bare ``key=value`` fields or a line already rendered
    with the ``SUMMARY`` label; the label is printed exactly once.
    """
    prefix = SUMMARY_LABEL + " "
    if line.startswith(prefix):
        line = line[len(prefix):]
    get_logger().log(SUMMARY_LEVEL, line)


def reset_logging() -> None:
    """Forget the configured logger. Mainly for tests."""
    global _logger
    _logger = None
