"""
Logging setup for the CLI.

Library modules log through ``logging.getLogger(__name__)`` under the
``timesheet_csv`` namespace; the CLI attaches one stderr handler with
labeled prefixes (DEBUG|INFO|WARN|ERROR) to that namespace.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOGGER_NAME = "timesheet_csv"


class LabeledFormatter(logging.Formatter):
    """Formats records as ``LABEL message``."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{label} {record.getMessage()}"


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Repeated calls replace the handler rather than adding another, so the
    logger always writes to the current ``sys.stderr`` exactly once.

    Args:
        verbose: Show debug output
        quiet: Show errors only
        stream: Destination (defaults to stderr)

    Returns:
        The package logger
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)

    # Clear any existing handlers to avoid duplication
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.setLevel(level)

    # Prevent propagation to root logger to avoid duplicate output
    logger.propagate = False
    return logger


def reset_logging() -> None:
    """Drop the CLI handler and restore defaults. Mainly for testing purposes."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
