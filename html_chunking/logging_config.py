"""
Logging Configuration Module

Log records go to stderr so that stdout stays free for the chunk summary
and the JSON quality report. The level comes from the -v / -q flags, then
from CHUNKING_LOG_LEVEL, then defaults to INFO.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = "html_chunking"
LOG_LEVEL_ENV = "CHUNKING_LOG_LEVEL"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_log_level(verbose: bool = False, quiet: bool = False) -> int:
    """
    Pick the package log level.

    Args:
        verbose: -v was given (DEBUG)
        quiet: -q was given (WARNING); verbose wins if both are set

    Returns:
        A logging level number.
    """
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING

    value = os.environ.get(LOG_LEVEL_ENV, "").strip()
    if not value:
        return logging.INFO
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    # getLevelName returns "Level X" for names it does not know.
    return level if isinstance(level, int) else logging.INFO


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Configure the package logger with a stderr handler and an optional file.

    Calling it again replaces the handlers from the previous call.

    Args:
        level: Logging level (default: INFO)
        log_file: Optional path to log file; always written at DEBUG
        format_string: Optional custom format string

    Returns:
        Configured package logger
    """
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.setLevel(logging.DEBUG if log_file else level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger below the package logger."""
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
