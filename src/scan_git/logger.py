"""Logging utilities with rich console output.

Usage:
    from scan_git.logger import get_logger

    logger = get_logger(__name__)
    logger.debug("Walking history from %s", head)
"""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

# Diagnostics go to stderr so CLI output stays machine readable
console = Console(stderr=True)


def _rich_handler() -> RichHandler:
    handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    return handler


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Get a logger for a scan-git module.

    Library modules never attach handlers themselves; ``setup_logging``
    does that once at the entry point. ``level`` is only applied when given.

    Args:
        name: Logger name (typically ``__name__``)
        level: Optional level name (DEBUG, INFO, ...)

    Returns:
        The logger instance
    """
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level.upper())
    return logger


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Configure the ``scan_git`` logger tree for the CLI.

    Without an explicit ``level``, ``LOG_LEVEL`` from the environment is
    used, falling back to INFO.

    Args:
        level: Logging level, taking precedence over ``LOG_LEVEL``
        log_file: Optional file path to also log to a file
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    root_logger = logging.getLogger("scan_git")
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(_rich_handler())

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)
