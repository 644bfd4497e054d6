"""
Logging setup.

All cashbook loggers hang off the "cashbook" package logger, which writes
through rich so log lines match the CLI's console output.
"""
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "cashbook"

# Logs go to stderr so they never mix with command output
_console = Console(stderr=True)

def _package_logger() -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER_NAME)

    # Avoid duplicate handlers
    if not logger.handlers:
        handler = RichHandler(console=_console, show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%X]"))
        logger.addHandler(handler)
        logger.setLevel(logging.WARNING)
    return logger

def get_logger(name: str) -> logging.Logger:
    """
    Return a logger under the cashbook package logger.

    Args:
        name: Logger name (usually __name__)
    """
    _package_logger()
    return logging.getLogger(name)

def configure_logging(level: Optional[str]) -> None:
    """
    Set the level of every cashbook logger.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR). Ignored if None.
    """
    if level:
        _package_logger().setLevel(level.upper())
