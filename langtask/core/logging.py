"""
Logging helpers for langtask.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

_ROOT_LOGGER = "langtask"


def get_logger(name: str) -> logging.Logger:
    """Return a module logger under the langtask namespace."""
    return logging.getLogger(name)


def setup_logging(level: str | int = "WARNING", rich_output: bool = True) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Logging level name or number
        rich_output: Render records through rich instead of plain stderr text

    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger(_ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if rich_output:
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
