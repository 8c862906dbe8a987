"""Logging configuration for Claude Token Monitor."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(log_level: str = "WARNING") -> None:
    """Route the package's log records to stderr through rich.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    numeric_level = getattr(logging, log_level.upper(), logging.WARNING)
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logger = logging.getLogger("claude_token_monitor")
    logger.handlers = [handler]
    logger.setLevel(numeric_level)
    # Records are printed here only, not again by a configured root logger
    logger.propagate = False
