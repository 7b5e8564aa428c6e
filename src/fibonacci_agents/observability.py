"""Logging setup for the Fibonacci agents."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "fibonacci_agents"


def setup_logging(
    level: str | int = logging.WARNING,
    log_file: Path | None = None,
    console: Console | None = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Console output goes through rich so it interleaves cleanly with the chat
    transcript; the optional file handler always records DEBUG and above.

    Args:
        level: Level for console output
        log_file: Optional path of a detailed log file
        console: Rich console to log to (stderr by default)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.handlers = []

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    return logger
