"""Loguru configuration for CLI runs."""

import sys

from loguru import logger

LOG_FORMAT = "<level>{level: <8}</level> | {message}"


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr, at DEBUG level when verbose."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format=LOG_FORMAT,
        colorize=None,
    )
