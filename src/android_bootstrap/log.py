"""Loguru-based logging setup."""

import sys

from loguru import logger


def setup_logger(verbose: bool = False):
    """Configure loguru with a single console sink."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format="<green>{time:HH:mm:ss}</green> | <level>{level:<7}</level> | {message}",
        colorize=True,
    )
