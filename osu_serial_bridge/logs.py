from __future__ import annotations

import sys

from loguru import logger

LOG_FORMAT = "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | {thread.name} | {message}"


def setup_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with a compact stderr sink."""
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT, colorize=True)
