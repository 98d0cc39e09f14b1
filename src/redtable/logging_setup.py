"""
Logging setup for redtable.
"""

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from .config import LoggingConfig


def setup_logging(config: LoggingConfig, level: Optional[str] = None) -> logging.Logger:
    """
    Configure the `redtable` logger from a LoggingConfig.

    Args:
        config: Logging configuration
        level: Overrides config.level when given (e.g. DEBUG from --debug)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger("redtable")
    logger.setLevel(level or config.level)

    # Replace handlers from an earlier call instead of stacking them.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.format)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if config.file:
        file_handler = RotatingFileHandler(
            config.file,
            maxBytes=config.max_size,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
