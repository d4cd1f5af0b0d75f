"""Logging configuration for the craft catalog."""

import logging
import sys

from .config import Settings

PACKAGE_LOGGER = "craftcatalog"


def setup_logging(settings: Settings) -> logging.Logger:
    """
    Configure the package logger from settings.

    A single stderr handler is installed on the ``craftcatalog`` logger;
    handlers from an earlier call are closed and replaced.

    Args:
        settings: Loaded catalog settings

    Returns:
        The configured package logger
    """
    handler = logging.StreamHandler(sys.stderr)

    if settings.log_format == "json":
        formatter = logging.Formatter(
            '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
            '"module": "%(name)s", "message": "%(message)s"}'
        )
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(settings.log_level)

    for old_handler in logger.handlers[:]:
        old_handler.close()
        logger.removeHandler(old_handler)

    logger.addHandler(handler)
    return logger
