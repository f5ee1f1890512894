"""Logging configuration for axwatch."""

import logging
from pathlib import Path

from axwatch.config import Config

LOGGER_NAME = "axwatch"


def setup_logging(config: Config) -> logging.Logger:
    """Set up logging based on configuration.

    Calling again replaces the handlers installed by the previous call, so
    the logger always reflects the latest config.

    Args:
        config: Configuration object with log settings.

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(LOGGER_NAME)
    reset_logging()
    logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))

    # Log format: 2025-01-27 10:30:45 [INFO] message
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    formatter.datefmt = "%Y-%m-%d %H:%M:%S"

    if config.log_file:
        log_path = Path(config.log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Prevent propagation to root logger
    logger.propagate = False

    return logger


def reset_logging() -> None:
    """Remove and close handlers installed by setup_logging."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
