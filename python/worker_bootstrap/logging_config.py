"""Logging configuration for the worker bootstrap supervisor."""

import logging
import os
import sys
from typing import Union


def parse_level(value: Union[str, int]) -> int:
    """Convert a level name or number into a ``logging`` level.

    Args:
        value: Level name (case-insensitive, e.g. "info") or a numeric level,
            either as an int or a string of digits.

    Returns:
        The numeric logging level.

    Raises:
        ValueError: If the name is not a registered logging level.
    """
    if isinstance(value, int):
        return value

    level = value.strip().upper()
    if level.isdigit():
        return int(level)

    # "WARN" is accepted by logging as an alias of WARNING
    resolved = logging.getLevelName(level)
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: '{value}'")
    return resolved


def get_logger(name: str = "worker_bootstrap") -> logging.Logger:
    """Get a configured logger for the package.

    The logger uses BOOTSTRAP_LOG_LEVEL (or LOG_LEVEL) to determine the log level.
    If neither is set, defaults to INFO so that every worker state transition
    is visible on the console next to the worker's own output.

    Returns:
        Configured logger instance for the package.
    """
    logger = logging.getLogger(name)

    # Only configure if not already configured
    if not logger.handlers:
        level = os.getenv("BOOTSTRAP_LOG_LEVEL", os.getenv("LOG_LEVEL", "INFO"))

        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "[%(levelname)s] %(name)s - %(filename)s:%(lineno)d: %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        try:
            logger.setLevel(parse_level(level))
        except ValueError:
            # Reported by configuration validation, which runs after import
            logger.setLevel(logging.INFO)

        # Prevent propagation to avoid duplicate logs
        logger.propagate = False

    return logger


def set_package_level(level: Union[str, int]) -> None:
    """Apply a log level to every logger already created under the package."""
    numeric = parse_level(level)
    prefix = "worker_bootstrap"
    for name in list(logging.root.manager.loggerDict):
        if name == prefix or name.startswith(prefix + "."):
            logging.getLogger(name).setLevel(numeric)


# Package logger instance
logger = get_logger()
