"""Logger configuration for fnkit."""

import logging
import os
import sys

__all__ = ["get_logger", "setup_logger"]

ROOT_LOGGER = "fnkit"

logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())


def setup_logger(
    name: str = ROOT_LOGGER,
    level: str | None = None,
    format_string: str | None = None,
) -> logging.Logger:
    """
    Configure and return a logger writing to stdout.

    Library code never calls this; applications opt in when they want to see
    fnkit's debug output.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Falls back
               to the FNKIT_LOG_LEVEL environment variable, then WARNING.
        format_string: Custom format string

    Returns:
        Configured logger instance
    """
    level = level or os.getenv("FNKIT_LOG_LEVEL", "WARNING")
    format_string = format_string or (
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    logger = logging.getLogger(name)

    # Only configure if not already configured
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(fmt=format_string, datefmt="%Y-%m-%d %H:%M:%S")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(getattr(logging, level.upper()))
        logger.propagate = False

    return logger


def get_logger(module: str) -> logging.Logger:
    """Child logger of the package logger, e.g. ``fnkit.decorators``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{module}")
