"""Logging helpers"""

import logging
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

ROOT_LOGGER = 'rclone_wrapper'
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
JSON_LOG_FORMAT = '%(asctime)s %(name)s %(levelname)s %(message)s'


def get_logger(name: str) -> logging.Logger:
    """Return a module logger under the package namespace."""
    return logging.getLogger(name)


def setup_logging(level: str = 'WARNING', log_format: Optional[str] = None,
                  json_format: bool = False, stream=None) -> logging.Logger:
    """
    Configure the package logger.

    Log records go to stderr so they never mix with command output.
    Calling this again replaces the previously installed handler.

    Args:
        level: Log level name
        log_format: Format string for plain text output
        json_format: Emit one JSON object per record instead of text
        stream: Output stream (default: sys.stderr)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, str(level).upper(), logging.WARNING))

    for handler in list(logger.handlers):
        if getattr(handler, '_rclone_wrapper', False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    if json_format:
        handler.setFormatter(jsonlogger.JsonFormatter(JSON_LOG_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(log_format or DEFAULT_LOG_FORMAT))
    handler._rclone_wrapper = True
    logger.addHandler(handler)
    logger.propagate = False

    return logger
