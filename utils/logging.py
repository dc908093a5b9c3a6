"""Logging configuration and traffic formatting helpers."""

import logging
import sys

from utils.exceptions import ConfigurationError

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Traffic dumps from the relay are logged at INFO, so running at WARNING
    leaves only connection problems in the output.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
               Default: INFO

    Raises:
        ConfigurationError: If the level name is not a known logging level
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ConfigurationError(f'Invalid log level: {level}')

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module, typically called with ``__name__``."""
    return logging.getLogger(name)


def format_hex(data: bytes) -> str:
    """Render bytes as space-separated lowercase hex pairs."""
    return ' '.join(f'{b:02x}' for b in data)
