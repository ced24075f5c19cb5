"""Logging setup shared by every mair module."""

import logging
import sys
from typing import Union

ROOT_LOGGER = "mair"
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def setup_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Attach a stdout handler to the ``mair`` logger, once.

    Args:
        level: Numeric level or level name such as ``"DEBUG"``.

    Returns:
        The ``mair`` logger. Later calls only change its level.
    """
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger(ROOT_LOGGER)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    logger.setLevel(level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for module ``name``, nested under ``mair``."""
    if not logging.getLogger(ROOT_LOGGER).handlers:
        setup_logging()

    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
