"""
Logging setup shared by the CLI and the API service.
"""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Install a single stdout handler on the ``loadsim`` logger.

    Args:
        level: Log level name; falls back to LOADSIM_LOG_LEVEL, then INFO.

    Returns:
        The configured package logger.
    """
    level = (level or os.getenv("LOADSIM_LOG_LEVEL", "INFO")).upper()
    logger = logging.getLogger("loadsim")
    logger.setLevel(getattr(logging, level))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    return logger
