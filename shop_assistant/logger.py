"""
Logging configuration for the shopping assistant.

Provides a package logger whose level is set through LOG_LEVEL.
"""

import logging
import sys
from typing import Optional

from shop_assistant.config import LOG_LEVEL

logger = logging.getLogger("shop_assistant")
logger.setLevel(LOG_LEVEL)

if not logger.handlers:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(LOG_LEVEL)

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

# Avoid duplicate records through the root logger
logger.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Optional suffix appended to 'shop_assistant'

    Returns:
        Logger instance
    """
    if name:
        return logging.getLogger(f"shop_assistant.{name}")
    return logger
