"""
Logging configuration.

All modules log through the ``due_diligence`` logger or one of its children,
so a single stdout handler formats every pipeline event.
"""
import logging
import sys

from diligence.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

logger = logging.getLogger("due_diligence")
logger.setLevel(settings.LOG_LEVEL)

if not logger.handlers:
    _handler = logging.StreamHandler(sys.stdout)
    _handler.setLevel(settings.LOG_LEVEL)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(_handler)


def get_logger(name: str) -> logging.Logger:
    """Child logger sharing the application handler, e.g. ``due_diligence.runner``."""
    return logger.getChild(name)
