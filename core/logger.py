"""Logging setup shared by every module.

`get_logger(name)` returns a logger writing to stderr and, outside the test
environment, to a size-rotated `logs/app.log`.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from core.config import settings

LOG_DIR = os.path.join(os.path.dirname(__file__), "..", "logs")
LOG_FILE = os.path.join(LOG_DIR, "app.log")
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _build_handlers():
    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.StreamHandler()]
    if not settings.is_testing():
        os.makedirs(LOG_DIR, exist_ok=True)
        handlers.append(RotatingFileHandler(LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3))
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


_handlers = _build_handlers()


def get_logger(name: str = __name__, level: str = None) -> logging.Logger:
    """Return a logger for `name` at `level` (default: `settings.log_level`)."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel((level or settings.log_level).upper())
        for handler in _handlers:
            logger.addHandler(handler)
    return logger
