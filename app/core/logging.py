"""
Logging setup - one console handler for the "tekton" logger tree.

Every module logs through a named child logger:

    logger = logging.getLogger("tekton.routers.callback")

configure_logging() is called once when the app is created.
"""

import logging
import sys

from app.core.config import settings


LOGGER_NAME = "tekton"
LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | None = None) -> logging.Logger:
    """
    Attach a stdout handler to the root "tekton" logger.

    Safe to call more than once (tests create the app repeatedly);
    the handler is only added the first time.

    Args:
        level: Override for settings.LOG_LEVEL

    Returns:
        The configured "tekton" logger
    """
    if settings.DEBUG:
        level = "DEBUG"
    level_name = (level or settings.LOG_LEVEL).upper()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level_name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger
