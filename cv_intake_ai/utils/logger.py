"""Logging setup for the CV intake pipeline: one stdout handler on the package root logger."""

import logging
import sys
from typing import Optional

from cv_intake_ai.config import LOG_LEVEL

ROOT_LOGGER_NAME = "cv_intake_ai"
LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)
        level = logging.getLevelName(LOG_LEVEL.upper())
        root.setLevel(level if isinstance(level, int) else logging.INFO)
    return root


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Logger under the package root (module names already are). Records propagate
    to the root handler, so upload logs from every stage share one format.
    """
    _configure_root()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger
