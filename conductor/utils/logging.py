"""Logging helpers built on loguru.

``configure_logging`` is called once at process start with the level from
``app_settings.logging.level``. Modules then obtain a logger bound to their
name with ``get_logger`` and hand it to the components they construct.
"""

from __future__ import annotations

import sys

from loguru import logger

_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan> - <level>{message}</level>"
)

logger.configure(extra={"module": "conductor"})


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with a single stderr sink at *level*."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=_LOG_FORMAT)


def get_logger(name: str):
    """Return the shared loguru logger bound to *name*."""
    return logger.bind(module=name)
