"""Logging setup for toolweave.

Library code only ever calls ``logging.getLogger("toolweave...")``; handlers
are installed once by the application through configure_logging.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from ..config import LoggingSettings

ROOT_LOGGER_NAME = "toolweave"


def configure_logging(
    settings: Optional[LoggingSettings] = None,
    logger_name: str = ROOT_LOGGER_NAME,
) -> logging.Logger:
    """Configure the toolweave logger from a [logging] table.

    Installs a single stream handler; calling it again only updates the
    level and format.

    Args:
        settings: Logging settings (defaults to INFO)
        logger_name: Logger to configure

    Returns:
        The configured logger
    """
    settings = settings or LoggingSettings()
    logger = logging.getLogger(logger_name)
    level = logging.getLevelName(settings.level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {settings.level}")
    logger.setLevel(level)

    formatter = logging.Formatter(settings.format)
    handler = next(
        (h for h in logger.handlers if getattr(h, "_toolweave_handler", False)), None
    )
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler._toolweave_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    handler.setFormatter(formatter)
    return logger


__all__ = ["ROOT_LOGGER_NAME", "configure_logging"]
