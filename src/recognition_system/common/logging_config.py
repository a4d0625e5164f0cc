from __future__ import annotations

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
PACKAGE_LOGGER = "recognition_system"


def setup_logging(level: str = "INFO", *, stream=None) -> logging.Logger:
    """Configure the package logger. Safe to call more than once."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(_resolve_level(level))

    if not any(getattr(h, "_recognition_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._recognition_handler = True
        logger.addHandler(handler)
    return logger


def _resolve_level(level: Optional[str]) -> int:
    value = getattr(logging, str(level or "INFO").upper(), None)
    return value if isinstance(value, int) else logging.INFO
