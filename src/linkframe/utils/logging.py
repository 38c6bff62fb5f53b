"""Logging utilities for linkframe."""

from __future__ import annotations

import logging
import os
from typing import Optional

DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVEL_ENV = "LINKFRAME_LOG_LEVEL"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def resolve_log_level(level: Optional[str] = None) -> int:
    """Return the numeric level for *level*, the environment or the default."""

    name = (level or os.getenv(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    value = getattr(logging, name, None)
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger for the application."""
    logging.basicConfig(level=resolve_log_level(level), format=LOG_FORMAT, force=True)
