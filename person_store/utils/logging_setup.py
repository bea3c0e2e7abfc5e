"""Process-wide logging configuration driven by ``LOG_LEVEL``."""

import logging
import os
from typing import Optional

DEFAULT_LOG_LEVEL = "INFO"


def resolve_log_level(name: Optional[str] = None) -> int:
    """Map a level name (or ``LOG_LEVEL``) to a logging level, falling back to INFO."""
    level_name = (name or os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)).strip().upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        return logging.INFO
    return level


def configure_logging(level: Optional[str] = None) -> int:
    """Install a basic root handler and set the package logger level."""
    resolved = resolve_log_level(level)
    logging.basicConfig(level=resolved)
    logging.getLogger("person_store").setLevel(resolved)
    logging.getLogger(__name__).debug("logging_configured: level=%s", logging.getLevelName(resolved))
    return resolved
