"""Environment parsing helpers shared by configuration code."""

from __future__ import annotations

import os
from typing import Optional


def normalize_bool(value: Optional[str], default: bool = False) -> bool:
    """Return normalized boolean from environment-style value."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"", "0", "false", "no", "off"}:
        return False
    if normalized in {"1", "true", "yes", "on"}:
        return True
    return default


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag from the environment."""
    return normalize_bool(os.getenv(name), default=default)
