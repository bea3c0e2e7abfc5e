"""
SQLAlchemy models for the person store.

Exposes `Base`, `now_utc` and the ORM classes.
"""

from .base import Base, now_utc  # re-export
from .people import Person, MIN_AGE, MAX_AGE

__all__ = [
    "Base",
    "now_utc",
    "Person",
    "MIN_AGE",
    "MAX_AGE",
]
