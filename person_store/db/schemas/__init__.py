"""
Pydantic schemas for the person store.
"""

from .people import (
    REQUIRED_FIELDS,
    PersonBase,
    PersonCreate,
    PersonUpdate,
    Person,
)

__all__ = [
    "REQUIRED_FIELDS",
    "PersonBase",
    "PersonCreate",
    "PersonUpdate",
    "Person",
]
