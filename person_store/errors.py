"""
Error taxonomy for the person record store.

Every failure surfaced by the repository and the store facade is one of the
classes below; driver and pydantic exceptions are chained as ``__cause__``.
"""
from __future__ import annotations

import uuid
from typing import Any, Dict, Iterable, List, Tuple, Union

from pydantic import ValidationError as PydanticValidationError


class PersonStoreError(Exception):
    """Base class for person store failures."""


class ValidationError(PersonStoreError, ValueError):
    """One or more person fields violate their constraints. Nothing was written."""

    def __init__(self, errors: Iterable[Dict[str, str]]):
        self.errors: List[Dict[str, str]] = list(errors)
        self.fields: Tuple[str, ...] = tuple(dict.fromkeys(e["field"] for e in self.errors))
        detail = "; ".join(f"{e['field']}: {e['message']}" for e in self.errors)
        super().__init__(f"Invalid person record: {detail}" if detail else "Invalid person record")

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        errors = []
        for err in exc.errors():
            loc = err.get("loc") or ()
            field = str(loc[0]) if loc else "__root__"
            errors.append({"field": field, "message": err.get("msg", "invalid value")})
        return cls(errors)


class NotFoundError(PersonStoreError, LookupError):
    """The identity passed to an update does not exist."""

    def __init__(self, person_id: Union[uuid.UUID, str, Any]):
        self.person_id = person_id
        super().__init__(f"Person {person_id} not found")


class StorageUnavailableError(PersonStoreError):
    """The storage backend could not be reached; the operation was not retried."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Storage unavailable during {operation}")
