"""
Person repository functions.

Implements create/read/update/delete for person records plus equality-filter
lookups. Payloads are validated against the person schemas before the session
is touched, so a rejected call never writes.
"""
from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator, List, Mapping, Optional, Type, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import Session

from person_store.db import models, schemas
from person_store.errors import NotFoundError, StorageUnavailableError, ValidationError

logger = logging.getLogger(__name__)

PersonId = Union[uuid.UUID, str]
Payload = Union[BaseModel, Mapping[str, Any]]

# Record field names accepted by find_people, mapped to ORM attributes.
_FILTER_FIELDS = {
    "_id": "id",
    "id": "id",
    "name": "name",
    "lastName": "last_name",
    "last_name": "last_name",
    "address": "address",
    "gender": "gender",
    "job": "job",
    "age": "age",
    "createdAt": "created_at",
    "created_at": "created_at",
    "updatedAt": "updated_at",
    "updated_at": "updated_at",
}


def _validate(schema: Type[BaseModel], payload: Payload) -> BaseModel:
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc


def _coerce_id(person_id: Any) -> Optional[uuid.UUID]:
    if isinstance(person_id, uuid.UUID):
        return person_id
    try:
        return uuid.UUID(str(person_id))
    except (TypeError, ValueError):
        return None


@contextmanager
def _storage_guard(db: Session, operation: str) -> Iterator[None]:
    """Roll back on any failure; connectivity failures become StorageUnavailableError."""
    try:
        yield
    except (OperationalError, InterfaceError) as exc:
        db.rollback()
        logger.error("person_%s_failed: storage unavailable: %s", operation, exc)
        raise StorageUnavailableError(operation) from exc
    except Exception:
        db.rollback()
        logger.exception("person_%s_failed", operation)
        raise


def _touch_stamp(created_at: Optional[datetime]) -> datetime:
    """Timestamp for an update, never earlier than the creation stamp."""
    stamp = models.now_utc()
    if created_at is not None:
        # SQLite hands back naive values; they were written as UTC.
        floor = created_at if created_at.tzinfo else created_at.replace(tzinfo=timezone.utc)
        stamp = max(stamp, floor)
    return stamp


def create_person(db: Session, person: Payload) -> models.Person:
    payload = _validate(schemas.PersonCreate, person)
    stamp = models.now_utc()
    db_person = models.Person(
        **payload.model_dump(),
        created_at=stamp,
        updated_at=stamp,
    )
    with _storage_guard(db, "create"):
        db.add(db_person)
        db.commit()
        db.refresh(db_person)
    logger.info("person_created: id=%s", db_person.id)
    return db_person


def get_person(db: Session, person_id: PersonId) -> Optional[models.Person]:
    """Return the person or None. Malformed identities are treated as absent."""
    key = _coerce_id(person_id)
    if key is None:
        return None
    with _storage_guard(db, "find"):
        return db.query(models.Person).filter(models.Person.id == key).first()


def get_people(db: Session, skip: int = 0, limit: int = 100) -> List[models.Person]:
    with _storage_guard(db, "list"):
        return (
            db.query(models.Person)
            .order_by(models.Person.created_at, models.Person.id)
            .offset(skip)
            .limit(limit)
            .all()
        )


def find_people(db: Session, **filters: Any) -> List[models.Person]:
    """List people whose fields equal the given values (record or attribute names)."""
    unknown = [name for name in filters if name not in _FILTER_FIELDS]
    if unknown:
        raise ValidationError({"field": name, "message": "unknown field"} for name in unknown)

    q = db.query(models.Person)
    for name, value in filters.items():
        attr = _FILTER_FIELDS[name]
        if attr == "id":
            value = _coerce_id(value)
            if value is None:
                return []
        q = q.filter(getattr(models.Person, attr) == value)
    with _storage_guard(db, "find"):
        return q.order_by(models.Person.created_at, models.Person.id).all()


def count_people(db: Session) -> int:
    with _storage_guard(db, "count"):
        return db.query(models.Person).count()


def update_person(db: Session, person_id: PersonId, fields: Payload) -> models.Person:
    """Apply a partial update.

    Every supplied field is validated first (ValidationError); a missing
    identity raises NotFoundError. Fields not supplied are left untouched.
    """
    changes = _validate(schemas.PersonUpdate, fields).model_dump(exclude_unset=True)
    key = _coerce_id(person_id)
    db_person = None
    with _storage_guard(db, "update"):
        if key is not None:
            db_person = db.query(models.Person).filter(models.Person.id == key).first()
        if db_person is not None:
            for attr, value in changes.items():
                setattr(db_person, attr, value)
            db_person.updated_at = _touch_stamp(db_person.created_at)
            db.commit()
            db.refresh(db_person)
    if db_person is None:
        raise NotFoundError(person_id)
    logger.info("person_updated: id=%s fields=%s", db_person.id, sorted(changes))
    return db_person


def delete_person(db: Session, person_id: PersonId) -> bool:
    """Delete a person. Returns False, without error, when it does not exist."""
    key = _coerce_id(person_id)
    if key is None:
        return False
    with _storage_guard(db, "delete"):
        deleted = db.query(models.Person).filter(models.Person.id == key).delete()
        db.commit()
    if deleted:
        logger.info("person_deleted: id=%s", key)
    else:
        logger.debug("person_delete_noop: id=%s", key)
    return deleted > 0


def drop_people(db: Session) -> int:
    """Remove every person record. Returns the number removed."""
    with _storage_guard(db, "drop"):
        deleted = db.query(models.Person).delete()
        db.commit()
    logger.info("people_dropped: count=%s", deleted)
    return deleted
