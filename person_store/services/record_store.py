"""
Person record store: session-per-call facade over the person repository.

Each operation opens its own session, returns pydantic read models detached
from the session, and always closes the session. No state is shared between
calls apart from the session factory.
"""
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Mapping, Optional, Union

from pydantic import BaseModel
from sqlalchemy.orm import Session

from person_store.db import database, schemas
from person_store.db.repositories import people as people_repo


class PersonStore:
    """Create/read/update/delete person records."""

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        self._session_factory = session_factory or database.get_session

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        finally:
            db.close()

    def create(self, data: Union[BaseModel, Mapping[str, Any]]) -> schemas.Person:
        """Validate and insert a person; raises ValidationError without writing."""
        with self._session() as db:
            return schemas.Person.model_validate(people_repo.create_person(db, data))

    def find_by_id(self, person_id: Union[uuid.UUID, str]) -> Optional[schemas.Person]:
        """Return the person or None when it does not exist."""
        with self._session() as db:
            row = people_repo.get_person(db, person_id)
            return schemas.Person.model_validate(row) if row is not None else None

    def update_by_id(
        self,
        person_id: Union[uuid.UUID, str],
        fields: Union[BaseModel, Mapping[str, Any]],
    ) -> schemas.Person:
        """Apply a partial update; raises ValidationError or NotFoundError."""
        with self._session() as db:
            return schemas.Person.model_validate(people_repo.update_person(db, person_id, fields))

    def delete_by_id(self, person_id: Union[uuid.UUID, str]) -> bool:
        """Delete a person. Deleting a missing identity is a no-op returning False."""
        with self._session() as db:
            return people_repo.delete_person(db, person_id)

    def list(self, skip: int = 0, limit: int = 100) -> List[schemas.Person]:
        with self._session() as db:
            return [schemas.Person.model_validate(row) for row in people_repo.get_people(db, skip, limit)]

    def find(self, **filters: Any) -> List[schemas.Person]:
        with self._session() as db:
            return [schemas.Person.model_validate(row) for row in people_repo.find_people(db, **filters)]

    def count(self) -> int:
        with self._session() as db:
            return people_repo.count_people(db)

    def drop(self) -> int:
        """Remove every record in the collection."""
        with self._session() as db:
            return people_repo.drop_people(db)
