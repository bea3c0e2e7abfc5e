import os

import pytest

# Pin the suite to in-memory SQLite unless a test database is given explicitly.
os.environ.setdefault("PERSON_STORE_TEST_DB", "sqlite+pysqlite:///:memory:")

from person_store.db import database, models  # noqa: E402
from person_store.db.repositories import people as people_repo  # noqa: E402
from person_store.services import PersonStore  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _connection():
    """Open the store connection once for the run and release it at the end."""
    engine = database.open_connection()
    yield engine
    try:
        models.Base.metadata.drop_all(bind=engine)
    finally:
        database.close_connection()


@pytest.fixture(autouse=True)
def clean_people(_connection):
    """Drop the people collection after every test."""
    yield
    if database.engine is None:
        return
    db = database.get_session()
    try:
        people_repo.drop_people(db)
    finally:
        db.close()


@pytest.fixture
def db_session():
    db = database.get_session()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def store():
    return PersonStore()
