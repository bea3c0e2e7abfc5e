"""
Database engine and session management.

Resolves the connection URL from environment configuration (with an in-memory
SQLite fallback under pytest) and owns the process-wide engine. Callers scope
a run with ``open_connection()`` / ``close_connection()`` or the
``connection_scope()`` context manager.
"""
import logging
import os
import sys
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from person_store.errors import StorageUnavailableError
from person_store.utils.env import env_flag

logger = logging.getLogger(__name__)

SQLITE_MEMORY_URL = "sqlite+pysqlite:///:memory:"
_POSTGRES_VARS = ("POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_HOST", "POSTGRES_PORT", "POSTGRES_DB")


def _is_pytest_runtime() -> bool:
    """Best-effort detection that we're executing under pytest."""
    if os.getenv("PYTEST_RUNNING") == "1":
        return True
    if "PYTEST_CURRENT_TEST" in os.environ:
        return True
    return "pytest" in sys.modules


def normalize_url(url: str) -> str:
    """Rewrite the legacy ``postgres://`` scheme that SQLAlchemy no longer accepts."""
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def get_database_url() -> str:
    """Resolve the database URL.

    Order: ``PERSON_STORE_TEST_DB``, ``DATABASE_URL``, the individual
    ``POSTGRES_*`` components, then in-memory SQLite when running under pytest.
    """
    explicit_test_db = os.getenv("PERSON_STORE_TEST_DB")
    if explicit_test_db:
        return normalize_url(explicit_test_db)

    if os.getenv("DATABASE_URL"):
        return normalize_url(os.getenv("DATABASE_URL"))

    values = {name: os.getenv(name) for name in _POSTGRES_VARS}
    missing = [name for name, value in values.items() if not value]
    if not missing:
        return (
            f"postgresql://{values['POSTGRES_USER']}:{values['POSTGRES_PASSWORD']}"
            f"@{values['POSTGRES_HOST']}:{values['POSTGRES_PORT']}/{values['POSTGRES_DB']}"
        )

    if _is_pytest_runtime():
        return SQLITE_MEMORY_URL

    raise ValueError(f"Missing required database environment variables: {', '.join(missing)}")


def engine_kwargs(url: str) -> dict:
    """Engine options per backend; in-memory SQLite must share one connection."""
    kwargs = {"echo": env_flag("PERSON_STORE_SQL_ECHO")}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url:
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return kwargs


engine: Optional[Engine] = None
SessionLocal = sessionmaker(autoflush=False)


def open_connection(url: Optional[str] = None, *, create_schema: bool = True) -> Engine:
    """Open the process-wide engine and bind ``SessionLocal`` to it.

    Calling again while a connection to the same URL is open returns the open
    engine. Raises ``StorageUnavailableError`` if the schema cannot be created
    because the backend is unreachable.
    """
    global engine
    if engine is not None:
        if url is None or engine.url == make_url(normalize_url(url)):
            return engine
        raise RuntimeError(f"A connection to {engine.url} is already open; close it first")

    resolved = normalize_url(url) if url else get_database_url()
    new_engine = create_engine(resolved, **engine_kwargs(resolved))
    if create_schema:
        from person_store.db import models  # local import to avoid circular import at module load
        try:
            models.Base.metadata.create_all(bind=new_engine)
        except (OperationalError, InterfaceError) as exc:
            new_engine.dispose()
            logger.error("database_open_failed: url=%s error=%s", new_engine.url, exc)
            raise StorageUnavailableError("open_connection") from exc

    engine = new_engine
    SessionLocal.configure(bind=engine)
    logger.info("database_opened: url=%s", engine.url)
    return engine


def close_connection() -> None:
    """Dispose the engine opened by ``open_connection``. Safe to call twice."""
    global engine
    if engine is None:
        return
    url = engine.url
    engine.dispose()
    engine = None
    SessionLocal.configure(bind=None)
    logger.info("database_closed: url=%s", url)


@contextmanager
def connection_scope(url: Optional[str] = None, *, create_schema: bool = True) -> Iterator[Engine]:
    """Open a connection for the duration of the block and always release it."""
    eng = open_connection(url, create_schema=create_schema)
    try:
        yield eng
    finally:
        close_connection()


def get_engine() -> Engine:
    if engine is None:
        raise RuntimeError("Database connection is not open; call open_connection() first")
    return engine


def get_session() -> Session:
    """Return a new session bound to the open engine."""
    get_engine()
    return SessionLocal()
