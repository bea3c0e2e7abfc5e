"""
Tests for URL resolution and the connection lifecycle in database.py.
"""
import os
import sys
from unittest.mock import patch

import pytest
from sqlalchemy import inspect
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import person_store.db.database as dbmod
from person_store.errors import StorageUnavailableError

_URL_VARS = (
    "PERSON_STORE_TEST_DB",
    "DATABASE_URL",
    "POSTGRES_USER",
    "POSTGRES_PASSWORD",
    "POSTGRES_HOST",
    "POSTGRES_PORT",
    "POSTGRES_DB",
)


@pytest.fixture
def clean_url_env(monkeypatch):
    for var in _URL_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


@pytest.fixture
def isolated_connection(monkeypatch):
    """Swap in a fresh engine slot and session factory so the suite's connection is untouched."""
    monkeypatch.setattr(dbmod, "engine", None)
    monkeypatch.setattr(dbmod, "SessionLocal", sessionmaker(autoflush=False))
    yield
    dbmod.close_connection()


class TestDatabaseUrl:

    def test_explicit_test_db_wins(self, clean_url_env):
        clean_url_env.setenv("PERSON_STORE_TEST_DB", "sqlite:///explicit.db")
        clean_url_env.setenv("DATABASE_URL", "postgresql://u:p@db/app")
        assert dbmod.get_database_url() == "sqlite:///explicit.db"

    def test_database_url_normalizes_legacy_scheme(self, clean_url_env):
        clean_url_env.setenv("DATABASE_URL", "postgres://u:p@db:5432/app")
        assert dbmod.get_database_url() == "postgresql://u:p@db:5432/app"

    def test_url_from_postgres_components(self, clean_url_env):
        clean_url_env.setenv("POSTGRES_USER", "user")
        clean_url_env.setenv("POSTGRES_PASSWORD", "secret")
        clean_url_env.setenv("POSTGRES_HOST", "db")
        clean_url_env.setenv("POSTGRES_PORT", "5432")
        clean_url_env.setenv("POSTGRES_DB", "people")
        assert dbmod.get_database_url() == "postgresql://user:secret@db:5432/people"

    def test_pytest_fallback_is_sqlite_memory(self, clean_url_env):
        assert dbmod.get_database_url() == dbmod.SQLITE_MEMORY_URL

    def test_missing_components_outside_pytest(self, clean_url_env):
        clean_url_env.setenv("POSTGRES_USER", "user")
        with patch.object(dbmod, "_is_pytest_runtime", return_value=False):
            with pytest.raises(ValueError) as exc_info:
                dbmod.get_database_url()
        message = str(exc_info.value)
        assert "POSTGRES_PASSWORD" in message
        assert "POSTGRES_USER" not in message

    def test_is_pytest_runtime_explicit_env(self):
        with patch.dict(os.environ, {"PYTEST_RUNNING": "1"}):
            assert dbmod._is_pytest_runtime() is True

    def test_is_pytest_runtime_false_without_markers(self):
        modules = {k: v for k, v in sys.modules.items() if k != "pytest"}
        with patch.dict(os.environ, {}, clear=True), patch.dict(sys.modules, modules, clear=True):
            assert dbmod._is_pytest_runtime() is False


class TestEngineKwargs:

    def test_sqlite_memory_uses_static_pool(self):
        kwargs = dbmod.engine_kwargs(dbmod.SQLITE_MEMORY_URL)
        assert kwargs["poolclass"] is StaticPool
        assert kwargs["connect_args"] == {"check_same_thread": False}

    def test_sqlite_file_keeps_default_pool(self):
        kwargs = dbmod.engine_kwargs("sqlite:///people.db")
        assert "poolclass" not in kwargs

    def test_postgres_pings_pool(self, monkeypatch):
        monkeypatch.setenv("PERSON_STORE_SQL_ECHO", "1")
        kwargs = dbmod.engine_kwargs("postgresql://u:p@db/app")
        assert kwargs["pool_pre_ping"] is True
        assert kwargs["echo"] is True


class TestConnectionLifecycle:

    def test_connection_scope_opens_and_releases(self, isolated_connection):
        with dbmod.connection_scope(dbmod.SQLITE_MEMORY_URL) as eng:
            assert dbmod.get_engine() is eng
            assert "people" in inspect(eng).get_table_names()
            session = dbmod.get_session()
            assert session.get_bind() is eng
            session.close()
        assert dbmod.engine is None
        with pytest.raises(RuntimeError):
            dbmod.get_engine()

    def test_open_connection_is_idempotent(self, isolated_connection):
        first = dbmod.open_connection(dbmod.SQLITE_MEMORY_URL)
        assert dbmod.open_connection() is first
        assert dbmod.open_connection(dbmod.SQLITE_MEMORY_URL) is first

    def test_open_connection_refuses_second_url(self, isolated_connection):
        dbmod.open_connection(dbmod.SQLITE_MEMORY_URL)
        with pytest.raises(RuntimeError):
            dbmod.open_connection("sqlite:///other.db")

    def test_close_connection_twice_is_safe(self, isolated_connection):
        dbmod.open_connection(dbmod.SQLITE_MEMORY_URL)
        dbmod.close_connection()
        dbmod.close_connection()
        assert dbmod.engine is None

    def test_get_session_requires_open_connection(self, isolated_connection):
        with pytest.raises(RuntimeError):
            dbmod.get_session()

    def test_open_connection_matches_equivalent_url_string(self, isolated_connection, tmp_path):
        url = f"sqlite:///{tmp_path / 'people.db'}"
        first = dbmod.open_connection(url)
        assert dbmod.open_connection(f"sqlite:///{tmp_path}/people.db") is first
        assert dbmod.open_connection(first.url.render_as_string(hide_password=False)) is first

    def test_unreachable_backend_raises_storage_unavailable(self, isolated_connection, tmp_path):
        url = f"sqlite:///{tmp_path / 'missing' / 'dir' / 'people.db'}"
        with pytest.raises(StorageUnavailableError) as exc_info:
            dbmod.open_connection(url)
        assert exc_info.value.operation == "open_connection"
        assert dbmod.engine is None
