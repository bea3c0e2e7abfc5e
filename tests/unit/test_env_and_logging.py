import logging

import pytest

from person_store.utils.env import env_flag, normalize_bool
from person_store.utils.logging_setup import configure_logging, resolve_log_level


@pytest.mark.parametrize("value,expected", [
    ("1", True), ("true", True), ("YES", True), (" on ", True),
    ("0", False), ("false", False), ("no", False), ("", False),
])
def test_normalize_bool(value, expected):
    assert normalize_bool(value) is expected


def test_normalize_bool_unknown_uses_default():
    assert normalize_bool("maybe", default=True) is True
    assert normalize_bool(None, default=True) is True


def test_env_flag_reads_environment(monkeypatch):
    monkeypatch.setenv("PERSON_STORE_SQL_ECHO", "true")
    assert env_flag("PERSON_STORE_SQL_ECHO") is True
    monkeypatch.delenv("PERSON_STORE_SQL_ECHO")
    assert env_flag("PERSON_STORE_SQL_ECHO") is False


def test_resolve_log_level_from_env(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert resolve_log_level() == logging.DEBUG


def test_resolve_log_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "loud")
    assert resolve_log_level() == logging.INFO
    assert resolve_log_level("BASIC_FORMAT") == logging.INFO


def test_configure_logging_sets_package_level():
    previous = logging.getLogger("person_store").level
    try:
        assert configure_logging("warning") == logging.WARNING
        assert logging.getLogger("person_store").level == logging.WARNING
    finally:
        logging.getLogger("person_store").setLevel(previous)
