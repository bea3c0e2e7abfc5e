"""Service layer exposing the person record store."""

from .record_store import PersonStore

__all__ = ["PersonStore"]
