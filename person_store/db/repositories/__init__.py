"""
Per-domain repository modules for database access.

Repositories take an open SQLAlchemy ``Session`` and return ORM rows; the
store facade in ``person_store.services`` wraps them with session handling.
"""
