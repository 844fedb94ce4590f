"""
Database connections for the roster backend.

- PostgreSQL: system of record for patients and follow-ups (via SQLAlchemy)
"""

from .postgres import (
    Base,
    db,
    init_db,
    get_db_session,
    get_session_factory,
    configure_engine,
)

__all__ = [
    "Base",
    "db",
    "init_db",
    "get_db_session",
    "get_session_factory",
    "configure_engine",
]
