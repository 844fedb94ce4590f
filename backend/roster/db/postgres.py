"""
Record store connection via SQLAlchemy.

PostgreSQL (psycopg3) in deployment; any SQLAlchemy URL works, which is
how tests run the store on SQLite.
"""

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, scoped_session, declarative_base

from roster.config import config

logger = logging.getLogger("db.postgres")

# SQLAlchemy base for model declarations
Base = declarative_base()

# Engine and session factories (initialized lazily)
_engine = None
_session_factory = None
_scoped_session = None


def _build_engine(url: str):
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg://", 1)
    elif url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=config.DEBUG,
            connect_args={"check_same_thread": False},
        )

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys = ON")
            cursor.close()

        return engine

    return create_engine(
        url,
        echo=config.DEBUG,  # Log SQL in debug mode
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=300,  # Recycle connections every 5 minutes
        pool_reset_on_return="rollback",
    )


def get_engine():
    """Get or create the SQLAlchemy engine."""
    global _engine
    if _engine is None:
        _engine = _build_engine(config.get_database_url())
    return _engine


def configure_engine(url: str):
    """Point the record store at another database URL.

    Drops any existing engine and session registries.
    """
    global _engine, _session_factory, _scoped_session
    if _scoped_session is not None:
        _scoped_session.remove()
    if _engine is not None:
        _engine.dispose()
    _engine = _build_engine(url)
    _session_factory = None
    _scoped_session = None
    return _engine


def get_session_factory() -> sessionmaker:
    """Plain session factory for work outside the request thread."""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(
            bind=get_engine(), autoflush=False, expire_on_commit=False
        )
    return _session_factory


def get_db_session():
    """Get a scoped database session.

    Returns the thread-local session from the scoped session factory.
    The session is cleaned up at the end of each request via close_db_session().
    """
    global _scoped_session
    if _scoped_session is None:
        _scoped_session = scoped_session(get_session_factory())
    return _scoped_session()


def init_db():
    """Initialize database tables (for development/testing)."""
    # Import models so they register with Base.metadata
    from roster import models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())


def close_db_session(exception=None):
    """Remove the current session (call at end of request)."""
    if _scoped_session is None:
        return
    try:
        _scoped_session.rollback()
    except Exception:
        logger.exception("Rollback failed while closing session")
    finally:
        _scoped_session.remove()


def rollback_session():
    """Explicitly rollback the current session.

    Call this at the start of a request to ensure clean state.
    """
    if _scoped_session is None:
        return
    session = _scoped_session()
    if session.in_transaction():
        session.rollback()


# Alias for convenience
db = Base
