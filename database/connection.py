"""
Database connection management for the Premier Insulation workflow service.
Handles SQLAlchemy engine creation, session management, and connection verification.
"""

import os
import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from config import _normalize_database_url

logger = logging.getLogger(__name__)

Base = declarative_base()

# Bound by configure_database(); get_engine() falls back to DATABASE_URL from the environment
engine = None
SessionLocal = None


def _enable_sqlite_savepoints(eng):
    """
    Let SQLAlchemy own BEGIN on pysqlite connections.

    The driver otherwise defers BEGIN until the first DML statement, which
    breaks SAVEPOINT / ROLLBACK TO semantics used by nested transactions.
    """
    @event.listens_for(eng, "connect")
    def _do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(eng, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN")


def _build_engine(url, **engine_options):
    if url.startswith('sqlite'):
        options = {'connect_args': {'check_same_thread': False}}
        if url in ('sqlite://', 'sqlite:///:memory:'):
            # One shared connection so every session sees the same in-memory database
            options['poolclass'] = StaticPool
        eng = create_engine(url, **options)
        _enable_sqlite_savepoints(eng)
        return eng

    options = {
        'pool_size': 5,
        'max_overflow': 10,
        'pool_pre_ping': True,  # Verify connections before using
        'pool_recycle': 300,    # Recycle connections after 5 minutes
        'echo': False,          # Set to True for SQL debugging
    }
    options.update(engine_options)
    return create_engine(url, **options)


def configure_database(url, **engine_options):
    """
    (Re)bind the module-level engine and session factory to a database URL.
    Called by the app factory; tests call it to get a fresh database.
    """
    global engine, SessionLocal

    url = _normalize_database_url(url)
    if engine is not None:
        engine.dispose()

    try:
        engine = _build_engine(url, **engine_options)
    except Exception as e:
        logger.error(f"Failed to create database engine: {e}")
        raise RuntimeError(f"Failed to connect to database: {e}")

    SessionLocal = sessionmaker(autoflush=False, bind=engine)
    logger.info(f"Database engine configured ({engine.dialect.name})")
    return engine


def get_engine():
    """Get or create the SQLAlchemy engine."""
    if engine is not None:
        return engine

    url = os.environ.get('DATABASE_URL')
    if not url:
        raise RuntimeError("Database not configured: call configure_database() or set DATABASE_URL")

    return configure_database(url)


def get_session_factory():
    """Get or create the session factory."""
    if SessionLocal is None:
        get_engine()
    return SessionLocal


@contextmanager
def get_db_session():
    """
    Context manager for getting a database session.
    Commits when the block exits cleanly, rolls back on any exception.

    Example:
        with get_db_session() as db:
            quote = db.get(Quote, quote_id)
    """
    session_factory = get_session_factory()
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def check_db_connection():
    """
    Verify that the database connection is working.
    Returns True if connection is successful, raises exception otherwise.
    """
    try:
        eng = get_engine()
        with eng.connect() as conn:
            result = conn.execute(text("SELECT 1"))
            result.fetchone()
        logger.debug("Database connection verified successfully")
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        raise RuntimeError(f"Cannot connect to database: {e}")


def init_db():
    """
    Initialize the database by creating all tables.
    Production databases are managed by Alembic; this is for dev and tests.
    """
    # Import models to ensure they're registered with Base
    from database import models  # noqa: F401

    eng = get_engine()
    Base.metadata.create_all(bind=eng)
    logger.info("Database tables created/verified")


def drop_db():
    """Drop every table known to the models (tests only)."""
    from database import models  # noqa: F401

    Base.metadata.drop_all(bind=get_engine())
