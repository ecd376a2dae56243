"""
Database Connection Management

This module provides engine and session management for the primary episode store.
It uses SQLAlchemy 2.0+ and context managers for safe resource handling.
Engines and session factories are plain objects handed to the store that owns
them; nothing here keeps process-wide state.
"""
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from podsite.config import DATABASE_URL, DATABASE_ECHO
from podsite.models.base import Base


# SQLite busy timeout (ms)
SQLITE_BUSY_TIMEOUT_MS = 30000


def _set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable WAL mode and busy_timeout for file-backed SQLite."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS}")
    cursor.close()


def create_database_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Create a database engine.

    SQLite file databases get their parent directory created and WAL enabled.
    In-memory SQLite shares one connection so every session sees the same data.

    Args:
        url: SQLAlchemy URL (defaults to DATABASE_URL)
        echo: Log SQL statements (defaults to DATABASE_ECHO)

    Returns:
        Engine: SQLAlchemy engine instance
    """
    url = url or DATABASE_URL
    echo = DATABASE_ECHO if echo is None else echo
    parsed = make_url(url)

    if parsed.get_backend_name() != "sqlite":
        return create_engine(url, echo=echo, pool_pre_ping=True)

    database = parsed.database
    if not database or database == ":memory:":
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    # Ensure the database directory exists
    Path(database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        url,
        echo=echo,
        connect_args={
            "check_same_thread": False,
            "timeout": SQLITE_BUSY_TIMEOUT_MS / 1000,
        },
    )
    event.listen(engine, "connect", _set_sqlite_pragma)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to the engine."""
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


@contextmanager
def session_scope(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """
    Open a database session (context manager).

    Automatically handles session lifecycle:
    - Opens session on entry
    - Commits on success, rolls back on error
    - Closes session on exit

    Yields:
        Session: SQLAlchemy session object

    Example:
        with session_scope(factory) as session:
            episode = session.query(Episode).filter_by(slug="coca-cola").first()
            episode.title = "New Title"
    """
    session = session_factory()
    try:
        yield session
        # Only commit if no exception occurred and session is active
        if session.is_active:
            session.commit()
    except Exception:
        # Rollback on error
        session.rollback()
        raise
    finally:
        # Always close the session
        session.close()


def create_tables(engine: Engine) -> None:
    """
    Create all database tables.

    Uses `create_all()` which is idempotent - existing tables are not modified.

    Note:
        This does not handle schema migrations.
    """
    Base.metadata.create_all(engine)


def drop_tables(engine: Engine) -> None:
    """
    Drop all database tables.

    Warning:
        This will delete all data! Use only for testing or
        complete database resets.
    """
    Base.metadata.drop_all(engine)


def reset_database(engine: Engine) -> None:
    """
    Reset the database by dropping and recreating all tables.

    Warning:
        This will delete all data! Use only for testing.
    """
    drop_tables(engine)
    create_tables(engine)
