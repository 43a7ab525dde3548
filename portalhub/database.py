"""SQLAlchemy engine and sessions for Portal Hub.

PostgreSQL is the deployment target; SQLite is accepted for development and
the test-suite, with foreign keys switched on so ``ON DELETE CASCADE`` rules
declared by the models behave the same on both.
"""
from __future__ import annotations

from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import get_settings

settings = get_settings()


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


def _build_engine(database_url: str) -> Engine:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(url, pool_pre_ping=True, pool_size=5, max_overflow=10, future=True)

    sqlite_engine = create_engine(url, future=True, connect_args={"check_same_thread": False})

    @event.listens_for(sqlite_engine, "connect")
    def _configure_connection(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        # SQLite's lower() only folds ASCII
        dbapi_connection.create_function("casefold", 1, _casefold, deterministic=True)

    return sqlite_engine


engine: Engine = _build_engine(settings.database_url)

# Objects stay readable after commit; realtime callbacks serialise them later
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)

Base = declarative_base()


def get_engine() -> Engine:
    return engine


def get_session() -> Generator[Session, None, None]:
    """Request-scoped session dependency."""
    with SessionLocal() as session:
        yield session


def create_session() -> Session:
    """Standalone session for WebSocket handlers; use it as a context manager."""
    return SessionLocal()


def init_db() -> None:
    """Create tables that do not exist yet (SQLite and fresh databases)."""
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


__all__ = [
    "Base",
    "SessionLocal",
    "engine",
    "get_engine",
    "get_session",
    "create_session",
    "init_db",
]
