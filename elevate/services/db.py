"""Database engine and session factory construction."""

from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from elevate.services.config import Settings, get_settings


def create_db_engine(settings: Settings | None = None) -> Engine:
    """Create an engine with the persistence timeout applied.

    SQLite gets a busy timeout (how long a writer waits for a lock); PostgreSQL gets a
    statement timeout and a pool checkout timeout. In-memory SQLite uses StaticPool so
    every session sees the same database.

    Args:
        settings: Settings to use (default: process settings)

    Returns:
        Configured SQLAlchemy Engine
    """
    settings = settings or get_settings()
    url = settings.database_url
    timeout = settings.persistence_timeout_seconds
    kwargs: dict[str, Any] = {"echo": settings.database_echo}

    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": timeout}
        if ":memory:" in url or url.rstrip("/") == "sqlite:":
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
        kwargs["pool_timeout"] = timeout
        if url.startswith("postgresql"):
            kwargs["connect_args"] = {"options": f"-c statement_timeout={int(timeout * 1000)}"}

    return create_engine(url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create session factory bound to the engine."""
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


__all__ = ["create_db_engine", "create_session_factory"]
