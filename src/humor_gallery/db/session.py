"""Database session configuration."""

from __future__ import annotations

import math
from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from humor_gallery.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import humor_gallery.models  # noqa: E402,F401


def engine_options(url: str, timeout_seconds: float) -> dict[str, Any]:
    """Return `create_engine` keyword arguments bounding every wait on the store.

    Postgres gets a connect timeout and a server-side statement timeout; SQLite
    gets its busy timeout. Checking a connection out of the pool is bounded for
    pooled backends.
    """
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        return {"connect_args": {"timeout": timeout_seconds}}
    return {
        "pool_timeout": timeout_seconds,
        "connect_args": {
            # libpq only accepts whole seconds here.
            "connect_timeout": max(1, math.ceil(timeout_seconds)),
            "options": f"-c statement_timeout={int(timeout_seconds * 1000)}",
        },
    }


engine = create_engine(
    settings.effective_database_url,
    pool_pre_ping=True,
    echo=settings.sql_debug,
    **engine_options(settings.effective_database_url, settings.database_timeout_seconds),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)
