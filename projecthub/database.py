"""Database engine, session factory and declarative base."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from projecthub.config import get_settings


def build_engine(database_url: str) -> Engine:
    """Create an engine for the given URL.

    SQLite is used by the test suite and local tooling; it gets the
    cross-thread flag FastAPI's threadpool needs and no pool sizing.
    """
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


engine = build_engine(get_settings().database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base: Any = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create all tables registered on the declarative base."""
    from projecthub import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
