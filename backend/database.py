"""Database configuration for the expense tracking backend."""
from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

DEFAULT_SQLITE_PATH = os.environ.get("EXPENSES_DB_PATH", os.path.join(os.path.dirname(__file__), "expenses.db"))
DATABASE_URL = os.environ.get("EXPENSES_DATABASE_URL", f"sqlite:///{DEFAULT_SQLITE_PATH}")


def _connect_args(url: str) -> dict[str, object]:
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


engine = create_engine(
    DATABASE_URL,
    connect_args=_connect_args(DATABASE_URL),
    future=True,
)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)

Base = declarative_base()


def init_db() -> None:
    """Create the expenses table if it does not already exist."""
    from . import models  # Import models for metadata registration

    Base.metadata.create_all(bind=engine)


@contextmanager
def session_scope() -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Iterator[Session]:
    """FastAPI dependency that provides a database session."""
    with session_scope() as session:
        yield session
