"""Database configuration and session management."""

from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from fitcoach.config import get_settings
from fitcoach.errors import ConflictError

settings = get_settings()


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_size": 5, "max_overflow": 10}


# Create engine
engine = create_engine(settings.database_url, **_engine_options(settings.database_url))

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


def get_db():
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session, conflict_message: Optional[str] = None):
    """Run a block as one all-or-nothing unit on ``db``.

    Commits on success and rolls back on any error. An IntegrityError is
    re-raised as ConflictError when ``conflict_message`` is given.
    """
    try:
        yield db
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if conflict_message is None:
            raise
        raise ConflictError(conflict_message) from exc
    except Exception:
        db.rollback()
        raise
