"""
database.py — Database Session & Connection Management

Purpose:
- Create the SQLAlchemy Engine + Session factory from settings.DATABASE_URL.
- Expose a FastAPI dependency `get_db()` that yields a session per-request.
- Create the schema on startup (`init_db()`); there is no migration tool.

Key Characteristics:
- Synchronous SQLAlchemy engine.
- SQLite is the default for local runs; a bare `postgresql://` URL is
  switched to the psycopg (v3) driver.
- The per-user refresh digest is the only contended row. Serialization of
  concurrent refreshes happens in the UPDATE itself (see repositories/users.py).

This module does NOT:
- Define ORM models (see bcal/models/*).
- Perform any queries or business logic.
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from bcal.core.config import settings
from bcal.core.logging import get_logger

logger = get_logger(__name__)


def normalize_database_url(db_url: str) -> str:
    """
    Pick the psycopg (v3) driver for plain PostgreSQL URLs.

    Example:
        "postgresql://u:p@host/db" → "postgresql+psycopg://u:p@host/db"
    """
    if db_url.startswith("postgresql://") and "+" not in db_url.split("://")[0]:
        return db_url.replace("postgresql://", "postgresql+psycopg://", 1)
    return db_url


def build_engine(db_url: str) -> Engine:
    db_url = normalize_database_url(db_url)
    if db_url.startswith("sqlite"):
        # SQLite connections are shared across the threadpool FastAPI runs sync routes in
        return create_engine(db_url, connect_args={"check_same_thread": False})
    return create_engine(
        db_url,
        pool_pre_ping=True  # Ensures connections are valid before use
    )


# -----------------------------------------------------------------------------
# SQLAlchemy Engine
# -----------------------------------------------------------------------------

engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


def init_db(bind: Engine = None) -> None:
    """Create all tables that do not exist yet."""
    from bcal.models import Base

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ensured")


# -----------------------------------------------------------------------------
# FastAPI Dependency
# -----------------------------------------------------------------------------

def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency: yields a database session for the duration of the request.

    Usage in API endpoint:
        def endpoint(db: Session = Depends(get_db)):
            db.query(...)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
