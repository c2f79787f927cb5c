"""
Database connection and session management.
SQLite (file or in-memory) for development and tests, pooled engine for
anything else (PostgreSQL in production).
"""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool
from typing import Generator, Optional
import logging
import os
import time

from parche_ai.core.config import settings
from parche_ai.db.models import Base

logger = logging.getLogger(__name__)

# Track database availability to avoid repeated slow connection attempts
_db_available = True
_db_last_check = 0.0
_DB_RETRY_INTERVAL = 30  # seconds between re-checks while the DB is down


def _resolve_sqlite_url(url: str) -> str:
    """Relative SQLite paths are resolved against the backend directory."""
    db_path = url.replace("sqlite:///", "", 1)
    if db_path.startswith("./"):
        backend_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
        return f"sqlite:///{os.path.join(backend_dir, db_path[2:])}"
    return url


def build_engine(database_url: str):
    if database_url.startswith("sqlite"):
        db_engine = create_engine(
            _resolve_sqlite_url(database_url),
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )

        @event.listens_for(db_engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.close()

        return db_engine

    return create_engine(
        database_url,
        poolclass=QueuePool,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_recycle=settings.database_pool_recycle,
        pool_pre_ping=settings.database_pool_pre_ping,
        pool_timeout=30,
        echo=False,
    )


engine = build_engine(settings.database_url)

# Create session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def get_db() -> Generator[Optional[Session], None, None]:
    """
    Dependency injection for database session.
    Yields None if the database is unavailable (graceful degradation);
    unavailability is cached for _DB_RETRY_INTERVAL seconds.
    """
    global _db_available, _db_last_check

    if not _db_available:
        now = time.time()
        if now - _db_last_check < _DB_RETRY_INTERVAL:
            yield None
            return
        _db_last_check = now

    db = None
    try:
        db = SessionLocal()
    except Exception as e:
        logger.warning(f"Database unavailable: {e}")
        _db_available = False
        _db_last_check = time.time()
        yield None
        return

    try:
        yield db
        _db_available = True
    finally:
        db.close()


def init_db() -> None:
    """Initialize database tables at startup."""
    logger.info("Initializing database schema...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema initialized")
