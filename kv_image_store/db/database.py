"""Database configuration and session management."""

import logging
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from config import get_settings
from kv_image_store.models import Base

logger = logging.getLogger(__name__)

# Get settings
settings = get_settings()

_is_sqlite = settings.database_url.startswith("sqlite")

# SQLite uses its own pool classes, which do not take sizing arguments
engine = create_engine(
    settings.database_url,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
    echo=settings.database_echo,  # Log SQL statements if configured
    **({} if _is_sqlite else {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }),
)

# Create sessionmaker
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


def get_db() -> Generator[Session, None, None]:
    """Dependency to get database session.

    Yields a database session and ensures it's closed after use.
    This should be used as a FastAPI dependency.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Initialize a database by creating all tables.

    This should be called on application startup when the database
    backend is selected.
    """
    # Ensure a data directory exists if using an SQLite file
    if settings.database_url.startswith("sqlite:///") and ":memory:" not in settings.database_url:
        db_path = settings.database_url.replace("sqlite:///", "")
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Creating database tables at {settings.database_url}")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")


def drop_db() -> None:
    """Drop all database tables.

    WARNING: This will delete all data!
    This should only be used for testing or development.
    """
    logger.warning(f"Dropping all database tables at {settings.database_url}")
    Base.metadata.drop_all(bind=engine)
    logger.warning("All database tables dropped")
