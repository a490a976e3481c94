"""Database configuration and session management."""

from .database import SessionLocal, drop_db, engine, get_db, init_db

__all__ = ["engine", "get_db", "init_db", "drop_db", "SessionLocal"]
