"""Database models for the key-value store."""

from .db import Base, StoredEntry

__all__ = ["Base", "StoredEntry"]
