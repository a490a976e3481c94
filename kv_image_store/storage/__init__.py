"""Storage backends for the key-value store."""

from .base import KeyValueStore
from .database import DatabaseKeyValueStore
from .locks import LockError, ReadWriteLock
from .memory import InMemoryKeyValueStore

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "DatabaseKeyValueStore",
    "ReadWriteLock",
    "LockError",
]
