"""FastAPI dependency injection configuration."""

import logging
from typing import Generator

from config import get_settings
from kv_image_store.db import get_db
from kv_image_store.storage import (
    DatabaseKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
)

logger = logging.getLogger(__name__)


# Global instance for in-memory store
_in_memory_store: InMemoryKeyValueStore | None = None


def get_key_value_store() -> Generator[KeyValueStore, None, None]:
    """Get the key-value store instance based on configuration.

    This function yields the correct backend based on the STORAGE_BACKEND
    environment variable:
    - "memory": Uses InMemoryKeyValueStore (data lost on restart)
    - "database": Uses DatabaseKeyValueStore (data persisted in database)

    A database session is only opened for the database backend, and is
    closed once the request is done.

    Yields:
        KeyValueStore: The configured store instance
    """
    settings = get_settings()

    if settings.storage_backend == "database":
        logger.debug("Using database backend for key-value store")
        sessions = get_db()
        db = next(sessions)
        try:
            yield DatabaseKeyValueStore(db)
        finally:
            sessions.close()
        return

    # Use singleton in-memory store
    global _in_memory_store
    if _in_memory_store is None:
        _in_memory_store = InMemoryKeyValueStore(lock_timeout=settings.lock_timeout)
        logger.info(f"Created in-memory key-value store (storage_backend={settings.storage_backend})")
    yield _in_memory_store
