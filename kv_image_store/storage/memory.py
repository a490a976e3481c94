"""In-memory implementation of KeyValueStore."""

import logging
from typing import Optional

from kv_image_store.errors import KVError
from kv_image_store.stored import StoredValue

from .base import KeyValueStore
from .locks import LockError, ReadWriteLock

logger = logging.getLogger(__name__)


class InMemoryKeyValueStore(KeyValueStore):
    """Key-value store backed by a dictionary.

    The dictionary is only touched under a reader/writer lock: ``get`` takes
    it shared, ``put`` takes it exclusively. Each call holds the lock once and
    never nests acquisitions. Data is lost when the process exits.
    """

    def __init__(self, lock_timeout: Optional[float] = None):
        """Initialize the in-memory store.

        Args:
            lock_timeout: Seconds to wait for the lock before failing.
                ``None`` waits forever.
        """
        self._storage: dict[str, StoredValue] = {}
        self._lock = ReadWriteLock(timeout=lock_timeout)
        logger.info(f"Initialized InMemoryKeyValueStore (lock_timeout={lock_timeout})")

    def get(self, key: str) -> Optional[StoredValue]:
        try:
            with self._lock.read():
                value = self._storage.get(key)
        except LockError as e:
            logger.error(f"Failed to acquire read lock for key {key!r}: {e}")
            raise KVError.from_lock_error(e) from e

        logger.debug(f"Read key {key!r}: {'hit' if value is not None else 'miss'}")
        return value

    def put(self, key: str, value: StoredValue) -> None:
        try:
            with self._lock.write():
                self._storage[key] = value
        except LockError as e:
            logger.error(f"Failed to acquire write lock for key {key!r}: {e}")
            raise KVError.from_lock_error(e) from e

        logger.debug(f"Stored {type(value).__name__} under key {key!r}")

    def count(self) -> int:
        """Get the number of keys in the store."""
        try:
            with self._lock.read():
                return len(self._storage)
        except LockError as e:
            raise KVError.from_lock_error(e) from e

    def clear(self) -> None:
        """Remove every entry.

        This is mainly useful for testing purposes.
        """
        try:
            with self._lock.write():
                self._storage.clear()
        except LockError as e:
            raise KVError.from_lock_error(e) from e
        logger.debug("Cleared all entries from store")
