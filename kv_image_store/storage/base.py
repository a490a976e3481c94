"""Storage interface for the key-value store."""

from typing import Optional, Protocol, runtime_checkable

from kv_image_store.stored import StoredValue


@runtime_checkable
class KeyValueStore(Protocol):
    """Abstract interface for key-value storage backends.

    Handlers only talk to this contract, so any backend (in-memory map,
    database, external key-value service) can be swapped in without
    touching them. Implementations report every failure as ``KVError``.
    """

    def get(self, key: str) -> Optional[StoredValue]:
        """Read the value stored under a key.

        Args:
            key: Key to look up.

        Returns:
            Optional[StoredValue]: The stored value, or None if the key
            has never been written.

        Raises:
            KVError: INTERNAL_ERROR if the backend cannot be read.
        """
        ...

    def put(self, key: str, value: StoredValue) -> None:
        """Store a value under a key, replacing any previous value.

        Args:
            key: Key to write.
            value: Classified value to store.

        Raises:
            KVError: INTERNAL_ERROR if the backend cannot be written.
        """
        ...
