"""SQLAlchemy-based implementation of KeyValueStore."""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kv_image_store.codec import decode_image, encode_image
from kv_image_store.errors import KVError
from kv_image_store.models.db import StoredEntry
from kv_image_store.stored import ImageValue, OpaqueValue, StoredValue

from .base import KeyValueStore

logger = logging.getLogger(__name__)


class DatabaseKeyValueStore(KeyValueStore):
    """Key-value store persisted in a relational database.

    Opaque values are saved verbatim. Images are saved as PNG bytes, the same
    encoding every read produces, and decoded again on ``get``. Each ``put``
    is a single transaction, so an entry is either fully replaced or left
    untouched.
    """

    def __init__(self, db: Session):
        """Initialize the store with a database session.

        Args:
            db: SQLAlchemy session for database operations
        """
        self.db = db
        logger.debug("Initialized DatabaseKeyValueStore")

    def get(self, key: str) -> Optional[StoredValue]:
        try:
            entry = self.db.query(StoredEntry).filter(StoredEntry.key == key).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to read key {key!r}: {e}")
            raise KVError.internal("error reading from store") from e

        if entry is None:
            logger.debug(f"Read key {key!r}: miss")
            return None

        logger.debug(f"Read key {key!r}: {entry.kind}")
        if entry.kind == StoredEntry.KIND_IMAGE:
            return ImageValue(decode_image(entry.payload))
        if entry.kind == StoredEntry.KIND_OPAQUE:
            return OpaqueValue(entry.content_type, entry.payload)

        logger.error(f"Entry {key!r} has unknown kind {entry.kind!r}")
        raise KVError.internal("error reading from store")

    def put(self, key: str, value: StoredValue) -> None:
        entry = self._to_entry(key, value)
        try:
            self.db.merge(entry)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to write key {key!r}: {e}")
            raise KVError.internal(KVError.LOCK_ERROR_MESSAGE) from e

        logger.debug(f"Stored {entry.kind} entry under key {key!r}")

    def count(self) -> int:
        """Get the number of keys in the store."""
        try:
            return self.db.query(StoredEntry).count()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise KVError.internal("error reading from store") from e

    @staticmethod
    def _to_entry(key: str, value: StoredValue) -> StoredEntry:
        if isinstance(value, ImageValue):
            return StoredEntry(
                key=key,
                kind=StoredEntry.KIND_IMAGE,
                content_type=None,
                payload=encode_image(value.image).body,
            )
        if isinstance(value, OpaqueValue):
            return StoredEntry(
                key=key,
                kind=StoredEntry.KIND_OPAQUE,
                content_type=value.content_type,
                payload=value.data,
            )
        raise TypeError(f"Unsupported stored value: {type(value).__name__}")
