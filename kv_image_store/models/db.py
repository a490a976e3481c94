"""SQLAlchemy database models."""

from sqlalchemy import Column, LargeBinary, String
from sqlalchemy.orm import declarative_base

# Create the declarative base
Base = declarative_base()


class StoredEntry(Base):
    """Model representing one key of the store.

    ``kind`` records the classification made when the value was written so it
    is never re-derived from the payload bytes.
    """
    __tablename__ = "kv_entries"

    KIND_IMAGE = "image"
    KIND_OPAQUE = "opaque"

    key = Column(String, primary_key=True, nullable=False)

    # Either KIND_IMAGE or KIND_OPAQUE
    kind = Column(String(16), nullable=False)

    # Declared content type for opaque values, NULL for images
    content_type = Column(String, nullable=True)

    # Raw bytes for opaque values, PNG bytes for images
    payload = Column(LargeBinary, nullable=False)

    def __repr__(self) -> str:
        return f"<StoredEntry(key={self.key!r}, kind={self.kind}, size={len(self.payload or b'')})>"
