"""Endpoint logic, independent of the HTTP framework.

Each handler makes at most one storage call and one rendering call and lets
``KVError`` propagate unchanged.
"""

import logging
from typing import Optional

from kv_image_store.codec import encode_image
from kv_image_store.errors import KVError
from kv_image_store.schemas import Payload
from kv_image_store.storage.base import KeyValueStore
from kv_image_store.stored import ImageValue, classify
from kv_image_store.transforms import Transform

logger = logging.getLogger(__name__)

STORE_OK = "OK"


def store(
    kv_store: KeyValueStore,
    key: str,
    content_type: Optional[str],
    data: bytes,
    max_size: Optional[int] = None,
) -> str:
    """Classify a payload and store it under ``key``.

    Args:
        kv_store: Backend to write to.
        key: Key to write.
        content_type: Declared content type of ``data``.
        data: Raw request body.
        max_size: Largest accepted body in bytes, if limited.

    Returns:
        str: The fixed success marker ``"OK"``.

    Raises:
        KVError: BAD_REQUEST for an empty key, a missing content type, an
            oversized body or undecodable image bytes; INTERNAL_ERROR if the
            backend fails.
    """
    if not key:
        raise KVError.bad_request("Key cannot be empty")
    if not content_type:
        raise KVError.bad_request("Missing content-type header")
    if max_size is not None and len(data) > max_size:
        raise KVError.bad_request(f"Payload exceeds maximum size of {max_size} bytes")

    value = classify(content_type, data)
    kv_store.put(key, value)
    logger.info(f"Stored key {key!r} as {type(value).__name__} ({len(data)} bytes, {content_type})")
    return STORE_OK


def fetch(kv_store: KeyValueStore, key: str) -> Payload:
    """Render the value stored under ``key``.

    Raises:
        KVError: NOT_FOUND if the key is absent, BAD_REQUEST if an image
            cannot be encoded, INTERNAL_ERROR if the backend fails.
    """
    value = kv_store.get(key)
    if value is None:
        raise KVError.not_found()
    return value.render()


def transform(kv_store: KeyValueStore, key: str, operation: Transform, name: str) -> Payload:
    """Apply a pixel transform to the image stored under ``key``.

    Args:
        kv_store: Backend to read from.
        key: Key holding the image.
        operation: Transform handed to the codec.
        name: Human name of the operation, used in error messages.

    Raises:
        KVError: NOT_FOUND if the key is absent, FORBIDDEN if it does not
            hold an image, BAD_REQUEST if the transform or encoding fails.
    """
    value = kv_store.get(key)
    if value is None:
        raise KVError.not_found()
    if not isinstance(value, ImageValue):
        raise KVError.forbidden(f"Not possible to {name} this type of data")

    logger.debug(f"Applying {name} to key {key!r}")
    return encode_image(value.image, operation)
