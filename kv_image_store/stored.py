"""Values kept under a key: decoded images or opaque typed bytes."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from PIL import Image

from kv_image_store.codec import decode_image, encode_image
from kv_image_store.schemas import Payload

IMAGE_MARKER = "image/"


class StoredValue(ABC):
    """A value held by a store.

    There are exactly two kinds, ``ImageValue`` and ``OpaqueValue``. Which one
    a payload becomes is decided once by ``classify`` when it is written.
    """

    @abstractmethod
    def render(self) -> Payload:
        """Turn the value into a response payload."""


@dataclass(frozen=True)
class ImageValue(StoredValue):
    """A decoded image.

    The original bytes and content type are dropped; reads re-encode the
    pixels as PNG.
    """

    image: Image.Image

    def render(self) -> Payload:
        return encode_image(self.image)


@dataclass(frozen=True)
class OpaqueValue(StoredValue):
    """Bytes returned exactly as they were written, with their content type."""

    content_type: str
    data: bytes

    def render(self) -> Payload:
        return Payload(content_type=self.content_type, body=self.data)


def classify(content_type: str, data: bytes) -> StoredValue:
    """Build the stored value for a payload written with ``content_type``.

    Raises:
        KVError: BAD_REQUEST if the content type is an image type but the
            bytes cannot be decoded.
    """
    if content_type.strip().lower().startswith(IMAGE_MARKER):
        return ImageValue(decode_image(data))
    return OpaqueValue(content_type, data)
