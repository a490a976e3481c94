"""Conversion between raw bytes and decoded images."""

import io
import logging

from PIL import Image

from kv_image_store.errors import KVError
from kv_image_store.schemas import Payload
from kv_image_store.transforms import Transform, identity

logger = logging.getLogger(__name__)

# Every image leaves the service in this format, whatever it was stored as.
IMAGE_FORMAT = "PNG"
IMAGE_CONTENT_TYPE = "image/png"


def decode_image(data: bytes) -> Image.Image:
    """Decode image bytes into an in-memory image.

    Pixel data is loaded eagerly so that truncated or corrupt input fails
    here rather than on a later read.

    Pillow plugins fail on corrupt input with many exception types
    (OSError, SyntaxError, TypeError, struct.error, ...), so any failure
    while decoding is reported the same way.

    Raises:
        KVError: BAD_REQUEST if the bytes are not a readable image.
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except Exception as e:
        logger.warning(f"Failed to decode image ({len(data)} bytes): {e}")
        raise KVError.from_image_error(e) from e
    logger.debug(f"Decoded {image.format} image {image.size} mode={image.mode}")
    return image


def encode_image(image: Image.Image, transform: Transform = identity) -> Payload:
    """Apply ``transform`` to ``image`` and encode the result as PNG.

    The codec knows nothing about which transform it is given; endpoints
    choose the pixel operation, this function only turns pixels into bytes.

    Args:
        image: Decoded source image. It is never modified.
        transform: Pixel operation applied before encoding.

    Returns:
        Payload: PNG bytes with the ``image/png`` content type.

    Raises:
        KVError: BAD_REQUEST if the transform or the encoder fails.
    """
    buffer = io.BytesIO()
    try:
        result = transform(image)
        result.save(buffer, format=IMAGE_FORMAT)
    except Exception as e:
        logger.warning(f"Failed to encode image (mode={image.mode}): {e}")
        raise KVError.from_image_error(e) from e

    return Payload(content_type=IMAGE_CONTENT_TYPE, body=buffer.getvalue())
