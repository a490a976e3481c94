"""Tests for the image codec and pixel transforms."""

import io
from unittest.mock import patch

import pytest
from PIL import Image

from kv_image_store import transforms
from kv_image_store.codec import IMAGE_CONTENT_TYPE, decode_image, encode_image
from kv_image_store.errors import ErrorKind, KVError


def _decode(body: bytes) -> Image.Image:
    return Image.open(io.BytesIO(body))


class TestCodec:
    """Test decode_image and encode_image."""

    def test_decode_valid_image(self, png_bytes):
        """Valid bytes decode into an image with the right size."""
        image = decode_image(png_bytes)
        assert image.size == (30, 20)

    def test_decode_invalid_image(self):
        """Invalid bytes raise a bad request."""
        with pytest.raises(KVError) as exc_info:
            decode_image(b"\x89PNG not really")

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST

    @pytest.mark.parametrize("error", [
        TypeError("unsupported operand"),
        SyntaxError("not a TIFF file"),
        IndexError("tuple index out of range"),
    ])
    def test_decode_any_decoder_error_is_bad_request(self, error):
        """Whatever a Pillow plugin raises on corrupt input is a bad request."""
        with patch("kv_image_store.codec.Image.open", side_effect=error):
            with pytest.raises(KVError) as exc_info:
                decode_image(b"II*\x00corrupt")

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST
        assert exc_info.value.message == "error processing image"
        assert exc_info.value.__cause__ is error

    def test_encode_identity(self, png_bytes):
        """The default transform leaves pixels unchanged."""
        image = decode_image(png_bytes)
        payload = encode_image(image)

        assert payload.content_type == IMAGE_CONTENT_TYPE
        decoded = _decode(payload.body)
        assert decoded.size == image.size
        assert decoded.convert("RGB").getpixel((0, 0)) == image.convert("RGB").getpixel((0, 0))

    def test_encode_applies_transform(self, png_bytes):
        """Any callable transform is applied before encoding."""
        image = decode_image(png_bytes)
        payload = encode_image(image, lambda img: img.crop((0, 0, 5, 4)))

        assert _decode(payload.body).size == (5, 4)

    def test_transform_failure_is_bad_request(self, png_bytes):
        """Pillow errors raised by a transform are classified as bad requests."""
        image = decode_image(png_bytes)

        def broken(img):
            raise ValueError("unsupported mode")

        with pytest.raises(KVError) as exc_info:
            encode_image(image, broken)

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST
        assert exc_info.value.message == "error processing image"

    def test_transform_type_error_is_bad_request(self, png_bytes):
        image = decode_image(png_bytes)

        def broken(img):
            raise TypeError("bad band layout")

        with pytest.raises(KVError) as exc_info:
            encode_image(image, broken)

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST

    def test_encode_failure_is_bad_request(self):
        """Modes PNG cannot hold fail to encode."""
        with pytest.raises(KVError) as exc_info:
            encode_image(Image.new("CMYK", (3, 3)))

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST


class TestTransforms:
    """Test the individual pixel transforms."""

    def test_identity_returns_same_image(self):
        image = Image.new("RGB", (4, 4))
        assert transforms.identity(image) is image

    def test_grayscale_preserves_dimensions(self):
        """Grayscale keeps the size and switches to luminance."""
        image = Image.new("RGB", (17, 9), color=(200, 10, 10))
        result = transforms.grayscale(image)

        assert result.size == (17, 9)
        assert result.mode == "L"
        assert image.mode == "RGB"

    def test_grayscale_keeps_alpha(self):
        """Transparent images keep their alpha channel."""
        result = transforms.grayscale(Image.new("RGBA", (5, 5), color=(0, 0, 255, 128)))

        assert result.mode == "LA"
        assert result.getpixel((0, 0))[1] == 128

    def test_thumbnail_fits_box_and_keeps_aspect(self):
        """Large images shrink to fit inside the box."""
        result = transforms.thumbnail(100, 100)(Image.new("RGB", (300, 150)))

        assert result.size == (100, 50)

    def test_thumbnail_does_not_upscale(self):
        """Images already inside the box keep their size."""
        result = transforms.thumbnail(100, 100)(Image.new("RGB", (20, 10)))

        assert result.size == (20, 10)

    def test_thumbnail_leaves_source_untouched(self):
        """The stored image is shared, so it must not be resized in place."""
        image = Image.new("RGB", (400, 400))
        transforms.thumbnail(100, 100)(image)

        assert image.size == (400, 400)

    @pytest.mark.parametrize("width, height", [(0, 10), (10, -1)])
    def test_thumbnail_rejects_bad_dimensions(self, width, height):
        with pytest.raises(ValueError):
            transforms.thumbnail(width, height)

    def test_blur_preserves_dimensions(self):
        """Blur changes pixels but not size."""
        image = Image.new("RGB", (12, 12), color=(0, 0, 0))
        image.putpixel((6, 6), (255, 255, 255))
        result = transforms.blur(2.0)(image)

        assert result.size == (12, 12)
        assert result.getpixel((6, 6)) != (255, 255, 255)

    def test_blur_palette_image(self):
        """Palette images are converted before filtering."""
        result = transforms.blur(1.0)(Image.new("P", (8, 8)))

        assert result.size == (8, 8)

    def test_blur_rejects_negative_sigma(self):
        with pytest.raises(ValueError):
            transforms.blur(-0.5)
