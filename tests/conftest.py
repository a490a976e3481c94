"""Shared fixtures for the test suite."""

import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from kv_image_store.dependencies import get_key_value_store
from kv_image_store.main import app
from kv_image_store.storage import InMemoryKeyValueStore


def encode_test_image(
    width: int = 10,
    height: int = 10,
    mode: str = "RGB",
    fmt: str = "PNG",
    seed: int = 0,
) -> bytes:
    """Create a small solid-colour test image.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        mode: Pillow mode of the image.
        fmt: Pillow format to encode with.
        seed: Seed for generating different colours.

    Returns:
        bytes: Encoded image data.
    """
    bands = Image.getmodebands(mode)
    color = tuple((seed * (50 + 50 * i)) % 256 for i in range(bands))
    img = Image.new(mode, (width, height), color=color if bands > 1 else color[0])

    img_bytes = io.BytesIO()
    img.save(img_bytes, format=fmt)
    return img_bytes.getvalue()


@pytest.fixture
def make_image():
    """Factory fixture returning encoded test images."""
    return encode_test_image


@pytest.fixture
def png_bytes():
    """A 30x20 RGB PNG."""
    return encode_test_image(width=30, height=20, seed=3)


@pytest.fixture
def memory_store():
    """A fresh in-memory store with a short lock timeout."""
    return InMemoryKeyValueStore(lock_timeout=1.0)


@pytest.fixture
def client(memory_store):
    """Test client whose requests all share ``memory_store``."""
    app.dependency_overrides[get_key_value_store] = lambda: memory_store
    yield TestClient(app)
    app.dependency_overrides.clear()
