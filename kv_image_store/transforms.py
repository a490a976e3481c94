"""Pixel transforms applied to stored images before they are re-encoded.

A transform is any callable taking a decoded image and returning a new one.
Transforms never modify their input: the image belongs to the store and may
be read by other requests at the same time.
"""

from typing import Callable

from PIL import Image, ImageFilter

Transform = Callable[[Image.Image], Image.Image]


def identity(image: Image.Image) -> Image.Image:
    return image


def _has_alpha(image: Image.Image) -> bool:
    return "A" in image.getbands() or "transparency" in image.info


def grayscale(image: Image.Image) -> Image.Image:
    """Convert to 8-bit luminance, keeping the alpha channel if there is one."""
    if _has_alpha(image):
        if image.mode == "P":
            image = image.convert("RGBA")
        return image.convert("LA")
    return image.convert("L")


def thumbnail(width: int, height: int) -> Transform:
    """Build a transform that fits an image inside ``width`` x ``height``.

    The aspect ratio is preserved and images already inside the box are
    returned at their original size.
    """
    if width <= 0 or height <= 0:
        raise ValueError("Thumbnail dimensions must be positive")

    def apply(image: Image.Image) -> Image.Image:
        result = image.copy()
        result.thumbnail((width, height))
        return result

    return apply


def blur(sigma: float) -> Transform:
    """Build a Gaussian blur transform with standard deviation ``sigma``."""
    if sigma < 0:
        raise ValueError("Blur sigma cannot be negative")

    def apply(image: Image.Image) -> Image.Image:
        # Palette images cannot be filtered directly
        if image.mode == "P":
            image = image.convert("RGBA")
        return image.filter(ImageFilter.GaussianBlur(radius=sigma))

    return apply
