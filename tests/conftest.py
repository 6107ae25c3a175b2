from io import BytesIO

import pytest
from PIL import Image

from imaging.source_image import load_source


def encode(image, fmt="PNG"):
    buffer = BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    """Factory for in-memory PNGs"""

    def _make(width, height=None, color=(99, 102, 241, 255), mode="RGBA"):
        height = width if height is None else height
        return encode(Image.new(mode, (width, height), color))

    return _make


@pytest.fixture
def source(png_bytes):
    """Factory for SourceImage objects backed by solid-color PNGs"""

    def _make(width, height=None, color=(99, 102, 241, 255), label="image"):
        return load_source(png_bytes(width, height, color), label=label)

    return _make


@pytest.fixture
def jpeg_bytes():
    def _make(width, height=None, color=(200, 30, 30)):
        height = width if height is None else height
        return encode(Image.new("RGB", (width, height), color), fmt="JPEG")

    return _make


def open_png(data):
    image = Image.open(BytesIO(data))
    image.load()
    return image
