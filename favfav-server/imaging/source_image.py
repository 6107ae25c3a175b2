"""
Source Images
Decoded-header view of an uploaded raster
"""
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

from PIL import Image, UnidentifiedImageError

from config import settings
from errors import DecodeError

# Everything Pillow raises for truncated, corrupt or unsupported input
PIL_DECODE_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    ValueError,
    SyntaxError,
)


@dataclass(frozen=True, eq=False)
class SourceImage:
    """Raw upload bytes plus the pixel dimensions read from their header.

    Instances compare and hash by identity so the assembler can memoize
    resampling per (source, size) without hashing image payloads.
    """

    data: bytes
    width: int
    height: int
    format: Optional[str] = None
    label: str = "image"

    @property
    def native_size(self) -> int:
        return max(self.width, self.height)

    @property
    def is_square_png(self) -> bool:
        return self.format == "PNG" and self.width == self.height

    def decode(self) -> Image.Image:
        """Fully decode the first frame of the image"""
        return decode_image(self.data, self.label)


def decode_image(data: bytes, label: str = "image") -> Image.Image:
    """Open and load image bytes, mapping every Pillow failure to DecodeError"""
    if not data:
        raise DecodeError(f"{label}: empty image data")
    try:
        image = Image.open(BytesIO(data))
        _check_pixel_budget(image, label)
        image.seek(0)
        image.load()
    except PIL_DECODE_ERRORS as e:
        raise DecodeError(f"{label}: cannot decode image ({e})") from e
    return image


def load_source(data: bytes, label: str = "image") -> SourceImage:
    """
    Read an upload's header and wrap it as a SourceImage

    Args:
        data: Encoded image bytes (PNG, JPEG, GIF, WebP, ...)
        label: Name used in error messages (usually the upload's field name)

    Returns:
        SourceImage with width, height and format filled in
    """
    if not data:
        raise DecodeError(f"{label}: empty image data")
    try:
        with Image.open(BytesIO(data)) as image:
            _check_pixel_budget(image, label)
            width, height = image.size
            image_format = image.format
    except PIL_DECODE_ERRORS as e:
        raise DecodeError(f"{label}: cannot decode image ({e})") from e

    if width <= 0 or height <= 0:
        raise DecodeError(f"{label}: image has no pixels")

    return SourceImage(data=bytes(data), width=width, height=height, format=image_format, label=label)


def _check_pixel_budget(image: Image.Image, label: str):
    width, height = image.size
    if width * height > settings.max_image_pixels:
        raise DecodeError(
            f"{label}: {width}x{height} exceeds the {settings.max_image_pixels} pixel limit"
        )
