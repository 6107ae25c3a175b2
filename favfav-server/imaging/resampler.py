"""
Raster Resampler
Scales a source image onto a transparent square canvas ("contain" fit)
"""
from io import BytesIO

from PIL import Image

from errors import InvalidOptionsError
from imaging.source_image import SourceImage


def resample(source: SourceImage, target_size: int) -> bytes:
    """
    Produce a target_size x target_size PNG from a source image

    A square PNG that already has the requested size is returned byte for
    byte. Anything else is letterboxed: scaled to fit, centered, and padded
    with fully transparent pixels. Smaller sources are upscaled.

    Args:
        source: Image to scale
        target_size: Edge length of the square output in pixels

    Returns:
        PNG bytes with an alpha channel
    """
    if target_size <= 0:
        raise InvalidOptionsError(f"Target size must be positive, got {target_size}")

    if source.is_square_png and source.width == target_size:
        return source.data

    image = source.decode()
    return encode_png(fit_contain(image, target_size))


def fit_contain(image: Image.Image, target_size: int) -> Image.Image:
    """Return a square RGBA canvas with the image scaled to fit and centered"""
    image_rgba = image.convert("RGBA")

    src_w, src_h = image_rgba.size
    scale = min(target_size / src_w, target_size / src_h)
    new_w = max(1, int(round(src_w * scale)))
    new_h = max(1, int(round(src_h * scale)))
    resized = image_rgba.resize((new_w, new_h), Image.Resampling.LANCZOS)

    # Canvas is fully transparent, so a plain paste keeps partial alpha intact
    canvas = Image.new("RGBA", (target_size, target_size), (0, 0, 0, 0))
    offset = ((target_size - new_w) // 2, (target_size - new_h) // 2)
    canvas.paste(resized, offset)
    return canvas


def encode_png(image: Image.Image) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
