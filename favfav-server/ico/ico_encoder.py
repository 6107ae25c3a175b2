"""
ICO Container Encoder
Packs PNG images into one multi-resolution .ico file.
PNG payloads are embedded as-is (Vista+ format), not converted to BMP.
"""
from dataclasses import dataclass
from io import BytesIO
from typing import Iterable, List, Tuple
import struct

from PIL import Image

from errors import DecodeError, EncodeError
from imaging.resampler import encode_png
from imaging.source_image import PIL_DECODE_ERRORS

ICO_HEADER = struct.Struct("<HHH")  # Reserved, Type (1=ICO), Count
ICO_DIR_ENTRY = struct.Struct("<BBBBHHII")
ICO_TYPE_ICON = 1
ICO_MAX_DIMENSION = 256
ICO_MAX_IMAGES = 0xFFFF


@dataclass(frozen=True)
class IcoEntry:
    width: int
    height: int
    planes: int
    bit_count: int
    size: int
    offset: int


def encode_ico(images: Iterable[bytes]) -> bytes:
    """
    Build an ICO container from PNG-encoded images

    Directory entries keep the input order. A 256px edge is stored as 0.

    Args:
        images: Ordered PNG payloads (other raster formats are re-encoded to PNG)

    Returns:
        ICO file bytes
    """
    images = list(images)
    if not images:
        raise EncodeError("Cannot build an ICO without images")
    if len(images) > ICO_MAX_IMAGES:
        raise EncodeError(f"ICO holds at most {ICO_MAX_IMAGES} images, got {len(images)}")

    frames = [_prepare_frame(data, index) for index, data in enumerate(images)]

    num_images = len(frames)
    header = ICO_HEADER.pack(0, ICO_TYPE_ICON, num_images)
    data_offset = ICO_HEADER.size + ICO_DIR_ENTRY.size * num_images

    directory = b""
    image_data = b""

    for (width, height), png_bytes in frames:
        entry = ICO_DIR_ENTRY.pack(
            _dimension_byte(width),
            _dimension_byte(height),
            0,  # Color palette (0 for PNG)
            0,  # Reserved
            1,  # Color planes
            32,  # Bits per pixel
            len(png_bytes),
            data_offset + len(image_data),
        )
        directory += entry
        image_data += png_bytes

    return header + directory + image_data


def read_ico_directory(data: bytes) -> List[IcoEntry]:
    """Parse the header and directory of an ICO file"""
    if len(data) < ICO_HEADER.size:
        raise DecodeError("ICO data is shorter than its header")

    reserved, ico_type, count = ICO_HEADER.unpack_from(data, 0)
    if reserved != 0 or ico_type != ICO_TYPE_ICON:
        raise DecodeError(f"Not an ICO file (reserved={reserved}, type={ico_type})")

    directory_end = ICO_HEADER.size + ICO_DIR_ENTRY.size * count
    if len(data) < directory_end:
        raise DecodeError(f"ICO directory truncated: {count} entries declared")

    entries = []
    for index in range(count):
        width, height, _, _, planes, bit_count, size, offset = ICO_DIR_ENTRY.unpack_from(
            data, ICO_HEADER.size + ICO_DIR_ENTRY.size * index
        )
        if offset < directory_end or offset + size > len(data):
            raise DecodeError(f"ICO entry {index} points outside the file")
        entries.append(
            IcoEntry(
                width=width or ICO_MAX_DIMENSION,
                height=height or ICO_MAX_DIMENSION,
                planes=planes,
                bit_count=bit_count,
                size=size,
                offset=offset,
            )
        )
    return entries


def extract_ico_images(data: bytes) -> List[bytes]:
    """Return the embedded image payloads in directory order"""
    return [data[e.offset:e.offset + e.size] for e in read_ico_directory(data)]


def _prepare_frame(data: bytes, index: int) -> Tuple[Tuple[int, int], bytes]:
    if not data:
        raise EncodeError(f"ICO image {index} is empty")
    try:
        with Image.open(BytesIO(data)) as image:
            image.load()
            width, height = image.size
            png_bytes = data if image.format == "PNG" else encode_png(image.convert("RGBA"))
    except PIL_DECODE_ERRORS as e:
        raise EncodeError(f"ICO image {index} is not a valid raster ({e})") from e

    if width > ICO_MAX_DIMENSION or height > ICO_MAX_DIMENSION:
        raise EncodeError(
            f"ICO image {index} is {width}x{height}; the format caps edges at {ICO_MAX_DIMENSION}px"
        )
    return (width, height), png_bytes


def _dimension_byte(size: int) -> int:
    # 0 means 256 in the ICO directory
    return 0 if size == ICO_MAX_DIMENSION else size
