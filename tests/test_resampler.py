from io import BytesIO

import pytest
from PIL import Image

from conftest import open_png
from errors import DecodeError, InvalidOptionsError
from imaging.resampler import resample
from imaging.source_image import SourceImage, load_source
from config import settings


def test_square_png_of_target_size_passes_through(source):
    src = source(32)
    assert resample(src, 32) is src.data


def test_downscale_produces_rgba_square(source):
    out = open_png(resample(source(64), 16))
    assert out.format == "PNG"
    assert out.size == (16, 16)
    assert out.mode == "RGBA"


def test_upscale_smaller_source(source):
    out = open_png(resample(source(10), 48))
    assert out.size == (48, 48)


def test_wide_source_is_letterboxed_on_transparent_canvas(source):
    out = open_png(resample(source(100, 50, color=(255, 0, 0, 255)), 32))
    assert out.size == (32, 32)
    # 100x50 scaled into 32x32 -> 32x16 band centered vertically
    assert out.getpixel((16, 0))[3] == 0
    assert out.getpixel((16, 31))[3] == 0
    red, _, _, alpha = out.getpixel((16, 16))
    assert red > 250 and alpha == 255


def test_tall_source_is_pillarboxed(source):
    out = open_png(resample(source(20, 80), 40))
    assert out.getpixel((0, 20))[3] == 0
    assert out.getpixel((39, 20))[3] == 0
    assert out.getpixel((20, 20))[3] == 255


def test_partial_alpha_is_preserved(source):
    out = open_png(resample(source(64, color=(10, 20, 30, 128)), 32))
    assert abs(out.getpixel((16, 16))[3] - 128) <= 1


def test_jpeg_of_target_size_is_reencoded_as_png(jpeg_bytes):
    src = load_source(jpeg_bytes(48), label="photo.jpg")
    data = resample(src, 48)
    assert data != src.data
    out = open_png(data)
    assert out.format == "PNG"
    assert out.size == (48, 48)


def test_non_square_png_of_matching_width_is_not_passed_through(source):
    src = source(32, 16)
    out = open_png(resample(src, 32))
    assert out.size == (32, 32)


def test_undecodable_source_raises_decode_error():
    broken = SourceImage(data=b"\x89PNG\r\n\x1a\nnot really", width=16, height=16, format="PNG")
    with pytest.raises(DecodeError):
        resample(broken, 32)


def test_non_positive_target_rejected(source):
    with pytest.raises(InvalidOptionsError):
        resample(source(16), 0)


def test_load_source_reads_dimensions(png_bytes):
    src = load_source(png_bytes(30, 20), label="logo.png")
    assert (src.width, src.height, src.format) == (30, 20, "PNG")
    assert src.native_size == 30
    assert not src.is_square_png


def test_load_source_rejects_garbage():
    with pytest.raises(DecodeError):
        load_source(b"definitely not an image")


def test_load_source_rejects_empty():
    with pytest.raises(DecodeError):
        load_source(b"")


def test_load_source_enforces_pixel_limit(png_bytes, monkeypatch):
    monkeypatch.setattr(settings, "max_image_pixels", 100)
    with pytest.raises(DecodeError):
        load_source(png_bytes(20))


def test_animated_gif_uses_first_frame():
    frames = [Image.new("RGB", (20, 20), c) for c in ((255, 0, 0), (0, 0, 255))]
    buffer = BytesIO()
    frames[0].save(buffer, format="GIF", save_all=True, append_images=frames[1:])
    src = load_source(buffer.getvalue(), label="anim.gif")

    out = open_png(resample(src, 10))
    red, green, blue, alpha = out.getpixel((5, 5))
    assert red > 200 and blue < 50 and alpha == 255
