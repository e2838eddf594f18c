"""Unit tests for logo fitting and decoding."""

import base64
import io

import numpy as np
import pytest
from PIL import Image

from invoice_composer.errors import ImageDecodeFailure
from invoice_composer.imaging import RasterImage, fit_image, load_raster_image


@pytest.mark.parametrize(
    "natural,expected",
    [
        ((20, 10), (20, 10)),           # already inside the box
        ((400, 150), (40, 15)),         # width pass lands exactly on the height limit
        ((80, 10), (40, 5)),            # width pass only
        ((10, 60), (2.5, 15)),          # height clamp only
        ((200, 100), (30, 15)),         # width pass, then height clamp
    ],
)
def test_fit_image(natural, expected):
    width, height = fit_image(*natural, 40, 15)
    assert width == pytest.approx(expected[0])
    assert height == pytest.approx(expected[1])


@pytest.mark.parametrize(
    "natural",
    [(400, 150), (1234, 567), (10, 600), (41, 14), (3, 2), (999, 1)],
)
def test_fit_image_idempotent(natural):
    once = fit_image(*natural, 40, 15)
    assert fit_image(*once, 40, 15) == once


def test_fit_image_preserves_aspect_ratio():
    width, height = fit_image(1600, 900, 40, 15)
    assert width / height == pytest.approx(1600 / 900)
    assert width <= 40 and height <= 15


@pytest.mark.parametrize("natural", [(0, 10), (10, 0), (-5, 10)])
def test_fit_image_rejects_empty_images(natural):
    with pytest.raises(ValueError):
        fit_image(*natural, 40, 15)


def _png_bytes(size=(30, 12), mode="RGBA"):
    buf = io.BytesIO()
    Image.new(mode, size, (10, 20, 30, 255) if mode == "RGBA" else (10, 20, 30)).save(buf, format="PNG")
    return buf.getvalue()


def test_load_raster_image_from_bytes():
    image = load_raster_image(_png_bytes())
    assert (image.width, image.height) == (30, 12)
    assert image.mode == "RGBA"


def test_load_raster_image_from_data_uri():
    uri = "data:image/png;base64," + base64.b64encode(_png_bytes(mode="RGB")).decode("ascii")
    image = load_raster_image(uri)
    assert (image.width, image.height) == (30, 12)
    assert image.mode == "RGB"


def test_load_raster_image_from_path(tmp_path):
    path = tmp_path / "logo.png"
    path.write_bytes(_png_bytes(size=(8, 4)))
    image = load_raster_image(path)
    assert (image.width, image.height) == (8, 4)


@pytest.mark.parametrize(
    "source",
    [
        b"not an image",
        "data:image/gif;base64,R0lGODlhAQABAAAAACw=",
        "data:image/png;base64,@@@",
    ],
)
def test_load_raster_image_failures(source):
    with pytest.raises(ImageDecodeFailure):
        load_raster_image(source)


def test_load_raster_image_missing_file(tmp_path):
    with pytest.raises(ImageDecodeFailure) as exc:
        load_raster_image(tmp_path / "missing.png")
    assert "missing.png" in str(exc.value)


def test_raster_image_round_trips_to_pil():
    pixels = np.full((5, 7, 3), 128, dtype=np.uint8)
    img = RasterImage(pixels=pixels).to_pil()
    assert img.size == (7, 5)
    assert img.mode == "RGB"
