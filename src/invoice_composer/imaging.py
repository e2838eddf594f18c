"""Logo images: decoded raster buffers, acquisition and aspect-preserving fit."""

import base64
import binascii
import io
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import ImageDecodeFailure

logger = logging.getLogger(__name__)

DATA_URI_PATTERN = re.compile(r"^data:image/(png|jpeg|jpg);base64,", re.IGNORECASE)


@dataclass(frozen=True, eq=False)
class RasterImage:
    """A decoded pixel buffer with known intrinsic size.

    ``pixels`` is an ``H x W`` (grey) or ``H x W x C`` (RGB/RGBA) uint8 array.
    Compared by identity; the composer never touches the pixels.
    """
    pixels: np.ndarray

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def mode(self) -> str:
        if self.pixels.ndim == 2:
            return "L"
        return "RGBA" if self.pixels.shape[2] == 4 else "RGB"

    def to_pil(self) -> Image.Image:
        """Return a Pillow image over the pixel data."""
        return Image.fromarray(np.ascontiguousarray(self.pixels, dtype=np.uint8))


def fit_image(
    natural_width: float,
    natural_height: float,
    max_width: float,
    max_height: float,
) -> Tuple[float, float]:
    """Scale image dimensions into a bounding box, preserving aspect ratio.

    Width is clamped first; the (possibly scaled) height is then clamped
    independently. Images already inside the box are left alone.
    """
    if natural_width <= 0 or natural_height <= 0:
        raise ValueError(
            f"Image dimensions must be positive, got {natural_width}x{natural_height}"
        )

    width = float(natural_width)
    height = float(natural_height)

    if width > max_width:
        ratio = max_width / width
        width = float(max_width)
        height = height * ratio

    if height > max_height:
        ratio = max_height / height
        height = float(max_height)
        width = width * ratio

    return width, height


def _read_source(source: Union[bytes, str, Path]) -> Tuple[bytes, str]:
    """Return (raw bytes, description) for bytes, a data URI or a file path."""
    if isinstance(source, (bytes, bytearray)):
        return bytes(source), "bytes"

    text = str(source)
    if text.startswith("data:"):
        match = DATA_URI_PATTERN.match(text)
        if not match:
            raise ImageDecodeFailure(
                "unsupported data URI (expected PNG or JPEG base64)", source="data URI"
            )
        try:
            return base64.b64decode(text[match.end():], validate=True), "data URI"
        except (binascii.Error, ValueError) as e:
            raise ImageDecodeFailure(f"invalid base64 payload: {e}", source="data URI") from e

    path = Path(text)
    try:
        return path.read_bytes(), str(path)
    except OSError as e:
        raise ImageDecodeFailure(str(e), source=str(path)) from e


def load_raster_image(source: Union[bytes, str, Path]) -> RasterImage:
    """Decode a logo from bytes, a file path or a ``data:image/...`` URI.

    Raises ImageDecodeFailure when the input cannot be decoded or has no
    pixels.
    """
    raw, description = _read_source(source)

    try:
        with Image.open(io.BytesIO(raw)) as img:
            img.load()
            if img.mode not in ("L", "RGB", "RGBA"):
                has_alpha = "A" in img.getbands() or "transparency" in img.info
                img = img.convert("RGBA" if has_alpha else "RGB")
            pixels = np.asarray(img, dtype=np.uint8)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageDecodeFailure(str(e) or type(e).__name__, source=description) from e

    if pixels.ndim < 2 or pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise ImageDecodeFailure("image has no pixels", source=description)

    logger.debug("Decoded logo from %s: %dx%d", description, pixels.shape[1], pixels.shape[0])
    return RasterImage(pixels=pixels)
