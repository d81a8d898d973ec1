"""Image decoding — encoded bytes → PixelBuffer via Pillow."""

from __future__ import annotations

import io
import logging
import struct

from PIL import Image, UnidentifiedImageError

from uisight.engine.pixels import PixelBuffer

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 20 * 1024 * 1024
DEFAULT_MAX_PIXELS = 40_000_000


class ImageDecodeError(ValueError):
    """The input could not be turned into pixels. The only error surfaced to callers."""


def decode_image(
    data: bytes,
    max_bytes: int = DEFAULT_MAX_BYTES,
    max_pixels: int = DEFAULT_MAX_PIXELS,
) -> PixelBuffer:
    """Decode PNG/JPEG/WebP/... bytes into an RGBA PixelBuffer."""
    if not data:
        raise ImageDecodeError("empty image data")
    if len(data) > max_bytes:
        raise ImageDecodeError(f"image is {len(data)} bytes, limit is {max_bytes}")

    try:
        with Image.open(io.BytesIO(data)) as image:
            width, height = image.size
            if width * height > max_pixels:
                raise ImageDecodeError(
                    f"image is {width}×{height} = {width * height} pixels, limit is {max_pixels}"
                )
            image.load()
            pixels = PixelBuffer.from_image(image)
    except ImageDecodeError:
        raise
    # Broken chunks surface as SyntaxError, truncated headers as ValueError.
    except (
        UnidentifiedImageError,
        OSError,
        SyntaxError,
        ValueError,
        EOFError,
        struct.error,
        Image.DecompressionBombError,
    ) as e:
        raise ImageDecodeError(f"cannot decode image: {e}") from e

    logger.debug("Decoded %s image %dx%d", image.format or "raw", pixels.width, pixels.height)
    return pixels
