"""Shared test fixtures — synthetic screenshots built with numpy."""

from __future__ import annotations

import base64
import io
import struct

import numpy as np
import pytest
from PIL import Image

from uisight.engine.pixels import PixelBuffer

# Slate page background, white cards.
BACKGROUND = (30, 41, 59)
WHITE = (255, 255, 255)

# 2×2 grid of 200×150 cards on a 1200×800 page.
CARD_SIZE = (200, 150)
CARD_ORIGINS = [(200, 150), (500, 150), (200, 400), (500, 400)]

# Five 100×30 navigation items at y=20.
NAV_SIZE = (100, 30)
NAV_ORIGINS = [(40 + i * 140, 20) for i in range(5)]


def make_canvas(width: int, height: int, color: tuple[int, int, int] = BACKGROUND) -> np.ndarray:
    canvas = np.empty((height, width, 3), dtype=np.uint8)
    canvas[:, :] = color
    return canvas


def draw_rect(canvas: np.ndarray, x: int, y: int, w: int, h: int,
              color: tuple[int, int, int] = WHITE) -> None:
    canvas[y : y + h, x : x + w] = color


def card_grid_array() -> np.ndarray:
    canvas = make_canvas(1200, 800)
    for x, y in CARD_ORIGINS:
        draw_rect(canvas, x, y, *CARD_SIZE)
    return canvas


def nav_strip_array() -> np.ndarray:
    canvas = make_canvas(1200, 800)
    for x, y in NAV_ORIGINS:
        draw_rect(canvas, x, y, *NAV_SIZE)
    return canvas


def png_bytes(arr: np.ndarray) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(arr).save(buf, format="PNG")
    return buf.getvalue()


def png_base64(arr: np.ndarray) -> str:
    return base64.b64encode(png_bytes(arr)).decode("ascii")


def truncated_ihdr_png(arr: np.ndarray) -> bytes:
    """A PNG whose IHDR chunk claims 4 data bytes instead of 13."""
    good = png_bytes(arr)
    # signature(8) length(4) type(4) data(13) crc(4)
    return good[:8] + struct.pack(">I", 4) + b"IHDR" + good[16:20] + good[29:33] + good[33:]


@pytest.fixture
def uniform_pixels() -> PixelBuffer:
    return PixelBuffer.from_array(make_canvas(200, 120, (120, 120, 120)))


@pytest.fixture
def card_grid_pixels() -> PixelBuffer:
    return PixelBuffer.from_array(card_grid_array())


@pytest.fixture
def nav_strip_pixels() -> PixelBuffer:
    return PixelBuffer.from_array(nav_strip_array())
