"""PixelBuffer — uniform read-only access to a decoded RGBA image.

The buffer wraps an H×W×4 ``uint8`` array (row-major RGBA, the same layout as
a canvas ImageData). It is immutable and owned by a single analysis run.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from uisight.models.analysis import BoundingBox


@dataclass(frozen=True)
class PixelBuffer:
    """Immutable RGBA pixel grid."""

    data: NDArray[np.uint8]

    def __post_init__(self) -> None:
        if self.data.ndim != 3 or self.data.shape[2] != 4:
            raise ValueError(f"expected an H×W×4 RGBA array, got shape {self.data.shape}")
        # Own a private copy so freezing never touches the caller's array.
        data = np.array(self.data, dtype=np.uint8, order="C")
        data.setflags(write=False)
        object.__setattr__(self, "data", data)

    # -- construction -------------------------------------------------------

    @classmethod
    def from_rgba(cls, width: int, height: int, data: bytes | bytearray | memoryview) -> PixelBuffer:
        """Build from a flat RGBA byte sequence (4 bytes per pixel)."""
        expected = width * height * 4
        if width < 0 or height < 0 or len(data) != expected:
            raise ValueError(
                f"RGBA data length {len(data)} does not match {width}×{height}×4 = {expected}"
            )
        arr = np.frombuffer(bytes(data), dtype=np.uint8).reshape((height, width, 4))
        return cls(arr)

    @classmethod
    def from_array(cls, arr: NDArray) -> PixelBuffer:
        """Build from an H×W×3 (RGB, opaque) or H×W×4 (RGBA) array."""
        arr = np.asarray(arr)
        if arr.ndim == 3 and arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr.astype(np.uint8), alpha], axis=2)
        return cls(arr)

    @classmethod
    def from_image(cls, image: Image.Image) -> PixelBuffer:
        return cls(np.asarray(image.convert("RGBA")))

    # -- shape --------------------------------------------------------------

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def size(self) -> int:
        return self.width * self.height

    # -- access -------------------------------------------------------------

    def rgb(self, x: int, y: int) -> tuple[int, int, int]:
        r, g, b = self.data[y, x, :3]
        return (int(r), int(g), int(b))

    def gray(self, x: int, y: int) -> float:
        """(R + G + B) / 3 on the 0–255 scale."""
        r, g, b = self.rgb(x, y)
        return (r + g + b) / 3

    def gray_plane(self) -> NDArray[np.float64]:
        """H×W float array of (R + G + B) / 3."""
        return self.data[:, :, :3].astype(np.float64).sum(axis=2) / 3.0

    def sub_region(self, box: BoundingBox) -> NDArray[np.uint8]:
        """View of the pixels under ``box`` (clamped to the image)."""
        b = box.clamped(self.width, self.height)
        return self.data[b.y : b.bottom, b.x : b.right]
