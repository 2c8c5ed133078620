"""
Decoded RGBA source bitmap handed to the conversion pipeline.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np
from PIL import Image

from .errors import BitmapDecodeError


@dataclass(frozen=True, eq=False)
class Bitmap:
    """Immutable W×H RGBA pixel buffer.

    ``pixels`` has shape (height, width, 4), dtype uint8, row-major with
    row 0 at the top. The array is made read-only on construction.
    """
    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise BitmapDecodeError(
                f"Bitmap dimensions must be positive, got {self.width}x{self.height}"
            )
        pixels = np.asarray(self.pixels)
        if pixels.dtype != np.uint8 or pixels.shape != (self.height, self.width, 4):
            raise BitmapDecodeError(
                f"Expected uint8 pixels of shape {(self.height, self.width, 4)}, "
                f"got {pixels.dtype} {pixels.shape}"
            )
        pixels = pixels.copy()
        pixels.setflags(write=False)
        object.__setattr__(self, "pixels", pixels)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Bitmap":
        """Build a bitmap from a (H, W), (H, W, 3) or (H, W, 4) uint8 array."""
        arr = np.asarray(array)
        if arr.dtype != np.uint8:
            raise BitmapDecodeError(f"Expected uint8 array, got {arr.dtype}")

        if arr.ndim == 2:
            arr = np.stack([arr, arr, arr], axis=2)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise BitmapDecodeError(f"Unsupported array shape: {arr.shape}")
        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)

        h, w = arr.shape[:2]
        return cls(width=w, height=h, pixels=arr)

    @classmethod
    def from_pil(cls, image: Image.Image) -> "Bitmap":
        """Build a bitmap from any Pillow image."""
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls.from_array(np.array(image, dtype=np.uint8))

    def to_pil(self) -> Image.Image:
        """Return an RGBA Pillow image of this bitmap."""
        return Image.fromarray(self.pixels.copy())

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        """RGBA tuple at column ``x``, row ``y``."""
        r, g, b, a = self.pixels[y, x]
        return (int(r), int(g), int(b), int(a))
