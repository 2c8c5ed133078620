"""
Nearest-neighbour resampling of a source bitmap onto a square grid canvas.

Three aspect policies are supported:
    - stretch: the whole bitmap is squeezed onto the grid
    - crop-to-fit: a square source region is cut out, slightly left of
      centre for landscape images and towards the upper third for portrait
      images, and mapped onto the whole grid
    - letterbox: the whole bitmap is fitted inside the grid and centred,
      the uncovered border stays fully transparent
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from PIL import Image

from .bitmap import Bitmap
from .errors import InvalidOptionsError

# Composition bias for crop-to-fit
LANDSCAPE_CROP_BIAS = 0.4
PORTRAIT_CROP_BIAS = 0.3


def round_half_up(value: float) -> int:
    """Round like JavaScript's Math.round (halves go towards +inf)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class Layout:
    """Source region and destination rectangle for one resample."""
    source_x: float
    source_y: float
    source_width: float
    source_height: float
    dest_x: int
    dest_y: int
    dest_width: int
    dest_height: int

    @property
    def source_box(self) -> Tuple[float, float, float, float]:
        """Source region as a Pillow (left, upper, right, lower) box."""
        return (
            self.source_x,
            self.source_y,
            self.source_x + self.source_width,
            self.source_y + self.source_height,
        )

    @property
    def is_empty(self) -> bool:
        return self.dest_width <= 0 or self.dest_height <= 0


def compute_layout(width: int, height: int, grid_size: int,
                   maintain_aspect_ratio: bool = True,
                   crop_to_fit: bool = True) -> Layout:
    """
    Work out which part of the source lands where on the grid canvas.

    Args:
        width: Source width in pixels
        height: Source height in pixels
        grid_size: Side of the square destination canvas
        maintain_aspect_ratio: False stretches the whole source
        crop_to_fit: True crops to a square, False letterboxes

    Returns:
        Layout with the source region and destination rectangle
    """
    source_x, source_y = 0.0, 0.0
    source_width, source_height = float(width), float(height)
    dest_x, dest_y = 0, 0
    dest_width, dest_height = grid_size, grid_size

    if maintain_aspect_ratio:
        aspect_ratio = width / height

        if crop_to_fit:
            if aspect_ratio > 1:
                source_width = float(height)
                source_x = max(0.0, (width - source_width) * LANDSCAPE_CROP_BIAS)
            elif aspect_ratio < 1:
                source_height = float(width)
                source_y = max(0.0, (height - source_height) * PORTRAIT_CROP_BIAS)
        else:
            if aspect_ratio > 1:
                dest_height = round_half_up(grid_size / aspect_ratio)
                dest_y = round_half_up((grid_size - dest_height) / 2)
            elif aspect_ratio < 1:
                dest_width = round_half_up(grid_size * aspect_ratio)
                dest_x = round_half_up((grid_size - dest_width) / 2)

    return Layout(
        source_x=source_x,
        source_y=source_y,
        source_width=source_width,
        source_height=source_height,
        dest_x=dest_x,
        dest_y=dest_y,
        dest_width=dest_width,
        dest_height=dest_height,
    )


def resample(bitmap: Bitmap, grid_size: int,
             maintain_aspect_ratio: bool = True,
             crop_to_fit: bool = True) -> np.ndarray:
    """
    Resample ``bitmap`` onto a grid_size×grid_size RGBA canvas.

    Sampling is nearest-neighbour only so source pixels keep hard edges.
    Pixels outside the drawn rectangle are (0, 0, 0, 0); drawn pixels keep
    the source alpha.

    Returns:
        uint8 array of shape (grid_size, grid_size, 4)
    """
    if grid_size <= 0:
        raise InvalidOptionsError(f"grid_size must be positive, got {grid_size}")

    layout = compute_layout(
        bitmap.width, bitmap.height, grid_size,
        maintain_aspect_ratio, crop_to_fit,
    )

    canvas = Image.new("RGBA", (grid_size, grid_size), (0, 0, 0, 0))
    if not layout.is_empty:
        drawn = bitmap.to_pil().resize(
            (layout.dest_width, layout.dest_height),
            Image.Resampling.NEAREST,
            box=layout.source_box,
        )
        # Plain paste replaces pixels, alpha included
        canvas.paste(drawn, (layout.dest_x, layout.dest_y))

    return np.array(canvas, dtype=np.uint8)
