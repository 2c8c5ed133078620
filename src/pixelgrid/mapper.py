"""
Nearest-palette-color mapping from resampled pixels to grid cells.
"""

import logging
from typing import List, Sequence

import numpy as np

from .color_math import hex_to_rgb
from .grid import EMPTY, PixelGrid
from .quantize import ALPHA_THRESHOLD, PaletteEntry

logger = logging.getLogger(__name__)


def find_closest_color(r: int, g: int, b: int, palette: Sequence[PaletteEntry]) -> PaletteEntry:
    """Palette entry nearest to (r, g, b); the first of equally near entries wins."""
    if not palette:
        raise ValueError("Cannot map a color onto an empty palette")

    best = palette[0]
    min_distance = float('inf')
    for entry in palette:
        # Squared distance orders the same as Euclidean
        distance = (r - entry.r) ** 2 + (g - entry.g) ** 2 + (b - entry.b) ** 2
        if distance < min_distance:
            min_distance = distance
            best = entry
    return best


def nearest_indices(rgb: np.ndarray, palette: Sequence[PaletteEntry]) -> np.ndarray:
    """Index of the nearest palette entry for each row of an (K, 3) array."""
    palette_rgb = np.array([entry.rgb for entry in palette], dtype=np.int64)
    diff = rgb.astype(np.int64)[:, np.newaxis, :] - palette_rgb[np.newaxis, :, :]
    distances = np.sum(diff * diff, axis=2)
    # argmin returns the first minimum, which keeps palette order as tie-break
    return np.argmin(distances, axis=1)


def map_to_grid(rgba: np.ndarray, palette: List[PaletteEntry]) -> PixelGrid:
    """
    Build a grid from a square RGBA buffer and a palette.

    Args:
        rgba: (N, N, 4) resampled buffer
        palette: Palette from the quantizer

    Returns:
        New grid; transparent pixels (alpha < 128) are Empty, every other
        cell holds the hex of its nearest palette color.
    """
    rgba = np.asarray(rgba)
    if rgba.ndim != 3 or rgba.shape[0] != rgba.shape[1] or rgba.shape[2] != 4:
        raise ValueError(f"Expected a square (N, N, 4) buffer, got {rgba.shape}")
    size = rgba.shape[0]

    cells = np.full((size, size), EMPTY, dtype=object)
    opaque = rgba[:, :, 3] >= ALPHA_THRESHOLD

    if palette and opaque.any():
        hexes = np.array([entry.hex for entry in palette], dtype=object)
        indices = nearest_indices(rgba[opaque][:, :3], palette)
        cells[opaque] = hexes[indices]
    elif opaque.any():
        logger.warning("Empty palette for %d opaque pixels, leaving them empty", int(opaque.sum()))

    return PixelGrid(size, cells.tolist())


def remap_grid(grid: PixelGrid, palette: List[PaletteEntry]) -> PixelGrid:
    """Snap every painted cell of ``grid`` to its nearest palette color."""
    if not palette:
        raise ValueError("Cannot remap a grid onto an empty palette")

    lookup = {}
    for color in grid.colors_used():
        r, g, b = hex_to_rgb(color)
        lookup[color] = find_closest_color(r, g, b, palette).hex

    rows = [[lookup[cell] if cell != EMPTY else EMPTY for cell in row] for row in grid.rows()]
    return PixelGrid(grid.size, rows)
