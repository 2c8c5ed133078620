import numpy as np
from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from pixelgrid.grid import EMPTY, PixelGrid
from pixelgrid.mapper import find_closest_color, map_to_grid, nearest_indices, remap_grid
from pixelgrid.quantize import PaletteEntry, quantize_colors


def test_closest_color_ties_go_to_first_entry():
    palette = [PaletteEntry(0, 0, 0), PaletteEntry(20, 0, 0)]
    assert find_closest_color(10, 0, 0, palette) is palette[0]
    assert find_closest_color(11, 0, 0, palette) is palette[1]


def test_closest_color_needs_a_palette():
    with pytest.raises(ValueError):
        find_closest_color(1, 2, 3, [])


def test_vectorised_lookup_agrees_with_scalar_lookup():
    rng = np.random.default_rng(11)
    palette = [PaletteEntry(*map(int, rgb)) for rgb in rng.integers(0, 256, size=(6, 3))]
    pixels = rng.integers(0, 256, size=(200, 3))

    indices = nearest_indices(pixels, palette)

    for pixel, index in zip(pixels, indices):
        expected = find_closest_color(int(pixel[0]), int(pixel[1]), int(pixel[2]), palette)
        assert palette[index] == expected


def test_transparent_pixels_become_empty_cells():
    rgba = np.array([
        [[255, 0, 0, 255], [0, 0, 0, 0]],
        [[0, 0, 255, 127], [0, 0, 255, 128]],
    ], dtype=np.uint8)
    palette = [PaletteEntry(255, 0, 0), PaletteEntry(0, 0, 255)]

    grid = map_to_grid(rgba, palette)

    assert grid.to_rows() == [
        ["#ff0000", EMPTY],
        [EMPTY, "#0000ff"],
    ]


def test_every_painted_cell_uses_a_palette_color():
    rng = np.random.default_rng(5)
    rgba = rng.integers(0, 256, size=(12, 12, 4), dtype=np.uint8)
    palette = quantize_colors(rgba, 5)

    grid = map_to_grid(rgba, palette)

    assert set(grid.colors_used()) <= {entry.hex for entry in palette}
    opaque = rgba[..., 3] >= 128
    painted = np.array([[cell != EMPTY for cell in row] for row in grid.rows()])
    assert np.array_equal(opaque, painted)


def test_remapping_onto_the_same_palette_changes_nothing():
    rng = np.random.default_rng(9)
    rgba = rng.integers(0, 256, size=(8, 8, 4), dtype=np.uint8)
    palette = quantize_colors(rgba, 4)
    grid = map_to_grid(rgba, palette)

    assert remap_grid(grid, palette) == grid


def test_empty_palette_leaves_grid_empty():
    rgba = np.zeros((3, 3, 4), dtype=np.uint8)
    assert map_to_grid(rgba, []).is_empty()


def test_non_square_buffer_is_rejected():
    with pytest.raises(ValueError):
        map_to_grid(np.zeros((2, 3, 4), dtype=np.uint8), [PaletteEntry(0, 0, 0)])


def test_remap_requires_palette():
    with pytest.raises(ValueError):
        remap_grid(PixelGrid(2), [])
