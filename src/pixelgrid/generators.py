"""
Procedural scene generators.

Every generator builds a complete size×size grid in one go and returns it;
nothing is written to an existing grid. Randomness comes from a numpy
Generator so a seed reproduces the same scene.
"""

import math
import logging
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from .grid import EMPTY, PixelGrid

logger = logging.getLogger(__name__)

Rows = List[List[str]]


def _blank(size: int) -> Rows:
    return [[EMPTY] * size for _ in range(size)]


def _pick(rng: np.random.Generator, colors: Sequence[str]) -> str:
    return colors[int(rng.integers(len(colors)))]


def _put(rows: Rows, row: int, col: int, color: str):
    """Set a cell, ignoring coordinates outside the grid."""
    if 0 <= row < len(rows) and 0 <= col < len(rows):
        rows[row][col] = color


def generate_mountain_scene(size: int, rng: np.random.Generator) -> PixelGrid:
    """Sky, a ridge of snow-capped peaks and a strip of grass."""
    rows = _blank(size)

    sky_colors = ['#87CEEB', '#B0E0E6', '#E0F6FF', '#F0F8FF']
    mountain_colors = ['#8B7355', '#A0522D', '#CD853F', '#D2B48C']
    snow_colors = ['#FFFFFF', '#F8F8FF', '#FFFAFA']
    grass_colors = ['#228B22', '#32CD32', '#90EE90']

    for row in range(math.floor(size * 0.4)):
        for col in range(size):
            rows[row][col] = _pick(rng, sky_colors)

    peaks = []
    for _ in range(max(2, size // 16)):
        peaks.append((
            int(rng.integers(size)),
            math.floor(size * 0.3) + math.floor(rng.random() * size * 0.2),
        ))

    for col in range(size):
        min_height = size
        for peak_x, peak_height in peaks:
            height = max(0, peak_height - abs(col - peak_x) * 0.5)
            min_height = min(min_height, size - height)

        for row in range(math.floor(min_height), size):
            if row < size * 0.8:
                rows[row][col] = _pick(rng, mountain_colors)
                if row < min_height + 2 and rng.random() > 0.5:
                    rows[row][col] = _pick(rng, snow_colors)
            else:
                rows[row][col] = _pick(rng, grass_colors)

    return PixelGrid(size, rows)


def generate_sunset_scene(size: int, rng: np.random.Generator) -> PixelGrid:
    """Banded sunset sky, a haloed sun and a dark ground silhouette."""
    rows = _blank(size)

    bands = [
        ['#FF6B35', '#F7931E', '#FFD23F'],
        ['#FF8C42', '#FF6B35', '#C73E1D'],
        ['#A8E6CF', '#7FCDCD', '#81C784'],
        ['#3D5A80', '#293241', '#1A1A2E'],
    ]
    for row in range(size):
        colors = bands[min(math.floor(row / size * len(bands)), len(bands) - 1)]
        for col in range(size):
            rows[row][col] = _pick(rng, colors)

    sun_x = math.floor(size * 0.7)
    sun_y = math.floor(size * 0.3)
    sun_radius = max(2, size // 8)
    for row in range(size):
        for col in range(size):
            distance = math.hypot(row - sun_y, col - sun_x)
            if distance <= sun_radius:
                rows[row][col] = '#FFFF00'
            elif distance <= sun_radius + 1:
                rows[row][col] = '#FFA500'

    ground_height = math.floor(size * 0.2)
    for row in range(size - ground_height, size):
        for col in range(size):
            rows[row][col] = '#2C3E50'

    return PixelGrid(size, rows)


def generate_cat_scene(size: int, rng: np.random.Generator) -> PixelGrid:
    """A single-colored cat (body, head, ears, eyes) on a pale background."""
    rows = _blank(size)

    bg_colors = ['#E8F4FD', '#F0F8FF', '#F5F5DC']
    for row in range(size):
        for col in range(size):
            rows[row][col] = _pick(rng, bg_colors)

    cat_color = _pick(rng, ['#8B4513', '#D2691E', '#000000', '#696969', '#FFA500'])

    cat_width = max(6, math.floor(size * 0.4))
    cat_height = max(8, math.floor(size * 0.5))
    start_x = (size - cat_width) // 2
    start_y = (size - cat_height) // 2

    # Body
    body_width = math.floor(cat_width * 0.8)
    body_height = math.floor(cat_height * 0.6)
    body_x = start_x + (cat_width - body_width) // 2
    body_y = start_y + math.floor(cat_height * 0.3)
    center_x = body_x + body_width / 2
    center_y = body_y + body_height / 2
    for row in range(body_y, body_y + body_height):
        for col in range(body_x, body_x + body_width):
            if math.hypot(col - center_x, row - center_y) <= min(body_width, body_height) / 2:
                _put(rows, row, col, cat_color)

    # Head
    head_radius = max(2, math.floor(cat_width * 0.3))
    head_x = start_x + cat_width // 2
    head_y = start_y + head_radius
    for row in range(size):
        for col in range(size):
            if math.hypot(col - head_x, row - head_y) <= head_radius:
                rows[row][col] = cat_color

    # Ears
    ear_size = max(1, math.floor(head_radius * 0.6))
    ear_offset = math.floor(head_radius * 0.7)
    for i in range(ear_size):
        for j in range(ear_size):
            ear_row = head_y - head_radius + i
            _put(rows, ear_row, head_x - ear_offset + j, cat_color)
            _put(rows, ear_row, head_x + ear_offset - ear_size + j, cat_color)

    # Eyes
    if head_radius >= 3:
        eye_y = head_y - math.floor(head_radius * 0.2)
        _put(rows, eye_y, head_x - 1, '#000000')
        _put(rows, eye_y, head_x + 1, '#000000')

    return PixelGrid(size, rows)


def generate_cityscape_scene(size: int, rng: np.random.Generator) -> PixelGrid:
    """A row of buildings with lit windows under a pale sky."""
    rows = _blank(size)

    sky_colors = ['#87CEEB', '#B0C4DE', '#E6E6FA']
    building_colors = ['#696969', '#2F4F4F', '#708090', '#4682B4', '#5F9EA0']
    window_colors = ['#FFFF00', '#FFA500', '#87CEEB']

    for row in range(math.floor(size * 0.3)):
        for col in range(size):
            rows[row][col] = _pick(rng, sky_colors)

    num_buildings = max(3, size // 8)
    building_width = size // num_buildings

    for i in range(num_buildings):
        start_col = i * building_width
        end_col = min(start_col + building_width, size)
        building_height = math.floor(size * 0.4) + math.floor(rng.random() * size * 0.4)
        start_row = size - building_height
        building_color = _pick(rng, building_colors)

        for row in range(start_row, size):
            for col in range(start_col, end_col):
                rows[row][col] = building_color

        if building_width >= 3 and building_height >= 4:
            for row in range(start_row + 2, size - 1, 3):
                for col in range(start_col + 1, end_col - 1, 2):
                    if rng.random() > 0.3:
                        rows[row][col] = _pick(rng, window_colors)

    return PixelGrid(size, rows)


def generate_nature_scene(size: int, rng: np.random.Generator) -> PixelGrid:
    """Sky, grass and a few round-crowned trees."""
    rows = _blank(size)

    sky_colors = ['#87CEEB', '#B0E0E6', '#E0F6FF']
    grass_colors = ['#228B22', '#32CD32', '#90EE90', '#9ACD32']
    trunk_colors = ['#8B4513', '#A0522D', '#CD853F']
    leaf_colors = ['#228B22', '#32CD32', '#006400', '#90EE90']

    horizon = math.floor(size * 0.8)
    for row in range(math.floor(size * 0.4)):
        for col in range(size):
            rows[row][col] = _pick(rng, sky_colors)
    for row in range(horizon, size):
        for col in range(size):
            rows[row][col] = _pick(rng, grass_colors)

    for _ in range(max(2, size // 12)):
        tree_x = int(rng.integers(size))
        tree_height = max(4, math.floor(size * 0.3))
        trunk_height = math.floor(tree_height * 0.4)
        crown_radius = max(2, math.floor(tree_height * 0.4))

        trunk_half = max(1, math.floor(crown_radius * 0.3)) // 2
        trunk_start = horizon - trunk_height
        for row in range(trunk_start, horizon):
            for col in range(tree_x - trunk_half, tree_x + trunk_half + 1):
                _put(rows, row, col, _pick(rng, trunk_colors))

        crown_y = trunk_start - math.floor(crown_radius * 0.5)
        for row in range(size):
            for col in range(size):
                if math.hypot(col - tree_x, row - crown_y) <= crown_radius:
                    rows[row][col] = _pick(rng, leaf_colors)

    return PixelGrid(size, rows)


SCENES: Dict[str, Callable[[int, np.random.Generator], PixelGrid]] = {
    'mountain': generate_mountain_scene,
    'sunset': generate_sunset_scene,
    'cat': generate_cat_scene,
    'cityscape': generate_cityscape_scene,
    'nature': generate_nature_scene,
}


def list_scenes() -> List[str]:
    return list(SCENES)


def generate_scene(name: str, size: int, seed: Optional[int] = None) -> PixelGrid:
    """
    Generate a named scene.

    Args:
        name: One of list_scenes()
        size: Grid size
        seed: Seed for reproducible output

    Returns:
        New size×size grid
    """
    key = name.lower()
    if key not in SCENES:
        raise ValueError(f"Unknown scene '{name}'. Available: {list_scenes()}")
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise ValueError(f"Grid size must be a positive integer, got {size!r}")

    logger.info("Generating %s scene at %dx%d", key, size, size)
    return SCENES[key](size, np.random.default_rng(seed))


def generate_random_scene(size: int, seed: Optional[int] = None) -> PixelGrid:
    """Generate a scene picked at random."""
    rng = np.random.default_rng(seed)
    name = _pick(rng, list_scenes())
    logger.info("Generating %s scene at %dx%d", name, size, size)
    return SCENES[name](size, rng)
