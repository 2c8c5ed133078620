"""
PNG export of pixel grids.
"""

import os
import logging
from typing import Optional, Tuple

from PIL import Image, ImageDraw

from .color_math import hex_to_rgb
from .config import ExportOptions
from .grid import EMPTY, PixelGrid

logger = logging.getLogger(__name__)

GRID_LINE_COLOR = (200, 200, 200, 255)


def rasterize(grid: PixelGrid, options: Optional[ExportOptions] = None) -> Image.Image:
    """
    Render ``grid`` as an RGBA image.

    Each cell becomes a scale×scale block. Empty cells show the background,
    or stay transparent when the background is None. With include_grid a
    1px light grey line is drawn on every cell boundary, outer frame
    included.
    """
    options = options or ExportOptions()
    scale = options.resolve_scale(grid.size)
    side = grid.size * scale

    if options.background is None:
        fill = (0, 0, 0, 0)
    else:
        fill = hex_to_rgb(options.background) + (255,)
    image = Image.new("RGBA", (side, side), fill)
    draw = ImageDraw.Draw(image)

    for row_index, row in enumerate(grid.rows()):
        for col_index, cell in enumerate(row):
            if cell == EMPTY:
                continue
            x0 = col_index * scale
            y0 = row_index * scale
            draw.rectangle(
                [x0, y0, x0 + scale - 1, y0 + scale - 1],
                fill=hex_to_rgb(cell) + (255,),
            )

    if options.include_grid:
        for i in range(grid.size + 1):
            # The closing boundary sits on the last pixel so the frame shows
            pos = min(i * scale, side - 1)
            draw.line([(pos, 0), (pos, side - 1)], fill=GRID_LINE_COLOR, width=1)
            draw.line([(0, pos), (side - 1, pos)], fill=GRID_LINE_COLOR, width=1)

    return image


def export_png(grid: PixelGrid, path: Optional[str] = None,
               options: Optional[ExportOptions] = None,
               output_dir: str = ".") -> str:
    """
    Rasterize ``grid`` and save it as PNG.

    Args:
        grid: Grid to export
        path: Target file; defaults to ``<output_dir>/<options.filename>.png``
        options: Export options
        output_dir: Directory used when ``path`` is not given

    Returns:
        Path of the written file
    """
    options = options or ExportOptions()
    if path is None:
        path = os.path.join(output_dir, f"{options.filename}.png")

    dir_path = os.path.dirname(path)
    if dir_path:
        os.makedirs(dir_path, exist_ok=True)

    image = rasterize(grid, options)
    image.save(path, format="PNG")
    logger.info("Exported %dx%d grid to %s (%dx%d px)",
                grid.size, grid.size, path, image.width, image.height)
    return path


def estimate_export_size(grid_size: int, options: Optional[ExportOptions] = None) -> Tuple[int, int]:
    """Side length in pixels and uncompressed RGBA byte size of an export."""
    options = options or ExportOptions()
    side = grid_size * options.resolve_scale(grid_size)
    return side, side * side * 4
