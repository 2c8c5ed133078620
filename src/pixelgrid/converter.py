"""
Image to pixel art conversion pipeline.
Resamples a bitmap onto the grid, extracts a bounded palette and maps every
pixel onto it.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional

from .bitmap import Bitmap
from .config import ConversionOptions
from .errors import InvalidOptionsError
from .grid import PixelGrid
from .image_io import BitmapSource, FileBitmapSource, PathLike
from .mapper import map_to_grid
from .quantize import ColorQuantizer, PaletteEntry
from .resample import resample

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Grid and palette produced by one conversion."""
    grid: PixelGrid
    palette: List[PaletteEntry]
    options: ConversionOptions

    def to_dict(self) -> Dict[str, Any]:
        """Summary suitable for JSON reports."""
        counts = self.grid.color_counts()
        return {
            'grid_size': self.grid.size,
            'options': {
                'grid_size': self.options.grid_size,
                'color_count': self.options.color_count,
                'maintain_aspect_ratio': self.options.maintain_aspect_ratio,
                'crop_to_fit': self.options.crop_to_fit,
            },
            'palette': [
                {'hex': entry.hex, 'count': entry.count, 'cells': counts.get(entry.hex, 0)}
                for entry in self.palette
            ],
            'painted_cells': sum(counts.values()),
        }


class PixelArtConverter:
    """Converts bitmaps into pixel art grids."""

    def __init__(self, options: Optional[ConversionOptions] = None):
        """Initialize converter; options are validated on construction."""
        self.options = options or ConversionOptions()
        self.quantizer = ColorQuantizer(self.options.color_count)

    def convert(self, bitmap: Bitmap) -> ConversionResult:
        """
        Convert a decoded bitmap.

        Args:
            bitmap: Source bitmap

        Returns:
            ConversionResult with a freshly built grid
        """
        opts = self.options
        logger.info(
            "Converting %dx%d bitmap to %dx%d grid (%d colors, %s)",
            bitmap.width, bitmap.height, opts.grid_size, opts.grid_size, opts.color_count,
            "stretch" if not opts.maintain_aspect_ratio
            else ("crop" if opts.crop_to_fit else "letterbox"),
        )

        rgba = resample(bitmap, opts.grid_size, opts.maintain_aspect_ratio, opts.crop_to_fit)
        palette = self.quantizer.quantize(rgba)
        grid = map_to_grid(rgba, palette)

        logger.info("Conversion complete: %d colors used", len(grid.colors_used()))
        return ConversionResult(grid=grid, palette=palette, options=opts)

    def convert_source(self, source: BitmapSource) -> ConversionResult:
        """Load a bitmap from ``source`` and convert it."""
        return self.convert(source.load())

    def convert_file(self, image_path: PathLike) -> ConversionResult:
        """Decode an image file and convert it."""
        return self.convert_source(FileBitmapSource(image_path))

    def convert_many(self, bitmap: Bitmap, grid_sizes: Iterable[int],
                     max_workers: Optional[int] = None) -> Dict[int, ConversionResult]:
        """
        Convert the same bitmap at several grid sizes concurrently.

        Each conversion works on its own buffers, so no locking is needed.
        """
        converters = [
            PixelArtConverter(replace(self.options, grid_size=size))
            for size in dict.fromkeys(grid_sizes)
        ]
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(lambda c: c.convert(bitmap), converters))
        return {result.options.grid_size: result for result in results}


def convert_image_to_pixel_art(bitmap: Bitmap,
                               options: Optional[ConversionOptions] = None,
                               **overrides) -> PixelGrid:
    """
    Convert ``bitmap`` and return only the grid.

    Named option fields may be passed as keyword overrides, e.g.
    ``convert_image_to_pixel_art(bitmap, grid_size=32, crop_to_fit=False)``.
    """
    options = options or ConversionOptions()
    if overrides:
        try:
            options = replace(options, **overrides)
        except TypeError as e:
            raise InvalidOptionsError(f"Invalid conversion option: {e}") from e
    return PixelArtConverter(options).convert(bitmap).grid
