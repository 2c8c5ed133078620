"""
Pixel Art Grid Converter

Turns pictures into square pixel art grids with a small palette, generates
procedural scenes, keeps an editing session on disk and exports PNGs.
"""

__version__ = "1.0.0"

import logging

from .bitmap import Bitmap
from .config import Config, ConversionOptions, ExportOptions, StorageConfig
from .converter import ConversionResult, PixelArtConverter, convert_image_to_pixel_art
from .errors import BitmapDecodeError, InvalidOptionsError, PixelGridError
from .export import export_png, rasterize
from .generators import generate_random_scene, generate_scene
from .grid import EMPTY, PixelGrid
from .image_io import BytesBitmapSource, FileBitmapSource, ImageLoader
from .quantize import ColorQuantizer, PaletteEntry, quantize_colors
from .session import EditorSession
from .storage import GridStore

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Bitmap",
    "BitmapDecodeError",
    "BytesBitmapSource",
    "ColorQuantizer",
    "Config",
    "ConversionOptions",
    "ConversionResult",
    "EMPTY",
    "EditorSession",
    "ExportOptions",
    "FileBitmapSource",
    "GridStore",
    "ImageLoader",
    "InvalidOptionsError",
    "PaletteEntry",
    "PixelArtConverter",
    "PixelGrid",
    "PixelGridError",
    "StorageConfig",
    "convert_image_to_pixel_art",
    "export_png",
    "generate_random_scene",
    "generate_scene",
    "quantize_colors",
    "rasterize",
]
