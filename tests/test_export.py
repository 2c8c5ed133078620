from pathlib import Path
import sys

import pytest
from PIL import Image

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from pixelgrid.config import ExportOptions
from pixelgrid.errors import InvalidOptionsError
from pixelgrid.export import GRID_LINE_COLOR, estimate_export_size, export_png, rasterize
from pixelgrid.grid import PixelGrid


def _checker(size=4):
    grid = PixelGrid(size)
    for row in range(size):
        for col in range(size):
            if (row + col) % 2 == 0:
                grid.paint(row, col, "#ff0000")
    return grid


def test_default_scale_depends_on_grid_size():
    options = ExportOptions()
    assert options.resolve_scale(16) == 40
    assert options.resolve_scale(32) == 20
    assert options.resolve_scale(64) == 20
    assert options.resolve_scale(128) == 20


def test_requested_scale_has_a_floor():
    assert ExportOptions(scale=4).resolve_scale(16) == 16
    assert ExportOptions(scale=4).resolve_scale(64) == 8
    assert ExportOptions(scale=50).resolve_scale(16) == 50


def test_rasterize_fills_cells_and_background():
    image = rasterize(_checker(), ExportOptions(scale=16))

    assert image.mode == "RGBA"
    assert image.size == (64, 64)
    assert image.getpixel((0, 0)) == (255, 0, 0, 255)
    assert image.getpixel((15, 15)) == (255, 0, 0, 255)
    assert image.getpixel((16, 0)) == (255, 255, 255, 255)
    assert image.getpixel((31, 15)) == (255, 255, 255, 255)


def test_transparent_background_keeps_empty_cells_clear():
    image = rasterize(_checker(), ExportOptions(scale=16, background="transparent"))
    assert image.getpixel((20, 4))[3] == 0
    assert image.getpixel((4, 4)) == (255, 0, 0, 255)


def test_grid_lines_cover_every_boundary():
    image = rasterize(_checker(), ExportOptions(scale=16, include_grid=True))

    assert image.getpixel((0, 8)) == GRID_LINE_COLOR
    assert image.getpixel((16, 8)) == GRID_LINE_COLOR
    assert image.getpixel((63, 8)) == GRID_LINE_COLOR
    assert image.getpixel((8, 63)) == GRID_LINE_COLOR
    # Cell interiors are untouched
    assert image.getpixel((8, 8)) == (255, 0, 0, 255)
    assert image.getpixel((24, 8)) == (255, 255, 255, 255)


def test_export_png_writes_named_file(tmp_path):
    path = export_png(_checker(), options=ExportOptions(filename="avatar"), output_dir=str(tmp_path))

    assert path == str(tmp_path / "avatar.png")
    with Image.open(path) as image:
        assert image.size == (640, 640)


def test_export_png_to_explicit_path(tmp_path):
    target = tmp_path / "out" / "grid.png"
    path = export_png(PixelGrid(64), str(target), ExportOptions(scale=2))

    assert Path(path) == target
    with Image.open(target) as image:
        assert image.size == (512, 512)


def test_estimate_export_size():
    assert estimate_export_size(16) == (640, 640 * 640 * 4)
    assert estimate_export_size(64, ExportOptions(scale=1)) == (512, 512 * 512 * 4)


def test_export_options_validation():
    assert ExportOptions(background="#ABC").background == "#aabbcc"
    assert ExportOptions(background=None).background is None
    with pytest.raises(InvalidOptionsError):
        ExportOptions(background="nope")
    with pytest.raises(InvalidOptionsError):
        ExportOptions(scale=0)
    with pytest.raises(InvalidOptionsError):
        ExportOptions(filename="")
