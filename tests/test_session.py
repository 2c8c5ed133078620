from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from pixelgrid.errors import InvalidOptionsError
from pixelgrid.generators import generate_scene
from pixelgrid.grid import EMPTY, PixelGrid
from pixelgrid.session import EditorSession
from pixelgrid.storage import GridStore


def test_new_session_defaults():
    session = EditorSession()
    assert session.grid_size == 16
    assert session.grid.is_empty()
    assert session.selected_color == "#000000"
    assert session.save() is None


def test_paint_uses_selected_color_and_reports_fresh_cells():
    session = EditorSession(default_size=8)
    assert session.select_color("#F0A") == "#ff00aa"

    assert session.paint(2, 3) is True
    assert session.paint(2, 3) is False
    assert session.grid.get(2, 3) == "#ff00aa"

    session.erase(2, 3)
    assert session.grid.get(2, 3) == EMPTY
    with pytest.raises(ValueError):
        session.select_color("magenta")


def test_clear_and_resize():
    session = EditorSession(default_size=8)
    session.paint(0, 0)

    session.clear()
    assert session.grid.is_empty()
    assert session.grid_size == 8

    session.paint(0, 0)
    session.resize(32)
    assert session.grid_size == 32
    assert session.grid.is_empty()

    with pytest.raises(InvalidOptionsError):
        session.resize(0)


def test_replace_grid_is_wholesale_and_checked():
    session = EditorSession(default_size=16)
    scene = generate_scene('cat', 16, seed=2)

    session.replace_grid(scene, size=16)
    assert session.grid == scene

    # The session owns its own copy
    scene.clear()
    assert not session.grid.is_empty()

    with pytest.raises(ValueError):
        session.replace_grid(PixelGrid(8), size=16)
    assert session.grid_size == 16

    session.replace_grid(PixelGrid(8))
    assert session.grid_size == 8


def test_session_resumes_from_store(tmp_path):
    store = GridStore(tmp_path / "state.json")
    first = EditorSession(store, default_size=8)
    first.select_color("#123456")
    first.paint(1, 1)
    first.save()

    resumed = EditorSession(GridStore(tmp_path / "state.json"), default_size=16)

    assert resumed.grid_size == 8
    assert resumed.grid.get(1, 1) == "#123456"


def test_corrupt_store_starts_fresh(tmp_path):
    path = tmp_path / "state.json"
    path.write_text('{"gridData": 5}', encoding="utf-8")

    session = EditorSession(GridStore(path), default_size=24)

    assert session.grid_size == 24
    assert session.grid.is_empty()
