import json
from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from pixelgrid import storage
from pixelgrid.grid import PixelGrid
from pixelgrid.storage import (
    STATE_VERSION,
    CorruptStateError,
    GridStore,
    build_state,
    dump_state,
    parse_state,
    validate_state,
)


def _sample_grid():
    grid = PixelGrid(4)
    grid.paint(0, 0, "#ff0000")
    grid.paint(3, 2, "#00ff00")
    return grid


def test_snapshot_layout():
    state = json.loads(dump_state(_sample_grid(), timestamp=1700000000000))

    assert state['version'] == STATE_VERSION
    assert state['size'] == 4
    assert state['timestamp'] == 1700000000000
    assert state['gridData'][0][0] == "#ff0000"
    assert state['gridData'][3][2] == "#00ff00"
    assert state['gridData'][1] == ["", "", "", ""]


def test_save_and_load_round_trip(tmp_path):
    store = GridStore(tmp_path / "nested" / "state.json")
    grid = _sample_grid()

    path = store.save(grid)

    assert Path(path).exists()
    assert store.load(default_size=16) == grid


def test_load_keeps_stored_size(tmp_path):
    store = GridStore(tmp_path / "state.json")
    store.save(PixelGrid(8))
    assert store.load(default_size=32).size == 8


def test_missing_file_gives_default_grid(tmp_path):
    grid = GridStore(tmp_path / "missing.json").load(default_size=24)
    assert grid.size == 24
    assert grid.is_empty()


@pytest.mark.parametrize("text", [
    "{not json",
    "[]",
    json.dumps({'version': 1, 'size': 2, 'gridData': [["", ""]]}),
    json.dumps({'version': 1, 'size': 2, 'gridData': [["", ""], ["", "", ""]]}),
    json.dumps({'version': 1, 'size': 1, 'gridData': [["red"]]}),
    json.dumps({'version': 1, 'size': "2", 'gridData': [["", ""], ["", ""]]}),
    json.dumps({'version': 99, 'size': 1, 'gridData': [[""]]}),
    "[" * 100000 + "]" * 100000,
])
def test_corrupt_snapshots_fall_back_to_empty_grid(tmp_path, text):
    path = tmp_path / "state.json"
    path.write_text(text, encoding="utf-8")

    grid = GridStore(path).load(default_size=16)

    assert grid.size == 16
    assert grid.is_empty()


def test_snapshot_without_version_is_accepted():
    grid = validate_state({'size': 1, 'gridData': [["#ABCDEF"]], 'timestamp': 0})
    assert grid.get(0, 0) == "#abcdef"


def test_validate_state_raises_on_bad_records():
    with pytest.raises(CorruptStateError):
        validate_state({'version': 1, 'size': 0, 'gridData': []})
    with pytest.raises(CorruptStateError):
        validate_state({'version': 1, 'size': 1, 'gridData': [["#fff"]]})


def test_parse_state_matches_build_state():
    grid = _sample_grid()
    assert parse_state(json.dumps(build_state(grid)), default_size=4) == grid


def test_clear_removes_snapshot(tmp_path):
    store = GridStore(tmp_path / "state.json")
    store.save(_sample_grid())
    store.clear()
    assert not (tmp_path / "state.json").exists()
    store.clear()


def test_failed_save_leaves_no_temporary_file(tmp_path, monkeypatch):
    store = GridStore(tmp_path / "state.json")
    store.save(PixelGrid(2))

    def broken_dump(grid, timestamp=None):
        raise ValueError("disk full")

    monkeypatch.setattr(storage, "dump_state", broken_dump)

    with pytest.raises(ValueError):
        store.save(_sample_grid())

    assert not (tmp_path / "state.json.tmp").exists()
    # The previous snapshot is still intact
    assert store.load(default_size=16) == PixelGrid(2)
