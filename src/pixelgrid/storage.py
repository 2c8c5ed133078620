"""
Session snapshot persistence.

A snapshot is a flat JSON record:

    {"version": 1, "gridData": [["", "#ff0000", ...], ...],
     "size": 16, "timestamp": 1700000000000}

Loading never fails: anything missing, unparsable or inconsistent is logged
and replaced by an empty grid of the caller's default size.
"""

import os
import json
import time
import logging
from typing import Any, Optional

from .color_math import is_hex_color
from .grid import EMPTY, PixelGrid

logger = logging.getLogger(__name__)

STATE_VERSION = 1


class CorruptStateError(ValueError):
    """Stored snapshot does not describe a valid grid."""

    pass


def build_state(grid: PixelGrid, timestamp: Optional[int] = None) -> dict:
    """Snapshot record for ``grid``; timestamp is milliseconds since the epoch."""
    if timestamp is None:
        timestamp = int(time.time() * 1000)
    return {
        'version': STATE_VERSION,
        'gridData': grid.to_rows(),
        'size': grid.size,
        'timestamp': timestamp,
    }


def dump_state(grid: PixelGrid, timestamp: Optional[int] = None) -> str:
    """Serialize ``grid`` to a JSON snapshot string."""
    return json.dumps(build_state(grid, timestamp))


def validate_state(data: Any) -> PixelGrid:
    """
    Rebuild a grid from a decoded snapshot record.

    Raises:
        CorruptStateError: if the record is not a valid snapshot
    """
    if not isinstance(data, dict):
        raise CorruptStateError("Snapshot is not an object")

    version = data.get('version', STATE_VERSION)
    if version != STATE_VERSION:
        raise CorruptStateError(f"Unsupported snapshot version: {version!r}")

    size = data.get('size')
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise CorruptStateError(f"Invalid size: {size!r}")

    rows = data.get('gridData')
    if not isinstance(rows, list) or len(rows) != size:
        raise CorruptStateError("gridData does not have `size` rows")
    for row in rows:
        if not isinstance(row, list) or len(row) != size:
            raise CorruptStateError("gridData row length does not match size")
        for cell in row:
            if cell != EMPTY and not is_hex_color(cell):
                raise CorruptStateError(f"Invalid cell value: {cell!r}")

    return PixelGrid(size, rows)


def parse_state(text: str, default_size: int) -> PixelGrid:
    """Grid from a JSON snapshot, or an empty default-size grid if it is corrupt."""
    try:
        return validate_state(json.loads(text))
    except (ValueError, TypeError, RecursionError) as e:
        # json.JSONDecodeError and CorruptStateError are both ValueErrors;
        # deeply nested arrays exhaust the decoder's recursion limit
        logger.warning("Discarding stored grid: %s", e)
        return PixelGrid.empty(default_size)


class GridStore:
    """Keeps the current grid in a JSON file between sessions."""

    def __init__(self, path: str = "pixel_art_state.json"):
        self.path = os.fspath(path)

    def save(self, grid: PixelGrid, timestamp: Optional[int] = None) -> str:
        """Write ``grid`` to the store and return the file path."""
        dir_path = os.path.dirname(self.path)
        if dir_path:
            os.makedirs(dir_path, exist_ok=True)

        # Write-then-rename so readers never see a half-written snapshot
        tmp_path = f"{self.path}.tmp"
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                f.write(dump_state(grid, timestamp))
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        logger.debug("Grid saved to %s", self.path)
        return self.path

    def load(self, default_size: int) -> PixelGrid:
        """Stored grid, or an empty grid of ``default_size``."""
        if not os.path.exists(self.path):
            return PixelGrid.empty(default_size)

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read stored grid %s: %s", self.path, e)
            return PixelGrid.empty(default_size)

        grid = parse_state(text, default_size)
        logger.debug("Grid loaded from %s", self.path)
        return grid

    def clear(self):
        """Delete the stored snapshot if there is one."""
        if os.path.exists(self.path):
            os.remove(self.path)
