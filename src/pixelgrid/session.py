"""
Editing session around a single grid.
"""

import logging
from typing import Optional

from .color_math import normalize_hex
from .config import require_positive_int
from .grid import PixelGrid
from .storage import GridStore

logger = logging.getLogger(__name__)


class EditorSession:
    """
    Current grid, selected color and optional persistence.

    With a store the session resumes from the stored snapshot on
    construction; otherwise it starts from an empty ``default_size`` grid.
    """

    def __init__(self, store: Optional[GridStore] = None, default_size: int = 16):
        require_positive_int("default_size", default_size)
        self.store = store
        self.default_size = default_size
        self.selected_color = "#000000"

        if store is not None:
            self._grid = store.load(default_size)
            logger.info("Resumed %dx%d grid from %s", self._grid.size, self._grid.size, store.path)
        else:
            self._grid = PixelGrid.empty(default_size)

    @property
    def grid(self) -> PixelGrid:
        return self._grid

    @property
    def grid_size(self) -> int:
        return self._grid.size

    def select_color(self, color: str) -> str:
        """Select the paint color; returns it normalized."""
        self.selected_color = normalize_hex(color)
        return self.selected_color

    def paint(self, row: int, col: int) -> bool:
        """
        Paint one cell with the selected color.

        Returns:
            True if the cell was Empty before (a fresh stroke rather than an
            overwrite)
        """
        return self._grid.paint(row, col, self.selected_color)

    def erase(self, row: int, col: int):
        self._grid.erase(row, col)

    def clear(self):
        self._grid.clear()

    def resize(self, size: int):
        """Switch to a fresh empty grid of ``size``; existing cells are dropped."""
        require_positive_int("size", size)
        self._grid = PixelGrid.empty(size)
        logger.debug("Grid resized to %dx%d", size, size)

    def replace_grid(self, grid: PixelGrid, size: Optional[int] = None):
        """
        Replace the whole grid at once.

        Args:
            grid: New grid, e.g. from the converter or a scene generator
            size: When given, the grid must have exactly this size

        Raises:
            ValueError: if ``size`` is given and does not match the grid
        """
        if size is not None and grid.size != size:
            raise ValueError(f"Grid is {grid.size}x{grid.size}, expected {size}x{size}")
        self._grid = grid.copy()

    def save(self) -> Optional[str]:
        """Persist the grid; no-op without a store."""
        if self.store is None:
            return None
        return self.store.save(self._grid)
