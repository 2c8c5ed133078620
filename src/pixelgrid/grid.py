"""
The N×N paint grid shared by the converter, scene generators and painting.
"""

from collections import Counter
from typing import Dict, Iterator, List, Optional, Sequence

from .color_math import normalize_hex

EMPTY = ""


def _normalize_cell(value: Optional[str]) -> str:
    if value is None or value == EMPTY:
        return EMPTY
    return normalize_hex(value)


class PixelGrid:
    """
    Square grid of cells, row-major with row 0 at the top.

    Each cell is either EMPTY ("") or a lowercase '#rrggbb' string. The
    shape is validated on construction and never changes afterwards;
    producers replace the whole grid instead of resizing it.
    """

    def __init__(self, size: int, cells: Optional[Sequence[Sequence[Optional[str]]]] = None):
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise ValueError(f"Grid size must be a positive integer, got {size!r}")
        self.size = size

        if cells is None:
            self._cells = [[EMPTY] * size for _ in range(size)]
            return

        if len(cells) != size:
            raise ValueError(f"Expected {size} rows, got {len(cells)}")
        rows = []
        for row_index, row in enumerate(cells):
            if len(row) != size:
                raise ValueError(f"Row {row_index} has {len(row)} cells, expected {size}")
            rows.append([_normalize_cell(value) for value in row])
        self._cells = rows

    @classmethod
    def empty(cls, size: int) -> "PixelGrid":
        """Create an all-Empty grid."""
        return cls(size)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Optional[str]]]) -> "PixelGrid":
        """Create a grid from a square list of rows, taking its size from them."""
        return cls(len(rows), rows)

    def _check(self, row: int, col: int):
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise IndexError(f"Cell ({row}, {col}) outside {self.size}x{self.size} grid")

    def get(self, row: int, col: int) -> str:
        self._check(row, col)
        return self._cells[row][col]

    def paint(self, row: int, col: int, color: Optional[str]) -> bool:
        """
        Set exactly one cell. None or "" erases it.

        Returns:
            True if the cell was Empty before
        """
        self._check(row, col)
        was_empty = self._cells[row][col] == EMPTY
        self._cells[row][col] = _normalize_cell(color)
        return was_empty

    def erase(self, row: int, col: int):
        self.paint(row, col, None)

    def clear(self):
        """Erase every cell."""
        self._cells = [[EMPTY] * self.size for _ in range(self.size)]

    def rows(self) -> Iterator[List[str]]:
        """Iterate over copies of the rows."""
        for row in self._cells:
            yield list(row)

    def to_rows(self) -> List[List[str]]:
        """Deep copy of the cells as a list of rows."""
        return [list(row) for row in self._cells]

    def copy(self) -> "PixelGrid":
        return PixelGrid(self.size, self._cells)

    def is_empty(self) -> bool:
        return all(cell == EMPTY for row in self._cells for cell in row)

    def colors_used(self) -> List[str]:
        """Distinct colors in row-major first-seen order."""
        seen = {}
        for row in self._cells:
            for cell in row:
                if cell != EMPTY and cell not in seen:
                    seen[cell] = None
        return list(seen)

    def color_counts(self) -> Dict[str, int]:
        """Number of cells painted with each color."""
        return dict(Counter(cell for row in self._cells for cell in row if cell != EMPTY))

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return self.size == other.size and self._cells == other._cells

    def __repr__(self) -> str:
        painted = sum(1 for row in self._cells for cell in row if cell != EMPTY)
        return f"PixelGrid(size={self.size}, painted={painted})"
