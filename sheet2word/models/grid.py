from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any

"""Grid value object shared by every stage of the conversion pipeline.

A Grid is an ordered tuple of rows, each row an ordered tuple of cells.
Cells are strings, numbers, booleans, dates or ``None`` (absent).
Rows may be ragged until the grid goes through the normalizer.
"""

__all__ = [
    "Cell",
    "Grid",
    "cell_text",
]

Cell = Any


def cell_text(value: Cell) -> str:
    """Canonical text of a cell as it appears in a rendered document.

    >>> cell_text(None), cell_text(30.0), cell_text(True), cell_text("x")
    ('', '30', 'true', 'x')
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


@dataclass(frozen=True)
class Grid:
    """Immutable 2D table. Transformations always build a new Grid."""

    rows: tuple[tuple[Cell, ...], ...] = ()

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[Cell]]) -> Grid:
        return cls(tuple(tuple(r) for r in rows))

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def max_cols(self) -> int:
        """Widest row length (0 for an empty grid)."""
        return max((len(r) for r in self.rows), default=0)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def is_rectangular(self) -> bool:
        width = self.max_cols
        return all(len(r) == width for r in self.rows)

    def cell(self, row: int, col: int) -> Cell:
        """Cell at (row, col); ``None`` when the row is too short."""
        values = self.rows[row]
        return values[col] if col < len(values) else None

    def to_lists(self) -> list[list[Cell]]:
        return [list(r) for r in self.rows]

    def __len__(self) -> int:
        return len(self.rows)
