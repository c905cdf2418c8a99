from __future__ import annotations

from ..models.grid import Grid

"""Transposer: swap the row and column axes of a grid."""

__all__ = [
    "transpose",
]


def transpose(grid: Grid) -> Grid:
    """Return ``out`` with ``out[c][r] == grid[r][c]``.

    The result has ``grid.max_cols`` rows of ``grid.row_count`` cells.
    Ragged input is padded on the fly (missing cells -> ``""``), so this never
    raises on short rows.

    >>> transpose(Grid.from_rows([[1, 2, 3], [4, 5, 6]])).to_lists()
    [[1, 4], [2, 5], [3, 6]]
    """
    if grid.is_empty:
        return grid
    out = []
    for col in range(grid.max_cols):
        out.append(tuple(_value(row, col) for row in grid.rows))
    return Grid(tuple(out))


def _value(row: tuple, col: int):
    if col < len(row) and row[col] is not None:
        return row[col]
    return ""
