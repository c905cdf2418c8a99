from __future__ import annotations

from ..models.column_pair import ColumnPair
from ..models.grid import Grid, cell_text

"""Column splitter: one (label column, value column) grid per value column.

Example: [[A, B, C], [1, 2, 3]] -> [[A, B], [1, 2]] and [[A, C], [1, 3]]

Each pair becomes its own document; the pair's "group name" (first row,
second cell) names the document, e.g. one document per family / person.
"""

__all__ = [
    "split_into_column_pairs",
    "resolve_group_name",
]


def split_into_column_pairs(grid: Grid) -> list[ColumnPair]:
    """Split ``grid`` into ``max_cols - 1`` column pairs.

    When there is nothing to split (no rows, or a single column) the result
    is one fallback item holding ``grid`` unchanged.
    """
    max_cols = grid.max_cols
    if grid.is_empty or max_cols <= 1:
        return [ColumnPair(grid=grid, source_column=1, fallback=True)]

    pairs: list[ColumnPair] = []
    for col in range(1, max_cols):
        rows = tuple((_value(row, 0), _value(row, col)) for row in grid.rows)
        pairs.append(ColumnPair(grid=Grid(rows), source_column=col))
    return pairs


def resolve_group_name(pair: ColumnPair) -> str:
    """Name used for the document title suffix and the file name.

    The first row's value cell when it is non-empty, otherwise the
    positional placeholder ``column{k+1}``. Never returns an empty string.
    """
    if not pair.fallback and not pair.grid.is_empty:
        name = cell_text(pair.grid.cell(0, 1))
        if name:
            return name
    return pair.placeholder_name


def _value(row: tuple, col: int):
    if col < len(row) and row[col] is not None:
        return row[col]
    return ""
