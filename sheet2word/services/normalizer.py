from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..models.grid import Grid

"""Table normalizer: ragged decoded rows -> rectangular Grid."""

__all__ = [
    "normalize",
]


def normalize(rows: Grid | Sequence[Sequence[Any]]) -> Grid:
    """Pad every row to the widest row length.

    Absent cells (short rows or ``None``) become ``""``. A grid without rows
    is returned unchanged. Normalizing a normalized grid is a no-op.
    """
    grid = rows if isinstance(rows, Grid) else Grid.from_rows(rows)
    if grid.is_empty:
        return grid
    width = grid.max_cols
    return Grid(
        tuple(
            tuple("" if v is None else v for v in row) + ("",) * (width - len(row))
            for row in grid.rows
        )
    )
