from __future__ import annotations

from dataclasses import dataclass

from .grid import Grid

"""ColumnPair model produced by the column splitter."""

__all__ = [
    "ColumnPair",
]


@dataclass(frozen=True)
class ColumnPair:
    """Label column + one value column of a source grid.

    ``source_column`` is the index of the value column in the source grid.
    ``fallback`` marks the single "nothing to split" item, whose grid is the
    source grid unchanged and which has no derivable group name.
    """
    grid: Grid
    source_column: int = 1
    fallback: bool = False

    @property
    def placeholder_name(self) -> str:
        # 1 始まりの列番号 (source column 1 -> "column2")
        return f"column{self.source_column + 1}"
