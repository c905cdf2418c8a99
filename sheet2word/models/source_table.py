from __future__ import annotations

import re
from dataclasses import dataclass, replace

from .grid import Grid

"""SourceTable model: one decoded spreadsheet in the working set."""

__all__ = [
    "SourceTable",
    "strip_extension",
]

_EXTENSION_RE = re.compile(r"\.[^/.]+$")


def strip_extension(file_name: str) -> str:
    """Remove the last extension only ("a.b.xlsx" -> "a.b", ".xlsx" -> "")."""
    return _EXTENSION_RE.sub("", file_name)


@dataclass(frozen=True)
class SourceTable:
    """Decoded first sheet of an uploaded workbook.

    Never mutated; re-processing produces a new instance via ``with_grid``.
    """
    display_name: str  # original file name without extension
    original_file_name: str
    grid: Grid

    @classmethod
    def from_upload(cls, file_name: str, grid: Grid) -> SourceTable:
        return cls(
            display_name=strip_extension(file_name),
            original_file_name=file_name,
            grid=grid,
        )

    def with_grid(self, grid: Grid) -> SourceTable:
        return replace(self, grid=grid)
