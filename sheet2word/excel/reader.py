from __future__ import annotations

import io
import math
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.grid import Grid

"""Spreadsheet decoder.

Only the first sheet of a workbook is consumed. The sheet is read
without a header row, so every row of the used range (including the first
one) becomes a Grid row; the grid starts at the first used cell.

pandas picks the engine from the file content: openpyxl for .xlsx,
xlrd for legacy .xls.
"""

__all__ = [
    "DecodeError",
    "SPREADSHEET_SUFFIXES",
    "decode_file",
    "decode_workbook",
    "frame_to_rows",
    "is_spreadsheet",
    "read_first_sheet",
]

SPREADSHEET_SUFFIXES = (".xlsx", ".xls")


class DecodeError(Exception):
    """Raised when a file cannot be decoded into a table."""

    def __init__(self, file_name: str, message: str) -> None:
        super().__init__(f"{file_name}: {message}")
        self.file_name = file_name


def is_spreadsheet(file_name: str) -> bool:
    return file_name.lower().endswith(SPREADSHEET_SUFFIXES)


def read_first_sheet(data: bytes) -> pd.DataFrame:
    """Read the first sheet of a workbook held in memory as a raw DataFrame."""
    # keep_default_na=False: "NA" / "null" などの文字列はそのまま残す
    return pd.read_excel(io.BytesIO(data), sheet_name=0, header=None, keep_default_na=False)


def _clean_cell(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, float):
        if math.isnan(value):
            return None
        # int columns with holes come back as float
        return int(value) if value.is_integer() else value
    if value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, str) and value == "":
        return None
    return value


def frame_to_rows(df: pd.DataFrame) -> list[list[Any]]:
    """Convert a raw sheet DataFrame into ragged rows.

    Empty cells become ``None`` and trailing empty cells are dropped, so a
    row is only as long as its last filled cell. The grid starts at the
    first used cell: leading empty rows and leading empty columns are cut.

    >>> frame_to_rows(pd.DataFrame([[None, None, None], [None, "Name", "Alice"], [None, "Age", 30]]))
    [['Name', 'Alice'], ['Age', 30]]
    """
    rows: list[list[Any]] = []
    for raw in df.astype(object).values.tolist():
        row = [_clean_cell(v) for v in raw]
        while row and row[-1] is None:
            row.pop()
        rows.append(row)

    while rows and not rows[0]:
        rows.pop(0)
    filled = [row for row in rows if row]
    if not filled:
        return rows
    # 先頭の空列数 = 各行の先頭 None 数の最小値
    offset = min(_leading_empty(row) for row in filled)
    return [row[offset:] for row in rows]


def _leading_empty(row: list[Any]) -> int:
    n = 0
    while n < len(row) and row[n] is None:
        n += 1
    return n


def decode_workbook(data: bytes, file_name: str) -> Grid:
    """Decode workbook bytes into a (possibly ragged) Grid.

    Raises:
        DecodeError: if the content is not a readable .xlsx / .xls workbook
    """
    if not data:
        raise DecodeError(file_name, "empty file")
    try:
        df = read_first_sheet(data)
    except Exception as e:
        raise DecodeError(file_name, f"unreadable workbook ({type(e).__name__}: {e})") from e
    return Grid.from_rows(frame_to_rows(df))


def decode_file(path: Path) -> Grid:
    """Read and decode a workbook from disk."""
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DecodeError(path.name, f"cannot read file: {e}") from e
    return decode_workbook(data, path.name)
