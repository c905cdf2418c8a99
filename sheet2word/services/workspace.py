from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ..excel.reader import DecodeError, decode_workbook, is_spreadsheet
from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import ErrorRecord
from ..models.source_table import SourceTable

"""Working set of decoded spreadsheets.

The workspace is the only mutable state of the converter: uploads append
tables (in upload order), removals drop them, and a selection index points
at the "current" table. Exports only read it. Not thread safe; callers
serialize uploads, removals and exports.
"""

__all__ = [
    "UploadResult",
    "Workspace",
    "scan_spreadsheets",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadResult:
    """Outcome of one upload batch."""
    added: list[SourceTable] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)  # file names that could not be decoded
    ignored: list[str] = field(default_factory=list)  # not .xlsx / .xls


def scan_spreadsheets(directory: Path) -> list[Path]:
    """Spreadsheets directly inside ``directory`` (non-recursive), sorted by name."""
    if not directory.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {directory}")
    return sorted(
        (p for p in directory.iterdir() if p.is_file() and is_spreadsheet(p.name)),
        key=lambda p: p.name,
    )


class Workspace:
    """Ordered collection of SourceTables plus the current selection."""

    def __init__(self, error_log: ErrorLogBuffer | None = None) -> None:
        self._tables: list[SourceTable] = []
        self.selected_index = 0
        self.error_log = error_log

    @property
    def tables(self) -> list[SourceTable]:
        return list(self._tables)

    @property
    def selected(self) -> SourceTable | None:
        if 0 <= self.selected_index < len(self._tables):
            return self._tables[self.selected_index]
        return None

    def __len__(self) -> int:
        return len(self._tables)

    def add_uploads(self, uploads: Iterable[tuple[str, bytes]]) -> UploadResult:
        """Decode ``(file_name, data)`` uploads and append the readable ones.

        Decode failures are logged and skipped; they never abort the batch
        and never raise. When at least one table was added, the first new
        table becomes the selection.
        """
        added: list[SourceTable] = []
        failed: list[str] = []
        ignored: list[str] = []
        for file_name, data in uploads:
            if not is_spreadsheet(file_name):
                logger.debug("skip non-spreadsheet upload: %s", file_name)
                ignored.append(file_name)
                continue
            try:
                grid = decode_workbook(data, file_name)
            except DecodeError as e:
                self._record_decode_failure(file_name, e)
                failed.append(file_name)
                continue
            table = SourceTable.from_upload(file_name, grid)
            logger.debug(
                "decoded %s rows=%d max_cols=%d", file_name, grid.row_count, grid.max_cols
            )
            added.append(table)

        if added:
            first_new = len(self._tables)
            self._tables.extend(added)
            self.selected_index = first_new
        return UploadResult(added=added, failed=failed, ignored=ignored)

    def add_upload(self, file_name: str, data: bytes) -> UploadResult:
        return self.add_uploads([(file_name, data)])

    def add_files(self, paths: Iterable[Path]) -> UploadResult:
        """Upload files from disk; directories expand to the spreadsheets inside."""
        return self.add_uploads(self._read_paths(paths))

    def _read_paths(self, paths: Iterable[Path]) -> Iterable[tuple[str, bytes]]:
        for path in paths:
            path = Path(path)
            if path.is_dir():
                yield from self._read_paths(scan_spreadsheets(path))
                continue
            try:
                data = path.read_bytes()
            except OSError as e:
                # 読めないファイルはデコード失敗と同じ扱い (空データ -> DecodeError)
                logger.warning("cannot read %s: %s", path, e)
                data = b""
            yield path.name, data

    def remove(self, index: int) -> SourceTable:
        """Remove the table at ``index``; the selection is clamped afterwards."""
        if not 0 <= index < len(self._tables):
            raise IndexError(f"no table at index {index} (have {len(self._tables)})")
        removed = self._tables.pop(index)
        if self.selected_index >= len(self._tables):
            self.selected_index = max(0, len(self._tables) - 1)
        return removed

    def select(self, index: int) -> SourceTable:
        if not 0 <= index < len(self._tables):
            raise IndexError(f"no table at index {index} (have {len(self._tables)})")
        self.selected_index = index
        return self._tables[index]

    def clear(self) -> None:
        self._tables.clear()
        self.selected_index = 0

    def _record_decode_failure(self, file_name: str, error: DecodeError) -> None:
        logger.warning("Error reading file %s: %s", file_name, error)
        if self.error_log is not None:
            self.error_log.append(
                ErrorRecord.create(
                    file=file_name,
                    stage="decode",
                    error_type="DECODE_ERROR",
                    message=str(error),
                )
            )
