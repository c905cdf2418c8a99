# Shared pytest fixtures
from __future__ import annotations

import io
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from sheet2word.logging.init import reset_logging


def make_xlsx_bytes(rows: list[list[object]], sheet_name: str = "Sheet1", extra_sheets: dict | None = None, start: tuple[int, int] = (0, 0)) -> bytes:
    """Build an .xlsx workbook in memory (no header row, no index).

    ``start`` is the (row, column) of the first written cell.
    """
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(
            writer, sheet_name=sheet_name, header=False, index=False, startrow=start[0], startcol=start[1]
        )
        for name, extra in (extra_sheets or {}).items():
            pd.DataFrame(extra).to_excel(writer, sheet_name=name, header=False, index=False)
    return buffer.getvalue()


def make_xls_bytes(rows: list[list[object]], sheet_name: str = "Sheet1", extra_sheets: dict | None = None) -> bytes:
    """Build a legacy .xls (BIFF8) workbook in memory."""
    import xlwt

    wb = xlwt.Workbook()
    for name, sheet_rows in {sheet_name: rows, **(extra_sheets or {})}.items():
        sheet = wb.add_sheet(name)
        for r, row in enumerate(sheet_rows):
            for c, value in enumerate(row):
                if value is not None:
                    sheet.write(r, c, value)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def make_xlsx(directory: Path, name: str, rows: list[list[object]]) -> Path:
    path = directory / name
    path.write_bytes(make_xlsx_bytes(rows))
    return path


class CollectingSink:
    """Delivery sink keeping every delivered blob in memory (ordered)."""

    def __init__(self) -> None:
        self.delivered: list[tuple[str, bytes]] = []

    def deliver(self, file_name: str, data: bytes) -> None:
        self.delivered.append((file_name, data))

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.delivered]


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("SHEET2WORD_OUTPUT_DIR", raising=False)
        yield p


@pytest.fixture()
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture()
def no_sleep(monkeypatch) -> list[float]:
    """Record inter-document delays instead of sleeping."""
    calls: list[float] = []
    monkeypatch.setattr("sheet2word.services.delivery.time.sleep", calls.append)
    return calls


@pytest.fixture()
def sample_config_yaml() -> str:
    return """output_directory: ./out
title: null
transpose: false
split_columns: false
archive_name: converted_files.zip
archive_folder: converted_files
default_name: converted
delivery_delay_seconds: 0
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "sheet2word.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def people_rows() -> list[list[object]]:
    return [["Name", "Alice", "Bob"], ["Age", "30", "25"]]


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()
