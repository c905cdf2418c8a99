from __future__ import annotations

from datetime import datetime

import pytest

from sheet2word.models import ColumnPair, ExportArtifact, Grid, SourceTable, cell_text, strip_extension


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, ""),
        ("", ""),
        ("Alice", "Alice"),
        (30, "30"),
        (30.0, "30"),
        (2.5, "2.5"),
        (float("nan"), ""),
        (True, "true"),
        (False, "false"),
        (0, "0"),
        (datetime(2024, 5, 1), "2024-05-01"),
        (datetime(2024, 5, 1, 13, 30), "2024-05-01 13:30:00"),
    ],
)
def test_cell_text(value, expected):
    assert cell_text(value) == expected


def test_grid_dimensions_ragged():
    g = Grid.from_rows([["a", "b", "c"], ["d"], []])
    assert g.row_count == 3
    assert g.max_cols == 3
    assert not g.is_rectangular
    assert g.cell(1, 2) is None
    assert g.cell(0, 2) == "c"


def test_grid_empty():
    g = Grid()
    assert g.is_empty
    assert g.max_cols == 0
    assert g.is_rectangular
    assert g.to_lists() == []


def test_grid_is_immutable_value():
    g1 = Grid.from_rows([["a", 1]])
    g2 = Grid.from_rows([("a", 1)])
    assert g1 == g2
    with pytest.raises(AttributeError):
        g1.rows = ()  # type: ignore[misc]


@pytest.mark.parametrize(
    "file_name, display",
    [
        ("people.xlsx", "people"),
        ("Packing List.XLS", "Packing List"),
        ("a.b.xlsx", "a.b"),
        (".xlsx", ""),
        ("noext", "noext"),
    ],
)
def test_strip_extension(file_name, display):
    assert strip_extension(file_name) == display


def test_source_table_from_upload_and_with_grid():
    grid = Grid.from_rows([["x"]])
    table = SourceTable.from_upload("family.xlsx", grid)
    assert table.display_name == "family"
    assert table.original_file_name == "family.xlsx"

    other = table.with_grid(Grid.from_rows([["y"]]))
    assert other.grid != table.grid
    assert table.grid == grid  # original untouched


def test_column_pair_placeholder():
    pair = ColumnPair(grid=Grid.from_rows([["a", ""]]), source_column=3)
    assert pair.placeholder_name == "column4"


def test_export_artifact_repr_hides_bytes():
    artifact = ExportArtifact("a.docx", b"\x00" * 10)
    assert artifact.size == 10
    assert "\\x00" not in repr(artifact)
