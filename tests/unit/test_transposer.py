from __future__ import annotations

from sheet2word.models.grid import Grid
from sheet2word.services.normalizer import normalize
from sheet2word.services.transposer import transpose


def test_transpose_rectangular():
    g = Grid.from_rows([[1, 2, 3], [4, 5, 6]])
    t = transpose(g)
    assert t.to_lists() == [[1, 4], [2, 5], [3, 6]]
    assert t.row_count == g.max_cols
    assert t.max_cols == g.row_count


def test_transpose_ragged_input_fills_missing_cells():
    g = Grid.from_rows([["A", "B"], ["1", "2"], ["3"]])
    assert transpose(g).to_lists() == [["A", "1", "3"], ["B", "2", ""]]


def test_transpose_empty_grid_maps_to_itself():
    assert transpose(Grid()) == Grid()


def test_transpose_none_cells_become_empty():
    g = Grid.from_rows([[None, "x"]])
    assert transpose(g).to_lists() == [[""], ["x"]]


def test_double_transpose_is_identity_on_normalized_grid():
    raw = [["a", "b", "c"], ["d"], ["e", "f"]]
    n = normalize(raw)
    assert transpose(transpose(n)) == n


def test_single_row_becomes_single_column():
    t = transpose(Grid.from_rows([["x", "y", "z"]]))
    assert t.to_lists() == [["x"], ["y"], ["z"]]
