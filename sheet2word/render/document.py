from __future__ import annotations

import io

from docx import Document
from docx.oxml import parse_xml
from docx.oxml.ns import nsdecls, qn
from docx.shared import Pt

from ..models.grid import Grid, cell_text

"""Word document renderer.

Builds a document with a bold title paragraph followed by one table and
returns the encoded .docx bytes. One table row per grid row and one cell
per value of that row; the grid is not re-normalized here.
"""

__all__ = [
    "RenderError",
    "render_document",
    "document_title",
    "TITLE_SIZE",
    "CELL_SIZE",
]

TITLE_SIZE = Pt(16)
CELL_SIZE = Pt(10)
TITLE_SPACE_AFTER = Pt(10)

# 100% of the text width: pct widths are expressed in fiftieths of a percent
_TABLE_WIDTH_XML = f'<w:tblW {nsdecls("w")} w:type="pct" w:w="5000"/>'


class RenderError(Exception):
    """Raised when a document cannot be built or encoded."""


def document_title(title: str, title_suffix: str = "") -> str:
    return f"{title} {title_suffix}" if title_suffix else title


def _set_full_width(table) -> None:
    tbl_pr = table._tbl.tblPr
    tbl_w = tbl_pr.find(qn("w:tblW"))
    if tbl_w is None:
        tbl_pr.append(parse_xml(_TABLE_WIDTH_XML))
        return
    tbl_w.set(qn("w:type"), "pct")
    tbl_w.set(qn("w:w"), "5000")


def _build(grid: Grid, title: str, title_suffix: str):
    doc = Document()

    heading = doc.add_paragraph()
    heading.paragraph_format.space_after = TITLE_SPACE_AFTER
    run = heading.add_run(document_title(title, title_suffix))
    run.bold = True
    run.font.size = TITLE_SIZE

    if grid.is_empty or grid.max_cols == 0:
        # Word rejects a table without rows or cells
        return doc

    table = doc.add_table(rows=grid.row_count, cols=grid.max_cols)
    _set_full_width(table)
    for row_values, row in zip(grid.rows, table.rows):
        cells = row.cells
        for value, cell in zip(row_values, cells):
            cell_run = cell.paragraphs[0].add_run(cell_text(value))
            cell_run.font.size = CELL_SIZE
        # short rows keep their own width (at least one cell): drop the unused trailing cells
        for cell in cells[max(len(row_values), 1):]:
            row._tr.remove(cell._tc)
    return doc


def render_document(grid: Grid, title: str, title_suffix: str = "") -> bytes:
    """Render ``grid`` under ``title`` (+ " " + suffix) into .docx bytes.

    Raises:
        RenderError: any failure while building or encoding the document
    """
    try:
        doc = _build(grid, title, title_suffix)
        buffer = io.BytesIO()
        doc.save(buffer)
    except Exception as e:
        raise RenderError(f"failed to render '{document_title(title, title_suffix)}': {e}") from e
    return buffer.getvalue()
