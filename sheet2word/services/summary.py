from __future__ import annotations

from ..models.export import ExportResult

"""Summary line rendering.

Format:
SUMMARY files={loaded} skipped={failed} documents={count} mode={mode} elapsed_sec={elapsed}
"""

__all__ = [
    "format_seconds",
    "render_summary_line",
]


def format_seconds(value: float) -> str:
    """Render seconds without scientific notation or a useless ``.0``."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(loaded_files: int, failed_files: int, result: ExportResult | None) -> str:
    """Render the SUMMARY line of a CLI run.

    ``result`` is None when the export did not complete (documents=0).

    >>> from datetime import datetime, timezone
    >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
    >>> from sheet2word.models.export import ExportMode
    >>> r = ExportResult(ExportMode.ALL, 3, ("a.docx", "b.docx", "c.docx"), t, t, 2.0)
    >>> render_summary_line(3, 0, r)
    'SUMMARY files=3 skipped=0 documents=3 mode=all elapsed_sec=2'
    """
    documents = result.artifact_count if result is not None else 0
    mode = result.mode.value if result is not None else "none"
    elapsed = format_seconds(result.elapsed_seconds) if result is not None else "0"
    return (
        f"SUMMARY files={loaded_files} "
        f"skipped={failed_files} "
        f"documents={documents} "
        f"mode={mode} "
        f"elapsed_sec={elapsed}"
    )
