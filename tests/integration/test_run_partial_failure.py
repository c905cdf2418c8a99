from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from conftest import make_xlsx

from sheet2word.cli.__main__ import main as cli_main

"""Integration test: one unreadable workbook among valid ones.

The broken file is skipped (WARN + error log record); the others are still
converted and the run exits with 2.
"""


def test_partial_failure_run(temp_workdir: Path, write_config: Any, capsys):
    data_dir = temp_workdir / "data"
    make_xlsx(data_dir, "a.xlsx", [["k", "1"]])
    (data_dir / "b.xlsx").write_bytes(b"PK\x03\x04 truncated")
    make_xlsx(data_dir, "c.xlsx", [["k", "3"]])

    code = cli_main([str(data_dir)])
    out = capsys.readouterr().out

    assert code == 2
    assert sorted(p.name for p in (temp_workdir / "out").iterdir()) == ["a.docx", "c.docx"]
    assert "WARN" in out and "b.xlsx" in out
    assert "SUMMARY files=2 skipped=1 documents=2 mode=all" in out

    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    records = [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]
    assert [(r["file"], r["stage"], r["error_type"]) for r in records] == [
        ("b.xlsx", "decode", "DECODE_ERROR")
    ]
    assert "INFO error log: logs/errors-" in out


def test_non_spreadsheet_files_are_not_failures(temp_workdir: Path, write_config: Any, capsys):
    data_dir = temp_workdir / "data"
    make_xlsx(data_dir, "a.xlsx", [["k", "1"]])
    (data_dir / "notes.txt").write_text("ignore me", encoding="utf-8")

    assert cli_main([str(data_dir)]) == 0
    assert "skipped=0" in capsys.readouterr().out
