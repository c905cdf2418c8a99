from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

"""Export domain models: options, artifacts, lifecycle state and results.

The ExportState enum tracks one exporter invocation through its lifecycle:

    IDLE -> VALIDATING -> PROCESSING -> DELIVERING -> (DONE | FAILED)
"""

__all__ = [
    "ExportArtifact",
    "ExportMode",
    "ExportOptions",
    "ExportResult",
    "ExportState",
]


class ExportMode(Enum):
    """Which tables are exported and how the documents are delivered.

    - CURRENT: the selected table, documents delivered one by one
    - ALL: every table in insertion order, documents delivered one by one
    - ARCHIVE: every table in insertion order, documents bundled in one zip
    """
    CURRENT = "current"
    ALL = "all"
    ARCHIVE = "zip"


class ExportState(Enum):
    """Lifecycle of a single export invocation."""
    IDLE = "idle"
    VALIDATING = "validating"
    PROCESSING = "processing"
    DELIVERING = "delivering"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ExportOptions:
    """Pure configuration: same options + same tables -> same artifacts."""
    transpose: bool = False
    split_columns: bool = False


@dataclass(frozen=True)
class ExportArtifact:
    """A rendered document ready for delivery (not retained afterwards)."""
    file_name: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ExportResult:
    """Outcome of a successful export invocation."""
    mode: ExportMode
    artifact_count: int  # documents produced (== names in archive for ARCHIVE)
    artifact_names: tuple[str, ...]
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    archive_name: str | None = None  # ARCHIVE mode only
