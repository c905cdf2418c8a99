from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the JSON Lines error log.

One record per failure: a spreadsheet that could not be decoded, or an
export invocation that was aborted. ``stage`` tells which part of the
pipeline failed (``decode`` / ``render`` / ``archive`` / ``deliver``).
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: spreadsheet or artifact file name involved
        stage: pipeline stage that failed
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: human readable error message
    """
    timestamp: str  # ISO8601 UTC
    file: str
    stage: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, stage: str, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            stage=stage,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON line (fixed key set)."""
        return json.dumps(asdict(self), ensure_ascii=False)
