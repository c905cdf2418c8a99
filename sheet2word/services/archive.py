from __future__ import annotations

import io
import zipfile

"""In-memory zip archive builder.

Entries are added one by one and the archive is serialized exactly once;
a failure at any point means no archive at all (never a partial one).
"""

__all__ = [
    "ArchiveError",
    "ZipArchive",
]


class ArchiveError(Exception):
    """Raised when the archive cannot be built or serialized."""


class ZipArchive:
    """Collects named byte blobs under an optional folder and zips them."""

    def __init__(self, folder: str = "") -> None:
        self.folder = folder.strip("/")
        self._buffer = io.BytesIO()
        self._zip: zipfile.ZipFile | None = zipfile.ZipFile(self._buffer, "w", zipfile.ZIP_DEFLATED)
        self._names: list[str] = []

    def entry_path(self, file_name: str) -> str:
        return f"{self.folder}/{file_name}" if self.folder else file_name

    @property
    def names(self) -> list[str]:
        return list(self._names)

    def add_entry(self, file_name: str, data: bytes) -> str:
        """Add one file (placed under ``folder``); returns its archive path."""
        if self._zip is None:
            raise ArchiveError("archive already serialized")
        path = self.entry_path(file_name)
        try:
            self._zip.writestr(path, data)
        except (OSError, ValueError, zipfile.LargeZipFile) as e:
            raise ArchiveError(f"cannot add '{path}': {e}") from e
        self._names.append(path)
        return path

    def serialize(self) -> bytes:
        """Finish the archive and return its bytes."""
        if self._zip is None:
            raise ArchiveError("archive already serialized")
        try:
            self._zip.close()
        except (OSError, ValueError) as e:
            raise ArchiveError(f"cannot serialize archive: {e}") from e
        finally:
            self._zip = None
        return self._buffer.getvalue()
