from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import ErrorRecord
from ..models.export import ExportArtifact, ExportMode, ExportOptions, ExportResult, ExportState
from ..models.grid import Grid
from ..models.source_table import SourceTable
from ..render.document import RenderError, render_document
from .archive import ArchiveError, ZipArchive
from .delivery import DEFAULT_DELAY_SECONDS, DeliverySink, SequentialDelivery
from .normalizer import normalize
from .progress import ProgressTracker
from .splitter import resolve_group_name, split_into_column_pairs
from .transposer import transpose
from .workspace import Workspace

"""Batch export orchestration.

For every target table:

    normalize -> transpose (optional) -> split into column pairs (optional)
    -> render one .docx per resulting grid -> deliver

Individual delivery hands each document to the sink as soon as it is
rendered (with a delay between documents). Archive delivery collects every
document under one folder of a zip that is serialized and delivered once.

A failure aborts the rest of the invocation; documents already delivered
stay delivered. Exporters are not reentrant.
"""

__all__ = [
    "BatchExporter",
    "DocumentPlan",
    "EmptyInputError",
    "ExportError",
    "ExportFailedError",
    "plan_documents",
    "shape_grid",
    "DOCX_SUFFIX",
]

logger = logging.getLogger(__name__)

DOCX_SUFFIX = ".docx"
DEFAULT_ARCHIVE_NAME = "converted_files.zip"
DEFAULT_ARCHIVE_FOLDER = "converted_files"
DEFAULT_NAME = "converted"

_IN_FLIGHT = {ExportState.VALIDATING, ExportState.PROCESSING, ExportState.DELIVERING}


class ExportError(Exception):
    """Base exception for export invocations."""


class EmptyInputError(ExportError):
    """Nothing to export: no tables loaded, or no table at the selection."""


class ExportFailedError(ExportError):
    """An export invocation was aborted.

    Attributes:
        cause: the underlying RenderError / ArchiveError / OSError, or any
            other error raised by the sink
        delivered: documents already handed to the sink (not rolled back)
        file_name: document or archive being produced when the failure hit
    """

    def __init__(
        self, message: str, *, cause: Exception, delivered: int = 0, file_name: str = ""
    ) -> None:
        super().__init__(message)
        self.cause = cause
        self.delivered = delivered
        self.file_name = file_name


@dataclass(frozen=True)
class DocumentPlan:
    """One document to render: its grid, title suffix and file name."""
    grid: Grid
    title: str
    title_suffix: str
    file_name: str


def shape_grid(grid: Grid, options: ExportOptions) -> list[tuple[Grid, str]]:
    """Apply normalize / transpose / split; return ``(grid, group_name)`` items.

    ``group_name`` is "" when splitting is disabled.
    """
    shaped = normalize(grid)
    if options.transpose:
        shaped = transpose(shaped)
    if not options.split_columns:
        return [(shaped, "")]
    return [(pair.grid, resolve_group_name(pair)) for pair in split_into_column_pairs(shaped)]


def _file_part(name: str) -> str:
    # パス区切りはファイル名に使えない
    return name.replace("/", "_").replace("\\", "_")


def plan_documents(
    table: SourceTable,
    options: ExportOptions,
    *,
    fallback_name: str = DEFAULT_NAME,
    title: str | None = None,
) -> list[DocumentPlan]:
    """Documents produced for one table, in output order.

    Args:
        table: source table
        options: transpose / split switches
        fallback_name: base file name when the table has no display name
            (unsplit documents only)
        title: fixed document title; defaults to the table's display name
    """
    doc_title = title if title is not None else table.display_name
    plans: list[DocumentPlan] = []
    for grid, group_name in shape_grid(table.grid, options):
        if options.split_columns:
            file_name = f"{_file_part(table.display_name)}_{_file_part(group_name)}{DOCX_SUFFIX}"
        else:
            file_name = f"{_file_part(table.display_name) or fallback_name}{DOCX_SUFFIX}"
        plans.append(
            DocumentPlan(grid=grid, title=doc_title, title_suffix=group_name, file_name=file_name)
        )
    return plans


def _unique_name(file_name: str, used: set[str]) -> str:
    """``name.docx`` -> ``name_2.docx`` ... when already used in this export."""
    if file_name not in used:
        used.add(file_name)
        return file_name
    stem = file_name[: -len(DOCX_SUFFIX)] if file_name.endswith(DOCX_SUFFIX) else file_name
    n = 2
    while f"{stem}_{n}{DOCX_SUFFIX}" in used:
        n += 1
    unique = f"{stem}_{n}{DOCX_SUFFIX}"
    used.add(unique)
    return unique


class BatchExporter:
    """Export tables of a workspace as Word documents.

    ``state`` follows IDLE -> VALIDATING -> PROCESSING -> DELIVERING ->
    DONE | FAILED for each invocation.
    """

    def __init__(
        self,
        workspace: Workspace,
        sink: DeliverySink,
        *,
        title: str | None = None,
        archive_name: str = DEFAULT_ARCHIVE_NAME,
        archive_folder: str = DEFAULT_ARCHIVE_FOLDER,
        default_name: str = DEFAULT_NAME,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        error_log: ErrorLogBuffer | None = None,
    ) -> None:
        self.workspace = workspace
        self.sink = sink
        self.title = title
        self.archive_name = archive_name
        self.archive_folder = archive_folder
        self.default_name = default_name
        self.delay_seconds = delay_seconds
        self.error_log = error_log
        self.state = ExportState.IDLE

    def export_current(self, options: ExportOptions) -> ExportResult:
        """Export the selected table, delivering its documents one by one."""
        return self.export(ExportMode.CURRENT, options)

    def export_all(self, options: ExportOptions) -> ExportResult:
        """Export every table, delivering the documents one by one."""
        return self.export(ExportMode.ALL, options)

    def export_archive(self, options: ExportOptions) -> ExportResult:
        """Export every table into a single zip archive."""
        return self.export(ExportMode.ARCHIVE, options)

    def export(self, mode: ExportMode, options: ExportOptions) -> ExportResult:
        if self.state in _IN_FLIGHT:
            raise ExportError(f"export already in progress (state={self.state.value})")
        start_time = datetime.now(UTC)

        self.state = ExportState.VALIDATING
        try:
            targets = self._targets(mode)
        except EmptyInputError:
            self.state = ExportState.FAILED
            raise

        self.state = ExportState.PROCESSING
        try:
            names = self._process(mode, options, targets)
        except ExportFailedError as e:
            self.state = ExportState.FAILED
            logger.error("export failed (%s): %s", mode.value, e)
            self._record_failure(e)
            raise

        self.state = ExportState.DONE
        end_time = datetime.now(UTC)
        return ExportResult(
            mode=mode,
            artifact_count=len(names),
            artifact_names=tuple(names),
            start_time=start_time,
            end_time=end_time,
            elapsed_seconds=(end_time - start_time).total_seconds(),
            archive_name=self.archive_name if mode is ExportMode.ARCHIVE else None,
        )

    def _targets(self, mode: ExportMode) -> list[tuple[int, SourceTable]]:
        tables = self.workspace.tables
        if not tables:
            raise EmptyInputError("Please upload an Excel file first!")
        if mode is ExportMode.CURRENT:
            index = self.workspace.selected_index
            if not 0 <= index < len(tables):
                raise EmptyInputError(f"No file selected! (index {index}, {len(tables)} loaded)")
            return [(index, tables[index])]
        return list(enumerate(tables))

    def _fallback_name(self, mode: ExportMode, position: int) -> str:
        if mode is ExportMode.CURRENT:
            return self.default_name
        return f"{self.default_name}_{position + 1}"

    def _process(
        self, mode: ExportMode, options: ExportOptions, targets: list[tuple[int, SourceTable]]
    ) -> list[str]:
        archive = ZipArchive(self.archive_folder) if mode is ExportMode.ARCHIVE else None
        delivery = SequentialDelivery(self.sink, self.delay_seconds)
        used: set[str] = set()
        names: list[str] = []
        current = ""
        try:
            with ProgressTracker(len(targets), description="Converting") as progress:
                for position, table in targets:
                    progress.start_table(table.original_file_name)
                    plans = plan_documents(
                        table,
                        options,
                        fallback_name=self._fallback_name(mode, position),
                        title=self.title,
                    )
                    for plan in plans:
                        current = plan.file_name
                        self.state = ExportState.PROCESSING
                        data = render_document(plan.grid, plan.title, plan.title_suffix)
                        artifact = ExportArtifact(_unique_name(plan.file_name, used), data)
                        if archive is not None:
                            archive.add_entry(artifact.file_name, artifact.data)
                        else:
                            self.state = ExportState.DELIVERING
                            delivery.deliver(artifact)
                        logger.debug("document %s (%d bytes)", artifact.file_name, artifact.size)
                        names.append(artifact.file_name)
                    progress.finish_table(documents=len(names))

            if archive is not None:
                current = self.archive_name
                self.state = ExportState.DELIVERING
                self.sink.deliver(self.archive_name, archive.serialize())
                delivery.delivered = 1
        except RenderError as e:
            raise ExportFailedError(
                f"Error creating Word document {current}: {e}",
                cause=e,
                delivered=delivery.delivered,
                file_name=current,
            ) from e
        except ArchiveError as e:
            raise ExportFailedError(
                f"Error creating zip file: {e}", cause=e, delivered=0, file_name=current
            ) from e
        except OSError as e:
            raise ExportFailedError(
                f"Error saving {current}: {e}",
                cause=e,
                delivered=delivery.delivered,
                file_name=current,
            ) from e
        except Exception as e:
            raise ExportFailedError(
                f"Error exporting {current}: {e}",
                cause=e,
                delivered=delivery.delivered,
                file_name=current,
            ) from e
        return names

    def _record_failure(self, error: ExportFailedError) -> None:
        if self.error_log is None:
            return
        cause = error.cause
        if isinstance(cause, RenderError):
            stage, error_type = "render", "RENDER_ERROR"
        elif isinstance(cause, ArchiveError):
            stage, error_type = "archive", "ARCHIVE_ERROR"
        else:
            stage, error_type = "deliver", "DELIVERY_ERROR"
        self.error_log.append(
            ErrorRecord.create(
                file=error.file_name or "<EXPORT>",
                stage=stage,
                error_type=error_type,
                message=str(error),
            )
        )
