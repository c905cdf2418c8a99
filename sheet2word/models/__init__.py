"""Domain models for the Excel -> Word converter.

Value objects only: grids, decoded source tables, column pairs, export
options / artifacts / results and error records.
"""

from .column_pair import ColumnPair
from .error_record import ErrorRecord
from .export import ExportArtifact, ExportMode, ExportOptions, ExportResult, ExportState
from .grid import Grid, cell_text
from .source_table import SourceTable, strip_extension

__all__ = [
    # Table models
    "Grid",
    "cell_text",
    "SourceTable",
    "strip_extension",
    "ColumnPair",
    # Export models
    "ExportArtifact",
    "ExportMode",
    "ExportOptions",
    "ExportResult",
    "ExportState",
    # Error log
    "ErrorRecord",
]
