"""Domain models for the Excel -> MySQL migration tool."""

from .cell_value import CellKind, CellValue
from .config_models import DatabaseConfig, ImportOptions
from .processing_result import ImportOutcome, RunSummary, TableResult
from .row_data import RowData
from .table import Table, conventional_table_name, sanitize_table_name

__all__ = [
    # Configuration models
    "DatabaseConfig",
    "ImportOptions",
    # Sheet models
    "CellKind",
    "CellValue",
    "RowData",
    "Table",
    "conventional_table_name",
    "sanitize_table_name",
    # Processing models
    "ImportOutcome",
    "RunSummary",
    "TableResult",
]
