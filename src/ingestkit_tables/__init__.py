"""ingestkit-tables -- table-structure inference for chartable data.

Public API re-exports for convenient access.
"""

from ingestkit_tables.columns import classify_columns
from ingestkit_tables.config import TableParserConfig
from ingestkit_tables.dedup import deduplicate_headers, deduplicate_labels
from ingestkit_tables.errors import ErrorCode, IngestError
from ingestkit_tables.grid import build_grid
from ingestkit_tables.headers import build_column_headers
from ingestkit_tables.html_source import HTMLTableSource, VisibleTextExtractor, parse_html_tables
from ingestkit_tables.labels import build_row_labels
from ingestkit_tables.models import (
    Cell,
    ColumnMeta,
    ColumnType,
    NumericRecord,
    ParsedTable,
    ProcessingResult,
    RawCell,
    RowType,
    Series,
    TableResult,
)
from ingestkit_tables.numeric import parse_numeric
from ingestkit_tables.parser import TableParser, parse_table
from ingestkit_tables.protocols import TableSource, TextExtractor
from ingestkit_tables.router import TableRouter
from ingestkit_tables.rows import classify_rows
from ingestkit_tables.series import reselect_label_column
from ingestkit_tables.session import (
    ChartSession,
    ChartView,
    ViewMode,
    current_view,
    select_label_column,
    set_view_mode,
    start_session,
    view_to_dataframe,
)
from ingestkit_tables.sources import InMemoryTableSource, PlainTextExtractor

__all__ = [
    # Entry points
    "TableParser",
    "parse_table",
    "TableRouter",
    "TableParserConfig",
    # Errors
    "ErrorCode",
    "IngestError",
    # Models
    "RawCell",
    "Cell",
    "NumericRecord",
    "RowType",
    "ColumnType",
    "ColumnMeta",
    "Series",
    "ParsedTable",
    "TableResult",
    "ProcessingResult",
    # Protocols and sources
    "TableSource",
    "TextExtractor",
    "InMemoryTableSource",
    "PlainTextExtractor",
    "HTMLTableSource",
    "VisibleTextExtractor",
    "parse_html_tables",
    # Pipeline stages
    "parse_numeric",
    "build_grid",
    "classify_rows",
    "classify_columns",
    "build_column_headers",
    "build_row_labels",
    "deduplicate_headers",
    "deduplicate_labels",
    "reselect_label_column",
    # Sessions
    "ViewMode",
    "ChartSession",
    "ChartView",
    "start_session",
    "select_label_column",
    "set_view_mode",
    "current_view",
    "view_to_dataframe",
]
