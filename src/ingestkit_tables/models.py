"""Pydantic data models and enumerations for ingestkit-tables.

Covers the raw cell descriptors consumed from a table source, the resolved
grid cells, the per-row/per-column classification vectors, and the
``ParsedTable`` handed to rendering and selection collaborators.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ingestkit_tables.errors import IngestError


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class RowType(str, Enum):
    """Structural role of a grid row."""

    EMPTY = "empty"
    HEADER = "header"
    DATA = "data"


class ColumnType(str, Enum):
    """Structural role of a grid column.

    ``UNKNOWN`` marks columns with no cell in any data row.
    """

    UNKNOWN = "unknown"
    LABEL = "label"
    NUMERIC = "numeric"


# ---------------------------------------------------------------------------
# Input descriptors
# ---------------------------------------------------------------------------


def _coerce_span(value: Any) -> int:
    try:
        span = int(value)
    except (TypeError, ValueError):
        return 1
    return span if span >= 1 else 1


class RawCell(BaseModel):
    """A physical cell as declared by the table source.

    ``handle`` is opaque to the engine; it is passed back to the injected
    text extractor.  Span attributes default to 1 and anything that is not
    a positive integer is read as 1.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    handle: Any = None
    is_header_tag: bool = False
    colspan: int = 1
    rowspan: int = 1

    @field_validator("colspan", "rowspan", mode="before")
    @classmethod
    def _positive_span(cls, value: Any) -> int:
        return _coerce_span(value)


# ---------------------------------------------------------------------------
# Grid cells
# ---------------------------------------------------------------------------


class NumericRecord(BaseModel):
    """Numeric reading of a cell's display text.

    ``value`` is NaN when the text does not parse to a finite number.
    """

    model_config = ConfigDict(frozen=True)

    value: float = float("nan")
    is_numeric: bool = False
    is_year: bool = False
    is_percentage: bool = False
    original: str = ""


class Cell(BaseModel):
    """A logical cell after span resolution.

    One instance is shared by every grid coordinate it covers; the model is
    frozen so no stage can mutate it after the grid is built.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    is_header_tag: bool = False
    colspan: int = 1
    rowspan: int = 1
    numeric: NumericRecord = NumericRecord()
    origin_row: int
    origin_col: int

    @property
    def is_spanning(self) -> bool:
        return self.colspan > 1 or self.rowspan > 1


Grid = list[list[Optional[Cell]]]


# ---------------------------------------------------------------------------
# Classification results
# ---------------------------------------------------------------------------


class RowStats(BaseModel):
    """Per-row statistics used by the row rules."""

    length: int
    numeric_count: int
    numeric_ratio: float
    all_header_tags: bool
    has_spanning_cell: bool
    distinct_cell_count: int
    has_text: bool


class RowClassification(BaseModel):
    """Output of the row classifier."""

    row_types: list[RowType]
    header_row_count: int
    header_rows: list[int]
    hinted: bool = False


class ColumnClassification(BaseModel):
    """Output of the column classifier."""

    column_types: list[ColumnType]
    label_column_count: int
    naive_label_column_count: int
    detected_label_column_count: int


class ColumnMeta(BaseModel):
    """Per-column summary used for label-column reselection."""

    index: int
    header: str
    column_type: ColumnType
    is_text_only: bool
    is_numeric_sequence: bool
    numeric_ratio: float


class Series(BaseModel):
    """One named numeric sequence keyed by a data column or a data row."""

    name: str
    display_name: str
    data: list[float]
    index: int


class HeaderDedup(BaseModel):
    """Deduplicated column headers."""

    display_names: list[str]
    common_parts: list[str] = []
    title: str = ""
    unique_positions: list[int] = []


class LabelDedup(BaseModel):
    """Deduplicated row labels."""

    display_names: list[str]
    prefix: str = ""
    suffix: str = ""


class RowLabelMetadata(BaseModel):
    prefix: str = ""
    suffix: str = ""


class ColumnHeaderMetadata(BaseModel):
    title: str = ""
    parts: list[str] = []


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class ParsedTable(BaseModel):
    """The classified structure of one table.

    ``grid`` keeps the shared ``Cell`` references produced by the grid
    builder, so a spanning cell is the same object at every coordinate.
    """

    row_labels: list[str] = []
    row_display_names: list[str] = []
    row_metadata: RowLabelMetadata = RowLabelMetadata()

    column_headers: list[str] = []
    data_column_headers: list[str] = []
    column_display_names: list[str] = []
    column_metadata: ColumnHeaderMetadata = ColumnHeaderMetadata()

    series_by_column: list[Series] = []
    series_by_row: list[Series] = []

    grid: Grid = []
    row_types: list[RowType] = []
    column_types: list[ColumnType] = []
    header_row_count: int = 0
    label_column_count: int = 0
    unit_context: str | None = None

    all_columns: list[ColumnMeta] = []
    label_column_index: int = 0

    @property
    def has_chartable_data(self) -> bool:
        return bool(self.series_by_column or self.series_by_row)


# ---------------------------------------------------------------------------
# Router results
# ---------------------------------------------------------------------------


class TableResult(BaseModel):
    """Outcome for one ``<table>`` of a document.

    ``parsed`` is ``None`` when the table was skipped.
    """

    table_index: int
    row_count: int
    parsed: ParsedTable | None = None
    skipped: bool = False
    warnings: list[str] = []


class ProcessingResult(BaseModel):
    """Final result of ``TableRouter.process_html()``."""

    ingest_key: str
    ingest_run_id: str
    parser_version: str
    tables: list[TableResult] = []
    tables_found: int = 0
    tables_parsed: int = 0
    chartable_tables: int = 0
    errors: list[str] = []
    warnings: list[str] = []
    error_details: list[IngestError] = []
    processing_time_seconds: float = 0.0
