"""Column classifier: labels columns and counts the leading label columns.

Two independent estimates of the label-column count are produced and then
merged:

* the naive count of contiguous ``label`` columns from the left, computed
  over data rows only, with column 0 forced to ``label`` when nothing else
  qualifies;
* the leading-label detector, which looks at every non-empty row and at
  header tagging, and catches tables whose label cells in the body are
  tagged as header cells.

The detector can only widen the label area, never shrink it.
"""

from __future__ import annotations

import logging

from ingestkit_tables.config import TableParserConfig
from ingestkit_tables.grid import cell_at, column_count
from ingestkit_tables.models import ColumnClassification, ColumnType, Grid, RowType
from ingestkit_tables.numeric import has_meaningful_text, is_countable_numeric

logger = logging.getLogger("ingestkit_tables")


def classify_column(
    grid: Grid,
    row_types: list[RowType],
    col: int,
    config: TableParserConfig,
) -> ColumnType:
    """Classify one column from the cells it has in data rows."""
    numeric_count = 0
    data_row_count = 0
    for row_index, row_type in enumerate(row_types):
        if row_type != RowType.DATA:
            continue
        cell = cell_at(grid, row_index, col)
        if cell is None:
            continue
        data_row_count += 1
        if is_countable_numeric(cell):
            numeric_count += 1

    if data_row_count == 0:
        return ColumnType.UNKNOWN
    if numeric_count / data_row_count > config.numeric_column_ratio:
        return ColumnType.NUMERIC
    return ColumnType.LABEL


def count_leading_labels(column_types: list[ColumnType]) -> int:
    count = 0
    for column_type in column_types:
        if column_type != ColumnType.LABEL:
            break
        count += 1
    return count


def detect_leading_label_columns(
    grid: Grid,
    row_types: list[RowType],
    header_row_count: int,
    config: TableParserConfig | None = None,
) -> int:
    """Count contiguous likely-label columns from the left.

    A column is likely a label column when fewer than 20% of its non-empty
    cells (over all non-empty rows) are numeric, and either most of its body
    cells are header-tagged or the last header row gives it header-tagged
    text.  The scan stops at the first column that fails or has no body
    data.
    """
    config = config or TableParserConfig()
    body_rows = [
        index
        for index, row_type in enumerate(row_types)
        if row_type != RowType.EMPTY and index >= header_row_count
    ]
    non_empty_rows = [
        index for index, row_type in enumerate(row_types) if row_type != RowType.EMPTY
    ]
    last_header_row = header_row_count - 1

    count = 0
    for col in range(column_count(grid)):
        body_cells = [cell_at(grid, index, col) for index in body_rows]
        body_with_text = [cell for cell in body_cells if has_meaningful_text(cell)]
        if not body_with_text:
            break

        all_cells = [cell_at(grid, index, col) for index in non_empty_rows]
        present = [cell for cell in all_cells if has_meaningful_text(cell)]
        numeric_ratio_all = (
            sum(1 for cell in present if is_countable_numeric(cell)) / len(present)
        )

        header_tagged = sum(1 for cell in body_cells if cell is not None and cell.is_header_tag)
        body_header_ratio = header_tagged / len(body_rows)

        header_cell = cell_at(grid, last_header_row, col) if last_header_row >= 0 else None
        has_header_text = (
            header_cell is not None
            and header_cell.is_header_tag
            and has_meaningful_text(header_cell)
        )

        likely_label = numeric_ratio_all < config.leading_label_max_numeric_ratio and (
            body_header_ratio > config.leading_label_min_body_header_ratio
            or has_header_text
        )
        if not likely_label:
            break
        count += 1

    return count


def merge_label_column_count(naive: int, detected: int) -> int:
    """The detector wins only when it finds more label columns."""
    return detected if detected > naive else naive


def classify_columns(
    grid: Grid,
    row_types: list[RowType],
    header_row_count: int,
    config: TableParserConfig | None = None,
) -> ColumnClassification:
    """Classify every column and settle the label-column count."""
    config = config or TableParserConfig()
    column_types = [
        classify_column(grid, row_types, col, config) for col in range(column_count(grid))
    ]

    naive = count_leading_labels(column_types)
    if naive == 0 and ColumnType.NUMERIC in column_types:
        # A chart needs at least one label axis.
        column_types[0] = ColumnType.LABEL
        naive = 1

    detected = detect_leading_label_columns(grid, row_types, header_row_count, config)
    label_column_count = merge_label_column_count(naive, detected)
    for col in range(naive, label_column_count):
        column_types[col] = ColumnType.LABEL

    logger.debug(
        "Column types %s; label columns naive=%d detected=%d merged=%d",
        [t.value for t in column_types],
        naive,
        detected,
        label_column_count,
    )

    return ColumnClassification(
        column_types=column_types,
        label_column_count=label_column_count,
        naive_label_column_count=naive,
        detected_label_column_count=detected,
    )
