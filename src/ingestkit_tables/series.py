"""Series builder: projects the classified grid into chartable series.

Two dual views are produced from the same value matrix: one series per
data column and one series per data row.  Series without a single numeric
value are dropped.  Also holds the per-column metadata and the
label-column reselection path used when a caller picks another column to
supply row labels.
"""

from __future__ import annotations

import logging
import math

from ingestkit_tables.config import TableParserConfig
from ingestkit_tables.dedup import deduplicate_headers, deduplicate_labels
from ingestkit_tables.grid import cell_at
from ingestkit_tables.models import (
    ColumnHeaderMetadata,
    ColumnMeta,
    ColumnType,
    Grid,
    ParsedTable,
    RowLabelMetadata,
    RowType,
    Series,
)
from ingestkit_tables.numeric import has_meaningful_text, is_countable_numeric

logger = logging.getLogger("ingestkit_tables")


# ---------------------------------------------------------------------------
# Value extraction and series construction
# ---------------------------------------------------------------------------


def data_row_indices(row_types: list[RowType]) -> list[int]:
    return [index for index, row_type in enumerate(row_types) if row_type == RowType.DATA]


def extract_values(grid: Grid, row_indices: list[int], columns: list[int]) -> list[list[float]]:
    """Dense value matrix: one row per data row, one entry per column.

    Holes and non-numeric cells read as NaN.
    """
    matrix: list[list[float]] = []
    for row_index in row_indices:
        values: list[float] = []
        for col in columns:
            cell = cell_at(grid, row_index, col)
            values.append(cell.numeric.value if cell is not None else math.nan)
        matrix.append(values)
    return matrix


def _has_numeric(values: list[float]) -> bool:
    return any(not math.isnan(value) for value in values)


def build_series_by_column(
    names: list[str],
    display_names: list[str],
    matrix: list[list[float]],
) -> list[Series]:
    """One series per matrix column; ``index`` is the data-column position."""
    series: list[Series] = []
    for col, name in enumerate(names):
        data = [row[col] for row in matrix]
        if _has_numeric(data):
            series.append(Series(name=name, display_name=display_names[col], data=data, index=col))
    return series


def build_series_by_row(
    labels: list[str],
    display_names: list[str],
    matrix: list[list[float]],
) -> list[Series]:
    """One series per matrix row; ``index`` is the data-row position."""
    series: list[Series] = []
    for row, label in enumerate(labels):
        data = list(matrix[row])
        if _has_numeric(data):
            series.append(Series(name=label, display_name=display_names[row], data=data, index=row))
    return series


# ---------------------------------------------------------------------------
# Column metadata
# ---------------------------------------------------------------------------


def is_numeric_sequence(
    values: list[float],
    cell_count: int,
    config: TableParserConfig | None = None,
) -> bool:
    """True for row-index columns such as ``1, 2, 3 ...``.

    At least 80% of the column's cells must be numeric, and the sorted
    values must be consecutive integers starting at 0 or 1.
    """
    config = config or TableParserConfig()
    if cell_count == 0 or len(values) < 2:
        return False
    if len(values) / cell_count < config.numeric_sequence_min_ratio:
        return False

    ordered = sorted(values)
    if ordered[0] not in (0.0, 1.0):
        return False
    if not all(value.is_integer() for value in ordered):
        return False
    return all(b - a == 1 for a, b in zip(ordered, ordered[1:]))


def build_column_meta(
    grid: Grid,
    row_types: list[RowType],
    column_headers: list[str],
    column_types: list[ColumnType],
    config: TableParserConfig | None = None,
) -> list[ColumnMeta]:
    """Summarize every column over the data rows."""
    config = config or TableParserConfig()
    rows = data_row_indices(row_types)
    metas: list[ColumnMeta] = []

    for col, header in enumerate(column_headers):
        cells = [cell_at(grid, row_index, col) for row_index in rows]
        present = [cell for cell in cells if cell is not None]
        numeric = [cell.numeric.value for cell in present if is_countable_numeric(cell)]
        with_text = [cell for cell in present if has_meaningful_text(cell)]

        metas.append(
            ColumnMeta(
                index=col,
                header=header,
                column_type=column_types[col] if col < len(column_types) else ColumnType.UNKNOWN,
                is_text_only=bool(with_text) and not numeric,
                is_numeric_sequence=is_numeric_sequence(numeric, len(present), config),
                numeric_ratio=len(numeric) / len(present) if present else 0.0,
            )
        )
    return metas


def select_default_label_column(columns: list[ColumnMeta]) -> int:
    """Pick the column that supplies row labels when none was chosen.

    Preference: a text-only column that is not a row index, then a
    ``label`` column that is not a row index, then any ``label`` column,
    then column 0.
    """
    preferences = (
        lambda meta: meta.is_text_only and not meta.is_numeric_sequence,
        lambda meta: meta.column_type == ColumnType.LABEL and not meta.is_numeric_sequence,
        lambda meta: meta.column_type == ColumnType.LABEL,
    )
    for prefer in preferences:
        for meta in columns:
            if prefer(meta):
                return meta.index
    return 0


# ---------------------------------------------------------------------------
# Label-column reselection
# ---------------------------------------------------------------------------


def build_row_labels_for_column(parsed: ParsedTable, label_column_index: int) -> list[str]:
    """Row labels read directly from one column, ``Row N`` where it is blank."""
    labels: list[str] = []
    for row_index in data_row_indices(parsed.row_types):
        cell = cell_at(parsed.grid, row_index, label_column_index)
        labels.append(cell.text if cell is not None and cell.text else f"Row {len(labels) + 1}")
    return labels


def reselect_label_column(
    parsed: ParsedTable,
    label_column_index: int,
    config: TableParserConfig | None = None,
) -> ParsedTable:
    """Rebuild labels, headers and series around a caller-chosen label column.

    Grouping and unit context are not applied.  Chartable columns are the
    mostly-numeric, non-text-only columns other than the label column.
    Returns a new ``ParsedTable``; *parsed* is left untouched.  An index
    outside the table returns *parsed* unchanged.
    """
    config = config or TableParserConfig()
    if not 0 <= label_column_index < len(parsed.all_columns):
        logger.warning(
            "Label column %d out of range for %d column(s); keeping current selection.",
            label_column_index,
            len(parsed.all_columns),
        )
        return parsed

    labels = build_row_labels_for_column(parsed, label_column_index)
    row_dedup = deduplicate_labels(labels)

    chartable = [
        meta
        for meta in parsed.all_columns
        if meta.index != label_column_index
        and meta.numeric_ratio > config.chartable_min_numeric_ratio
        and not meta.is_text_only
    ]
    headers = [meta.header for meta in chartable]
    column_dedup = deduplicate_headers(
        headers, config.header_separator, config.generic_header_terms
    )

    matrix = extract_values(
        parsed.grid,
        data_row_indices(parsed.row_types),
        [meta.index for meta in chartable],
    )

    logger.debug(
        "Reselected label column %d: %d chartable column(s), %d row(s)",
        label_column_index,
        len(chartable),
        len(labels),
    )

    return parsed.model_copy(
        update={
            "row_labels": labels,
            "row_display_names": row_dedup.display_names,
            "row_metadata": RowLabelMetadata(prefix=row_dedup.prefix, suffix=row_dedup.suffix),
            "data_column_headers": headers,
            "column_display_names": column_dedup.display_names,
            "column_metadata": ColumnHeaderMetadata(
                title=column_dedup.title, parts=column_dedup.common_parts
            ),
            "series_by_column": build_series_by_column(headers, column_dedup.display_names, matrix),
            "series_by_row": build_series_by_row(labels, row_dedup.display_names, matrix),
            "label_column_index": label_column_index,
        }
    )
