"""TableParser -- the table-structure inference pipeline.

Runs one table through the stages in order:

1. Resolve spans into a grid via :func:`build_grid`.
2. Classify rows and settle the header band via :func:`classify_rows`.
3. Classify columns and the label-column count via :func:`classify_columns`.
4. Compose grouped row labels and find unit rows via
   :func:`build_row_labels`.
5. Compose hierarchical column headers via :func:`build_column_headers`,
   leaving unit rows out.
6. Deduplicate headers and labels for display.
7. Project the value matrix into column and row series.
8. Summarize every column and pick the default label column.

The pipeline is total: any table, including an empty one, yields a
``ParsedTable``.
"""

from __future__ import annotations

import logging

from ingestkit_tables.columns import classify_columns
from ingestkit_tables.config import TableParserConfig
from ingestkit_tables.dedup import deduplicate_headers, deduplicate_labels
from ingestkit_tables.grid import build_grid, column_count
from ingestkit_tables.headers import build_column_headers
from ingestkit_tables.labels import build_row_labels
from ingestkit_tables.models import (
    ColumnHeaderMetadata,
    ParsedTable,
    RowLabelMetadata,
)
from ingestkit_tables.protocols import TableSource, TextExtractor
from ingestkit_tables.rows import classify_rows
from ingestkit_tables.series import (
    build_column_meta,
    build_series_by_column,
    build_series_by_row,
    extract_values,
    select_default_label_column,
)
from ingestkit_tables.sources import PlainTextExtractor

logger = logging.getLogger("ingestkit_tables")


class TableParser:
    """Infers the structure of tables read from a :class:`TableSource`.

    Parameters
    ----------
    text_extractor:
        Provider of the visible text of each cell handle.  Defaults to
        :class:`PlainTextExtractor`.
    config:
        Heuristic thresholds.  Uses defaults when *None*.
    """

    def __init__(
        self,
        text_extractor: TextExtractor | None = None,
        config: TableParserConfig | None = None,
    ) -> None:
        self._config = config or TableParserConfig()
        self._text_extractor = text_extractor or PlainTextExtractor()

    @property
    def config(self) -> TableParserConfig:
        return self._config

    def parse(self, source: TableSource) -> ParsedTable:
        """Run the full pipeline over *source*."""
        config = self._config

        # ==============================================================
        # Step 1: Grid
        # ==============================================================
        grid = build_grid(source.iter_rows(), self._text_extractor, config)
        width = column_count(grid)

        # ==============================================================
        # Step 2-3: Row and column classification
        # ==============================================================
        rows = classify_rows(grid, source.header_section_size(), config)
        columns = classify_columns(grid, rows.row_types, rows.header_row_count, config)
        label_count = columns.label_column_count

        # ==============================================================
        # Step 4-5: Labels and headers
        # ==============================================================
        label_result = build_row_labels(grid, rows.row_types, label_count, config)
        header_rows = [
            index for index in rows.header_rows if index not in label_result.unit_rows
        ]
        column_headers = build_column_headers(grid, header_rows, config)
        data_column_headers = column_headers[label_count:]

        # ==============================================================
        # Step 6: Deduplication
        # ==============================================================
        column_dedup = deduplicate_headers(
            data_column_headers, config.header_separator, config.generic_header_terms
        )
        row_dedup = deduplicate_labels(label_result.labels)

        # ==============================================================
        # Step 7: Series
        # ==============================================================
        matrix = extract_values(grid, label_result.row_indices, list(range(label_count, width)))
        series_by_column = build_series_by_column(
            data_column_headers, column_dedup.display_names, matrix
        )
        series_by_row = build_series_by_row(
            label_result.labels, row_dedup.display_names, matrix
        )

        # ==============================================================
        # Step 8: Column metadata
        # ==============================================================
        all_columns = build_column_meta(
            grid, rows.row_types, column_headers, columns.column_types, config
        )

        logger.debug(
            "Parsed table: %d row(s) x %d column(s), header_rows=%d, label_columns=%d, "
            "series by column=%d, by row=%d",
            len(grid),
            width,
            rows.header_row_count,
            label_count,
            len(series_by_column),
            len(series_by_row),
        )
        if config.log_cell_text:
            logger.debug("Column headers: %s", column_headers)
            logger.debug("Row labels: %s", label_result.labels)

        return ParsedTable(
            row_labels=label_result.labels,
            row_display_names=row_dedup.display_names,
            row_metadata=RowLabelMetadata(prefix=row_dedup.prefix, suffix=row_dedup.suffix),
            column_headers=column_headers,
            data_column_headers=data_column_headers,
            column_display_names=column_dedup.display_names,
            column_metadata=ColumnHeaderMetadata(
                title=column_dedup.title, parts=column_dedup.common_parts
            ),
            series_by_column=series_by_column,
            series_by_row=series_by_row,
            grid=grid,
            row_types=rows.row_types,
            column_types=columns.column_types,
            header_row_count=rows.header_row_count,
            label_column_count=label_count,
            unit_context=label_result.unit_context,
            all_columns=all_columns,
            label_column_index=select_default_label_column(all_columns),
        )


def parse_table(
    source: TableSource,
    text_extractor: TextExtractor | None = None,
    config: TableParserConfig | None = None,
) -> ParsedTable:
    """Parse one table with a throwaway :class:`TableParser`."""
    return TableParser(text_extractor, config).parse(source)
