"""Header composer: folds multi-row headers into one string per column."""

from __future__ import annotations

from ingestkit_tables.config import TableParserConfig
from ingestkit_tables.grid import cell_at, column_count
from ingestkit_tables.models import Grid


def build_column_headers(
    grid: Grid,
    header_rows: list[int],
    config: TableParserConfig | None = None,
) -> list[str]:
    """Return the hierarchical header of every column.

    Parts are taken top to bottom from *header_rows*; a part equal to the
    one just before it is skipped so text spread by a rowspan appears once.
    Columns without header text are named ``Column N`` (1-based).
    """
    config = config or TableParserConfig()
    headers: list[str] = []

    for col in range(column_count(grid)):
        parts: list[str] = []
        for row_index in header_rows:
            cell = cell_at(grid, row_index, col)
            if cell is None or not cell.text:
                continue
            if parts and parts[-1] == cell.text:
                continue
            parts.append(cell.text)

        headers.append(config.header_separator.join(parts) if parts else f"Column {col + 1}")

    return headers
