"""Grid builder: resolves colspan/rowspan into a grid of shared cells.

Rows are walked top to bottom while a pending-span map keyed by
``(row, col)`` holds the cell that a rowspan from above will place at that
coordinate.  A spanning cell is created once and the same instance is
written at every coordinate it covers.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ingestkit_tables.config import TableParserConfig
from ingestkit_tables.models import Cell, Grid, RawCell
from ingestkit_tables.numeric import normalize_text, parse_numeric
from ingestkit_tables.protocols import TextExtractor

logger = logging.getLogger("ingestkit_tables")


def build_grid(
    rows: Sequence[Sequence[RawCell]],
    text_extractor: TextExtractor,
    config: TableParserConfig | None = None,
) -> Grid:
    """Build the resolved grid for *rows*.

    Coordinates that no declared span reaches stay ``None``.  Rowspans that
    run past the last row are dropped.
    """
    config = config or TableParserConfig()
    grid: Grid = []
    pending: dict[tuple[int, int], Cell] = {}

    for row_index, raw_row in enumerate(rows):
        grid_row: list[Cell | None] = []
        col = 0

        for raw in raw_row:
            col = _drain_pending(pending, grid_row, row_index, col)

            colspan = min(raw.colspan, config.max_colspan)
            rowspan = min(raw.rowspan, config.max_rowspan)
            text = normalize_text(text_extractor.extract_visible_text(raw.handle))
            cell = Cell(
                text=text,
                is_header_tag=raw.is_header_tag,
                colspan=colspan,
                rowspan=rowspan,
                numeric=parse_numeric(text),
                origin_row=row_index,
                origin_col=col,
            )

            for offset in range(colspan):
                _place(grid_row, col + offset, cell)
                for down in range(1, rowspan):
                    if row_index + down < len(rows):
                        pending[(row_index + down, col + offset)] = cell

            col += colspan

        # Cells spanned purely from above with no physical cell after them.
        _drain_pending(pending, grid_row, row_index, col)
        grid.append(grid_row)

    if pending:
        logger.debug(
            "Grid build left %d unreachable span coordinate(s).", len(pending)
        )
    return grid


def _drain_pending(
    pending: dict[tuple[int, int], Cell],
    grid_row: list[Cell | None],
    row_index: int,
    col: int,
) -> int:
    """Place consecutive pending cells starting at *col*; return the new cursor."""
    while (row_index, col) in pending:
        _place(grid_row, col, pending.pop((row_index, col)))
        col += 1
    return col


def _place(grid_row: list[Cell | None], col: int, cell: Cell) -> None:
    if col >= len(grid_row):
        grid_row.extend([None] * (col + 1 - len(grid_row)))
    grid_row[col] = cell


def column_count(grid: Grid) -> int:
    """Width of the widest grid row."""
    return max((len(row) for row in grid), default=0)


def cell_at(grid: Grid, row: int, col: int) -> Cell | None:
    """Return the cell at ``(row, col)`` or ``None`` for holes and short rows."""
    if row >= len(grid) or col >= len(grid[row]):
        return None
    return grid[row][col]


def count_holes(grid: Grid) -> int:
    """Number of coordinates within the grid width that no cell reaches."""
    width = column_count(grid)
    return sum(width - sum(1 for cell in row if cell is not None) for row in grid)
