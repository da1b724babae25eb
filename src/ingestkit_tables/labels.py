"""Label composer: one label per data row from the label columns.

Grouping is carried row by row in an explicit :class:`LabelState`:

* a label cell with ``rowspan > 1`` sets its column's active group, which
  persists over the rows the group covers;
* a cell that starts in the current row is that row's own value for the
  column, and it resets the active groups of every deeper label column
  (entering a new parent voids the child grouping);
* a header row below the first one whose data cells all carry one
  identical non-numeric text (e.g. ``(in millions)``) is a unit row; it
  sets the active unit, appended to later labels, and is left out of the
  column headers.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from pydantic import BaseModel

from ingestkit_tables.config import TableParserConfig
from ingestkit_tables.models import Cell, Grid, RowType

logger = logging.getLogger("ingestkit_tables")

_HAS_LETTER = re.compile(r"[^\W\d_]")


class LabelResult(BaseModel):
    """Row labels in data-row order plus the grid rows they came from."""

    labels: list[str]
    row_indices: list[int]
    unit_context: str | None = None
    unit_rows: list[int] = []


@dataclass
class LabelState:
    """Grouping state carried from one row to the next."""

    active_groups: list[str | None]
    unit: str | None = None

    @classmethod
    def for_columns(cls, label_column_count: int) -> LabelState:
        return cls(active_groups=[None] * label_column_count)

    def observe_row(self, row: list[Cell | None], row_index: int) -> list[str | None]:
        """Update groups from *row*; return the row's own value per label column."""
        depth = len(self.active_groups)
        own: list[str | None] = [None] * depth

        for col in range(depth):
            cell = row[col] if col < len(row) else None
            if cell is None or not cell.text:
                continue
            if cell.origin_row == row_index:
                for deeper in range(col + 1, depth):
                    self.active_groups[deeper] = None
                own[col] = cell.text
                self.active_groups[col] = cell.text if cell.rowspan > 1 else None
            elif cell.rowspan > 1:
                self.active_groups[col] = cell.text

        return own

    def set_unit(self, unit: str) -> None:
        self.unit = unit

    def compose(self, own: list[str | None], separator: str, ordinal: int) -> str:
        """Join own values (falling back to active groups) into one label."""
        parts: list[str] = []
        for col, value in enumerate(own):
            part = value or self.active_groups[col]
            if part and (not parts or parts[-1] != part):
                parts.append(part)

        label = separator.join(parts) if parts else f"Row {ordinal}"
        if self.unit and self.unit.lower() not in label.lower():
            label = f"{label} {self.unit}"
        return label


def detect_unit_context(
    row: list[Cell | None],
    label_column_count: int,
) -> str | None:
    """Return the unit caption carried by *row*, if it is a unit row.

    Only data-column cells are considered.  They qualify when none is
    numeric, every non-empty one has the same text, and at least one is a
    body cell (rows made purely of header-tagged cells are column headers).
    """
    cells = [cell for cell in row[label_column_count:] if cell is not None and cell.text]
    if not cells:
        return None
    if any(cell.numeric.is_numeric for cell in cells):
        return None
    if all(cell.is_header_tag for cell in cells):
        return None

    texts = {cell.text for cell in cells}
    if len(texts) != 1:
        return None
    text = texts.pop()
    return text if _HAS_LETTER.search(text) else None


def find_unit_rows(
    grid: Grid,
    row_types: list[RowType],
    label_column_count: int,
) -> dict[int, str]:
    """Map each unit row to its caption.

    Only header rows after the first one qualify; a caption sits between
    the column headers and the data it qualifies.
    """
    unit_rows: dict[int, str] = {}
    seen_header = False
    for row_index, (row, row_type) in enumerate(zip(grid, row_types)):
        if row_type != RowType.HEADER:
            continue
        if seen_header:
            unit = detect_unit_context(row, label_column_count)
            if unit is not None:
                unit_rows[row_index] = unit
        seen_header = True
    return unit_rows


def build_row_labels(
    grid: Grid,
    row_types: list[RowType],
    label_column_count: int,
    config: TableParserConfig | None = None,
) -> LabelResult:
    """Build the label of every data row, in grid order."""
    config = config or TableParserConfig()
    state = LabelState.for_columns(label_column_count)
    unit_rows = find_unit_rows(grid, row_types, label_column_count)
    labels: list[str] = []
    row_indices: list[int] = []

    for row_index, (row, row_type) in enumerate(zip(grid, row_types)):
        if row_index in unit_rows:
            state.set_unit(unit_rows[row_index])
            logger.debug("Row %d sets unit context", row_index)
            continue
        if row_type != RowType.DATA:
            continue

        own = state.observe_row(row, row_index)
        labels.append(state.compose(own, config.label_separator, len(labels) + 1))
        row_indices.append(row_index)

    return LabelResult(
        labels=labels,
        row_indices=row_indices,
        unit_context=state.unit,
        unit_rows=sorted(unit_rows),
    )
