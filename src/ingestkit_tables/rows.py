"""Row classifier: labels each grid row as empty, header or data.

Decision logic is an ordered list of named rules evaluated top to bottom;
the first rule that matches decides the row type.  Thresholds live in
:class:`~ingestkit_tables.config.TableParserConfig`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import NamedTuple

from ingestkit_tables.config import TableParserConfig
from ingestkit_tables.models import Cell, Grid, RowClassification, RowStats, RowType
from ingestkit_tables.numeric import has_meaningful_text, is_countable_numeric

logger = logging.getLogger("ingestkit_tables")


class RowContext(NamedTuple):
    """Everything a row rule may look at."""

    stats: RowStats
    row_index: int
    total_rows: int
    config: TableParserConfig


class RowRule(NamedTuple):
    name: str
    matches: Callable[[RowContext], bool]
    row_type: RowType


def _all_header_tags(ctx: RowContext) -> bool:
    return ctx.stats.all_header_tags


def _numeric_majority(ctx: RowContext) -> bool:
    cfg = ctx.config
    return (
        ctx.stats.numeric_ratio > cfg.data_row_numeric_ratio
        and ctx.stats.numeric_count >= cfg.data_row_min_numeric_count
    )


def _spanning_text_row(ctx: RowContext) -> bool:
    return (
        ctx.stats.has_spanning_cell
        and ctx.stats.numeric_ratio < ctx.config.spanning_header_max_numeric_ratio
    )


def _banner_row(ctx: RowContext) -> bool:
    return (
        ctx.stats.distinct_cell_count == 1
        and ctx.stats.length > ctx.config.banner_min_column_span
    )


def _textual_top_half(ctx: RowContext) -> bool:
    return ctx.stats.numeric_ratio == 0 and ctx.row_index < ctx.total_rows / 2


def _some_numbers(ctx: RowContext) -> bool:
    return ctx.stats.numeric_ratio > ctx.config.weak_data_row_numeric_ratio


def _near_top(ctx: RowContext) -> bool:
    return ctx.row_index < ctx.config.early_header_row_limit


ROW_RULES: list[RowRule] = [
    RowRule("all_header_tags", _all_header_tags, RowType.HEADER),
    RowRule("numeric_majority", _numeric_majority, RowType.DATA),
    RowRule("spanning_text_row", _spanning_text_row, RowType.HEADER),
    RowRule("banner_row", _banner_row, RowType.HEADER),
    RowRule("textual_top_half", _textual_top_half, RowType.HEADER),
    RowRule("some_numbers", _some_numbers, RowType.DATA),
    RowRule("near_top", _near_top, RowType.HEADER),
]
"""Ordered, first-match-wins.  Rows matching none of the rules are data."""


def analyze_row(row: list[Cell | None]) -> RowStats:
    """Compute the statistics the row rules depend on.

    Holes count toward the row length but contribute nothing else.
    Spanning cells repeated across the row count once in
    ``distinct_cell_count``.
    """
    numeric_count = 0
    header_count = 0
    has_spanning = False
    has_text = False
    seen: set[int] = set()

    for cell in row:
        if cell is None:
            continue
        seen.add(id(cell))
        if is_countable_numeric(cell):
            numeric_count += 1
        if cell.is_header_tag:
            header_count += 1
        if cell.is_spanning:
            has_spanning = True
        if has_meaningful_text(cell):
            has_text = True

    length = len(row)
    return RowStats(
        length=length,
        numeric_count=numeric_count,
        numeric_ratio=numeric_count / length if length else 0.0,
        all_header_tags=length > 0 and header_count == length,
        has_spanning_cell=has_spanning,
        distinct_cell_count=len(seen),
        has_text=has_text,
    )


def classify_row(
    row_index: int,
    row: list[Cell | None],
    total_rows: int,
    config: TableParserConfig,
) -> tuple[RowType, str]:
    """Classify a single row; return ``(row_type, matched_rule_name)``."""
    stats = analyze_row(row)
    if not stats.has_text:
        return RowType.EMPTY, "no_text"

    ctx = RowContext(stats, row_index, total_rows, config)
    for rule in ROW_RULES:
        if rule.matches(ctx):
            return rule.row_type, rule.name
    return RowType.DATA, "fallthrough"


def derive_header_row_count(row_types: list[RowType]) -> int:
    """One past the last header row of the leading header run.

    Empty rows are transparent, and data rows before the first header do
    not end the scan.
    """
    last_header = -1
    for index, row_type in enumerate(row_types):
        if row_type == RowType.HEADER:
            last_header = index
        elif row_type == RowType.DATA and last_header >= 0:
            break
    return last_header + 1


def classify_rows(
    grid: Grid,
    header_hint: int = 0,
    config: TableParserConfig | None = None,
) -> RowClassification:
    """Classify every row and derive the header/data boundary.

    A positive *header_hint* (the source's explicit header-section size)
    overrides the derived count; non-empty rows inside that band become
    header rows.
    """
    config = config or TableParserConfig()
    total = len(grid)
    row_types: list[RowType] = []

    for index, row in enumerate(grid):
        row_type, rule = classify_row(index, row, total, config)
        row_types.append(row_type)
        logger.debug("Row %d classified as %s by rule %s", index, row_type.value, rule)

    hinted = header_hint > 0
    if hinted:
        header_row_count = min(header_hint, total)
        for index in range(header_row_count):
            if row_types[index] != RowType.EMPTY:
                row_types[index] = RowType.HEADER
    else:
        header_row_count = derive_header_row_count(row_types)

    header_rows = [
        index
        for index in range(header_row_count)
        if row_types[index] == RowType.HEADER
    ]

    return RowClassification(
        row_types=row_types,
        header_row_count=header_row_count,
        header_rows=header_rows,
        hinted=hinted,
    )
