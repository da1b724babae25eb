"""Unit tests for ingestkit_tables.grid -- span resolution."""

from __future__ import annotations

import pytest

from conftest import td
from ingestkit_tables.config import TableParserConfig
from ingestkit_tables.grid import build_grid, cell_at, column_count, count_holes
from ingestkit_tables.models import RawCell
from ingestkit_tables.sources import PlainTextExtractor


@pytest.mark.unit
class TestSpanIdentity:
    def test_two_by_two_span_shares_one_cell(self, make_grid):
        grid = make_grid([
            [td("A", colspan=2, rowspan=2), td("x")],
            [td("y")],
        ])
        anchor = grid[0][0]
        assert grid[0][1] is anchor
        assert grid[1][0] is anchor
        assert grid[1][1] is anchor
        assert grid[0][2].text == "x"
        assert grid[1][2].text == "y"

    def test_origin_recorded(self, make_grid):
        grid = make_grid([[td("a"), td("b", rowspan=2)], [td("c")]])
        spanned = grid[1][1]
        assert spanned.origin_row == 0
        assert spanned.origin_col == 1
        assert grid[1][0].origin_row == 1

    def test_pending_span_before_physical_cell(self, make_grid):
        grid = make_grid([
            [td("L", rowspan=2), td("1")],
            [td("2")],
        ])
        assert grid[1][0] is grid[0][0]
        assert grid[1][1].text == "2"

    def test_trailing_vertical_span_drained(self, make_grid):
        grid = make_grid([
            [td("a"), td("b", rowspan=3)],
            [td("c")],
            [td("d")],
        ])
        assert [len(row) for row in grid] == [2, 2, 2]
        assert grid[2][1] is grid[0][1]


@pytest.mark.unit
class TestMalformedGeometry:
    def test_rowspan_past_last_row_dropped(self, make_grid):
        grid = make_grid([[td("a", rowspan=5)], [td("b")]])
        assert len(grid) == 2
        assert grid[1][0] is grid[0][0]
        assert grid[1][1].text == "b"

    def test_ragged_rows_leave_holes(self, make_grid):
        grid = make_grid([[td("a"), td("b"), td("c")], [td("d")]])
        assert column_count(grid) == 3
        assert cell_at(grid, 1, 2) is None
        assert cell_at(grid, 7, 0) is None

    def test_span_cursor_skips_occupied_column(self, make_grid):
        grid = make_grid([
            [td("a"), td("b", rowspan=2)],
            [td("c"), td("d")],
        ])
        assert [cell.text for cell in grid[1]] == ["c", "b", "d"]
        # Row 0 is one column short of the widest row.
        assert count_holes(grid) == 1

    def test_unreached_span_leaves_holes(self, make_grid):
        grid = make_grid([
            [td("a"), td("b"), td("c", rowspan=2)],
            [td("d")],
        ])
        # Only a contiguous run of pending spans is drained, so "c" never
        # reaches row 1.
        assert [cell.text for cell in grid[1]] == ["d"]
        assert cell_at(grid, 1, 2) is None
        assert count_holes(grid) == 2

    def test_invalid_spans_read_as_one(self):
        raw = [[RawCell(handle="a", colspan="abc", rowspan=0), RawCell(handle="b", colspan=-2)]]
        grid = build_grid(raw, PlainTextExtractor())
        assert [cell.text for cell in grid[0]] == ["a", "b"]

    def test_colspan_clamped(self):
        config = TableParserConfig(max_colspan=3)
        grid = build_grid([[RawCell(handle="wide", colspan=50)]], PlainTextExtractor(), config)
        assert len(grid[0]) == 3
        assert grid[0][0].colspan == 3

    def test_empty_table(self):
        assert build_grid([], PlainTextExtractor()) == []
        assert column_count([]) == 0


@pytest.mark.unit
class TestCellContents:
    def test_text_normalized_and_parsed(self, make_grid):
        grid = make_grid([[td("  $1,000 \n")]])
        cell = grid[0][0]
        assert cell.text == "$1,000"
        assert cell.numeric.value == 1000

    def test_header_flag(self, make_grid):
        grid = make_grid([[("H", {"header": True}), td("x")]])
        assert grid[0][0].is_header_tag is True
        assert grid[0][1].is_header_tag is False
