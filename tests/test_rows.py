"""Unit tests for ingestkit_tables.rows -- row classification."""

from __future__ import annotations

import pytest

from conftest import td, th
from ingestkit_tables.config import TableParserConfig
from ingestkit_tables.models import RowType
from ingestkit_tables.rows import (
    ROW_RULES,
    analyze_row,
    classify_row,
    classify_rows,
    derive_header_row_count,
)

H, D, E = RowType.HEADER, RowType.DATA, RowType.EMPTY


@pytest.mark.unit
class TestAnalyzeRow:
    def test_distinct_cells_collapse_spans(self, make_grid):
        grid = make_grid([[td("Banner", colspan=3), td("x")]])
        stats = analyze_row(grid[0])
        assert stats.length == 4
        assert stats.distinct_cell_count == 2
        assert stats.has_spanning_cell is True

    def test_years_not_counted(self, make_grid):
        grid = make_grid([["2020", "5", "6"]])
        stats = analyze_row(grid[0])
        assert stats.numeric_count == 2
        assert stats.numeric_ratio == pytest.approx(2 / 3)

    def test_holes_count_toward_length(self):
        stats = analyze_row([None, None])
        assert stats.length == 2
        assert stats.has_text is False
        assert stats.all_header_tags is False


@pytest.mark.unit
class TestClassifyRow:
    def _classify(self, make_grid, row, index=0, total=10):
        grid = make_grid([row])
        return classify_row(index, grid[0], total, TableParserConfig())

    def test_all_header_tags_regardless_of_numbers(self, make_grid):
        row = [th("1"), th("2"), th("3"), th("4"), th("5")]
        assert self._classify(make_grid, row, index=8) == (H, "all_header_tags")

    def test_numeric_majority(self, make_grid):
        assert self._classify(make_grid, ["a", "1", "2"]) == (D, "numeric_majority")

    def test_single_number_is_not_majority(self, make_grid):
        row_type, rule = self._classify(make_grid, ["1"], index=8)
        assert rule != "numeric_majority"
        assert row_type == D

    def test_spanning_text_row(self, make_grid):
        row = [td("Group", rowspan=2), td("a"), td("b"), td("c")]
        assert self._classify(make_grid, row, index=6) == (H, "spanning_text_row")

    def test_banner_row_needs_more_than_two_columns(self, make_grid):
        # Raise the data-row minimum so a numeric banner is not caught by
        # the numeric-majority rule first.
        config = TableParserConfig(data_row_min_numeric_count=5)
        wide = make_grid([[td("10", colspan=3)]])[0]
        assert classify_row(6, wide, 10, config) == (H, "banner_row")
        narrow = make_grid([[td("10", colspan=2)]])[0]
        assert classify_row(6, narrow, 10, config) == (D, "some_numbers")

    def test_banner_counts_holes_toward_row_length(self, make_grid):
        note = make_grid([["Note"]])[0][0]
        row = [note, None, None]
        assert classify_row(6, row, 10, TableParserConfig()) == (H, "banner_row")
        assert classify_row(6, [note, None], 10, TableParserConfig()) == (D, "fallthrough")

    def test_textual_top_half(self, make_grid):
        assert self._classify(make_grid, ["a", "b"], index=4) == (H, "textual_top_half")

    def test_text_in_bottom_half_falls_through(self, make_grid):
        assert self._classify(make_grid, ["a", "b"], index=6) == (D, "fallthrough")

    def test_some_numbers(self, make_grid):
        assert self._classify(make_grid, ["a", "b", "5"], index=1) == (D, "some_numbers")

    def test_near_top(self, make_grid):
        row = ["a", "b", "c", "d", "5"]
        assert self._classify(make_grid, row, index=2, total=4) == (H, "near_top")
        assert self._classify(make_grid, row, index=3, total=4) == (D, "fallthrough")

    def test_no_text_is_empty(self, make_grid):
        assert self._classify(make_grid, [th(""), th("")]) == (E, "no_text")

    def test_rule_order(self):
        assert [rule.name for rule in ROW_RULES] == [
            "all_header_tags",
            "numeric_majority",
            "spanning_text_row",
            "banner_row",
            "textual_top_half",
            "some_numbers",
            "near_top",
        ]


@pytest.mark.unit
class TestHeaderRowCount:
    def test_leading_run(self):
        assert derive_header_row_count([H, H, D, D]) == 2

    def test_empty_rows_transparent(self):
        assert derive_header_row_count([H, E, H, D]) == 3

    def test_stops_at_first_data_after_header(self):
        assert derive_header_row_count([H, D, H, D]) == 1

    def test_data_before_header_skipped(self):
        assert derive_header_row_count([D, H, D]) == 2

    def test_no_header(self):
        assert derive_header_row_count([D, D]) == 0


@pytest.mark.unit
class TestClassifyRows:
    def test_simple_table(self, make_grid, revenue_rows):
        result = classify_rows(make_grid(revenue_rows))
        assert result.row_types == [H, D, D]
        assert result.header_row_count == 1
        assert result.header_rows == [0]
        assert result.hinted is False

    def test_header_hint_overrides(self, make_grid):
        grid = make_grid([["Name", "1", "2"], ["a", "3", "4"], ["b", "5", "6"]])
        result = classify_rows(grid, header_hint=1)
        assert result.header_row_count == 1
        assert result.row_types[0] == H
        assert result.header_rows == [0]
        assert result.hinted is True

    def test_header_hint_keeps_empty_rows(self, make_grid):
        grid = make_grid([["Name", "Value"], ["", ""], ["a", "3"]])
        result = classify_rows(grid, header_hint=2)
        assert result.row_types[:2] == [H, E]
        assert result.header_rows == [0]

    def test_header_hint_clamped_to_row_count(self, make_grid):
        result = classify_rows(make_grid([["a", "b"]]), header_hint=5)
        assert result.header_row_count == 1

    def test_empty_grid(self):
        result = classify_rows([])
        assert result.row_types == []
        assert result.header_row_count == 0
