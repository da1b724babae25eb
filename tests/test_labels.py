"""Unit tests for ingestkit_tables.labels -- row label composition."""

from __future__ import annotations

import pytest

from conftest import td, th
from ingestkit_tables.config import TableParserConfig
from ingestkit_tables.labels import (
    LabelState,
    build_row_labels,
    detect_unit_context,
    find_unit_rows,
)
from ingestkit_tables.models import RowType

H, D, E = RowType.HEADER, RowType.DATA, RowType.EMPTY


@pytest.mark.unit
class TestGrouping:
    def test_rowspan_group_persists(self, make_grid):
        grid = make_grid([
            [td("Europe", rowspan=2), td("France"), td("1")],
            [td("Spain"), td("2")],
            [td("Asia"), td("Japan"), td("3")],
        ])
        result = build_row_labels(grid, [D, D, D], 2)
        assert result.labels == ["Europe - France", "Europe - Spain", "Asia - Japan"]
        assert result.row_indices == [0, 1, 2]

    def test_new_parent_resets_child_group(self, make_grid):
        grid = make_grid([
            [td("A", rowspan=2), td("g1", rowspan=2), td("x"), td("1")],
            [td("y"), td("2")],
            [td("B"), td(""), td("z"), td("3")],
        ])
        result = build_row_labels(grid, [D, D, D], 3)
        assert result.labels == ["A - g1 - x", "A - g1 - y", "B - z"]

    def test_consecutive_duplicates_skipped(self, make_grid):
        grid = make_grid([[td("Total"), td("Total"), td("9")]])
        assert build_row_labels(grid, [D], 2).labels == ["Total"]

    def test_positional_fallback(self, make_grid):
        grid = make_grid([["", "1"], ["b", "2"]])
        assert build_row_labels(grid, [D, D], 1).labels == ["Row 1", "b"]

    def test_non_data_rows_skipped(self, make_grid):
        grid = make_grid([[th("Name"), th("Q1")], ["a", "1"], ["", ""], ["b", "2"]])
        result = build_row_labels(grid, [H, D, E, D], 1)
        assert result.labels == ["a", "b"]
        assert result.row_indices == [1, 3]

    def test_custom_separator(self, make_grid):
        grid = make_grid([["a", "b", "1"]])
        config = TableParserConfig(label_separator=" / ")
        assert build_row_labels(grid, [D], 2, config).labels == ["a / b"]


@pytest.mark.unit
class TestUnitContext:
    def test_unit_row_appended_once(self, make_grid, unit_row_rows):
        grid = make_grid(unit_row_rows)
        result = build_row_labels(grid, [H, H, D, D], 1)
        assert result.unit_context == "(in millions)"
        assert result.labels == ["Widgets (in millions)", "Gadgets (in millions)"]
        assert result.unit_rows == [1]

    def test_first_header_row_is_never_a_unit_row(self, make_grid):
        grid = make_grid([["", "(in millions)", "(in millions)"], ["a", "1", "2"]])
        assert find_unit_rows(grid, [H, D], 1) == {}
        assert build_row_labels(grid, [H, D], 1).labels == ["a"]

    def test_unit_rows_below_headers(self, make_grid, unit_row_rows):
        grid = make_grid(unit_row_rows)
        assert find_unit_rows(grid, [H, H, D, D], 1) == {1: "(in millions)"}
        assert find_unit_rows(grid, [H, D, D, D], 1) == {}

    def test_unit_not_duplicated_case_insensitive(self):
        state = LabelState.for_columns(1)
        state.set_unit("(USD)")
        assert state.compose(["Price (usd)"], " - ", 1) == "Price (usd)"

    def test_numeric_row_is_not_unit(self, make_grid):
        grid = make_grid([["x", "5", "5"]])
        assert detect_unit_context(grid[0], 1) is None

    def test_header_tagged_row_is_not_unit(self, make_grid):
        grid = make_grid([[th("Item"), th("USD", colspan=2)]])
        assert detect_unit_context(grid[0], 1) is None

    def test_differing_texts_are_not_unit(self, make_grid):
        grid = make_grid([["", "in EUR", "in USD"]])
        assert detect_unit_context(grid[0], 1) is None

    def test_repeated_text_is_unit(self, make_grid):
        grid = make_grid([["", "kg", "", "kg"]])
        assert detect_unit_context(grid[0], 1) == "kg"

    def test_symbol_only_text_is_not_unit(self, make_grid):
        grid = make_grid([["Note", "%", "%"]])
        assert detect_unit_context(grid[0], 1) is None

    def test_label_columns_ignored(self, make_grid):
        grid = make_grid([["kg", "", ""]])
        assert detect_unit_context(grid[0], 1) is None
