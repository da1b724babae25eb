"""Unit tests for ingestkit_tables.models and ingestkit_tables.sources."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ingestkit_tables.models import Cell, ParsedTable, RawCell, Series
from ingestkit_tables.sources import InMemoryTableSource, PlainTextExtractor, to_raw_cell


@pytest.mark.unit
class TestRawCell:
    def test_defaults(self):
        cell = RawCell()
        assert cell.colspan == 1
        assert cell.rowspan == 1
        assert cell.is_header_tag is False

    @pytest.mark.parametrize("value", [0, -3, "x", None, "1.5"])
    def test_invalid_spans_coerced(self, value):
        assert RawCell(colspan=value).colspan == 1

    def test_numeric_string_span(self):
        assert RawCell(rowspan="4").rowspan == 4

    def test_arbitrary_handle(self):
        handle = object()
        assert RawCell(handle=handle).handle is handle


@pytest.mark.unit
class TestCell:
    def test_frozen(self):
        cell = Cell(text="a", origin_row=0, origin_col=0)
        with pytest.raises(ValidationError):
            cell.text = "b"

    def test_is_spanning(self):
        assert Cell(text="a", colspan=2, origin_row=0, origin_col=0).is_spanning is True
        assert Cell(text="a", origin_row=0, origin_col=0).is_spanning is False


@pytest.mark.unit
class TestParsedTable:
    def test_empty_has_no_chartable_data(self):
        assert ParsedTable().has_chartable_data is False

    def test_chartable_with_row_series(self):
        series = Series(name="r", display_name="r", data=[1.0], index=0)
        assert ParsedTable(series_by_row=[series]).has_chartable_data is True


@pytest.mark.unit
class TestInMemorySource:
    def test_cell_specs(self):
        raw = RawCell(handle="z", rowspan=2)
        source = InMemoryTableSource([["a", ("b", {"header": True, "colspan": 2}), raw]])
        cells = source.iter_rows()[0]
        assert cells[0].handle == "a"
        assert cells[1].is_header_tag is True
        assert cells[1].colspan == 2
        assert cells[2] is raw

    def test_header_rows(self):
        assert InMemoryTableSource([], header_rows=2).header_section_size() == 2
        assert InMemoryTableSource([], header_rows=-1).header_section_size() == 0

    def test_to_raw_cell_none(self):
        assert to_raw_cell(None).handle is None

    def test_plain_text_extractor(self):
        extractor = PlainTextExtractor()
        assert extractor.extract_visible_text("x") == "x"
        assert extractor.extract_visible_text(None) == ""
        assert extractor.extract_visible_text(12) == "12"
