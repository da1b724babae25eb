"""Shared test fixtures for ingestkit-tables tests."""

from __future__ import annotations

import pytest

from ingestkit_tables.config import TableParserConfig
from ingestkit_tables.grid import build_grid
from ingestkit_tables.parser import parse_table
from ingestkit_tables.sources import InMemoryTableSource, PlainTextExtractor


def th(text: str, **attrs) -> tuple[str, dict]:
    """Header-tagged cell spec for :class:`InMemoryTableSource`."""
    return (text, {"header": True, **attrs})


def td(text: str, **attrs) -> tuple[str, dict]:
    return (text, attrs)


@pytest.fixture
def default_config() -> TableParserConfig:
    """Return a default TableParserConfig."""
    return TableParserConfig()


@pytest.fixture
def make_grid():
    """Factory fixture: build a resolved grid from nested cell specs."""

    def _build(rows, header_rows: int = 0):
        source = InMemoryTableSource(rows, header_rows)
        return build_grid(source.iter_rows(), PlainTextExtractor())

    return _build


@pytest.fixture
def parse_rows():
    """Factory fixture: run the full pipeline over nested cell specs."""

    def _parse(rows, header_rows: int = 0, config: TableParserConfig | None = None):
        return parse_table(InMemoryTableSource(rows, header_rows), config=config)

    return _parse


@pytest.fixture
def revenue_rows() -> list:
    """Year / Revenue / Cost table with one plain-text header row."""
    return [
        ["Year", "Revenue", "Cost"],
        ["2020", "100", "50"],
        ["2021", "120", "60"],
    ]


@pytest.fixture
def grouped_sales_rows() -> list:
    """Two-level column headers over a spanning "Sales" cell."""
    return [
        [th("Region", rowspan=2), th("Sales", colspan=2)],
        [th("2020"), th("2021")],
        [td("North"), td("10"), td("20")],
        [td("South"), td("30"), td("40")],
    ]


@pytest.fixture
def unit_row_rows() -> list:
    """A "(in millions)" caption row between the header and the data."""
    return [
        [th("Item"), th("Q1"), th("Q2")],
        [td(""), td("(in millions)", colspan=2)],
        [td("Widgets"), td("10"), td("20")],
        [td("Gadgets (in millions)"), td("30"), td("40")],
    ]


@pytest.fixture
def sample_html() -> str:
    """A document with one chartable table and one single-row table."""
    return """<html><body>
<table id="populations">
  <thead>
    <tr><th>Country</th><th>1990</th><th>2000</th></tr>
  </thead>
  <tbody>
    <tr><td>France<sup>[1]</sup></td><td>56.7</td><td>60.9</td></tr>
    <tr><td>Spain <span class="sr-only">(kingdom)</span></td><td>38.9</td><td>40.6</td></tr>
  </tbody>
</table>
<table><tr><td>only row</td></tr></table>
</body></html>"""


@pytest.fixture
def ranked(parse_rows):
    """Parsed table with a rank column, a name column and two measures."""
    return parse_rows([
        ["Rank", "Name", "Points", "Games"],
        ["1", "Ann", "90", "10"],
        ["2", "Bob", "85", "12"],
        ["3", "Cid", "70", "9"],
    ])
