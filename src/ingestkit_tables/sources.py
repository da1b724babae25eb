"""In-memory table source and plain-text extractor for programmatic callers."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Union

from ingestkit_tables.models import RawCell

CellSpec = Union[str, None, tuple[str, Mapping[str, Any]], RawCell]


class PlainTextExtractor:
    """Treats the cell handle itself as its text."""

    def extract_visible_text(self, handle: Any) -> str:
        if handle is None:
            return ""
        return str(handle)


def to_raw_cell(spec: CellSpec) -> RawCell:
    """Build a :class:`RawCell` from a string, ``(text, attrs)`` pair or cell.

    Recognized attrs: ``header`` (bool), ``colspan``, ``rowspan``.
    """
    if isinstance(spec, RawCell):
        return spec
    if isinstance(spec, tuple):
        text, attrs = spec
        return RawCell(
            handle=text,
            is_header_tag=bool(attrs.get("header", False)),
            colspan=attrs.get("colspan", 1),
            rowspan=attrs.get("rowspan", 1),
        )
    return RawCell(handle=spec)


class InMemoryTableSource:
    """A :class:`TableSource` over nested Python sequences.

    Parameters
    ----------
    rows:
        Physical rows; each cell is a string, a ``(text, attrs)`` pair or a
        :class:`RawCell`.
    header_rows:
        Explicit header-section size, or 0 when the table declares none.
    """

    def __init__(self, rows: Sequence[Sequence[CellSpec]], header_rows: int = 0) -> None:
        self._rows = [[to_raw_cell(spec) for spec in row] for row in rows]
        self._header_rows = max(header_rows, 0)

    def iter_rows(self) -> list[list[RawCell]]:
        return self._rows

    def header_section_size(self) -> int:
        return self._header_rows
