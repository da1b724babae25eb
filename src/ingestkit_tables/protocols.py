"""Collaborator protocols for the ingestkit-tables engine.

The engine never inspects a host document directly: rows and span
attributes come from a ``TableSource``, display text from a
``TextExtractor``.  Both protocols are ``@runtime_checkable`` so callers can
optionally verify conformance with ``isinstance`` checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ingestkit_tables.models import RawCell


@runtime_checkable
class TextExtractor(Protocol):
    """Interface for visible-text extraction from a cell handle."""

    def extract_visible_text(self, handle: Any) -> str:
        """Return the text a reader would see for the given cell handle."""
        ...


@runtime_checkable
class TableSource(Protocol):
    """Interface for a table handle exposing rows of raw cells."""

    def iter_rows(self) -> list[list[RawCell]]:
        """Return the physical rows in document order."""
        ...

    def header_section_size(self) -> int:
        """Return the number of rows explicitly designated as headers, or 0."""
        ...
