"""HTML table adapter built on BeautifulSoup.

Provides:

- :func:`parse_html_tables`, which turns a document into one
  :class:`HTMLTableSource` per ``<table>`` element;
- :class:`VisibleTextExtractor`, which returns the text a reader would see
  in a cell, honoring markup-level visibility and dropping reference
  clutter.

Only markup is inspected: inline ``style``, the ``hidden`` and
``aria-hidden`` attributes, non-renderable tags and screen-reader-only
class names.  Stylesheets and layout are out of reach.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from ingestkit_tables.config import TableParserConfig
from ingestkit_tables.models import RawCell
from ingestkit_tables.numeric import normalize_text

HTML_PARSER_FEATURES = "lxml"

_NON_RENDERABLE_TAGS = frozenset(
    {"script", "style", "template", "noscript", "head", "title", "meta", "link"}
)
_SCREEN_READER_CLASSES = frozenset(
    {"sr-only", "visually-hidden", "visuallyhidden", "screen-reader-text", "a11y-hidden"}
)
_SECTION_TAGS = ["thead", "tbody", "tfoot"]
_CELL_TAGS = ["td", "th"]


def _classes(tag: Tag) -> list[str]:
    value = tag.get("class") or []
    return value.split() if isinstance(value, str) else list(value)


# ---------------------------------------------------------------------------
# Table source
# ---------------------------------------------------------------------------


class HTMLTableSource:
    """A :class:`TableSource` over one ``<table>`` element.

    Rows are the table's own ``tr`` elements, directly or inside
    ``thead``/``tbody``/``tfoot``; rows of nested tables are not included.
    The header-section size is the number of rows inside ``<thead>``.
    """

    def __init__(self, table: Tag) -> None:
        self.table = table
        self._rows: list[Tag] = []
        self._thead_rows = 0
        for child in table.find_all(["tr", *_SECTION_TAGS], recursive=False):
            if child.name == "tr":
                self._rows.append(child)
                continue
            section_rows = child.find_all("tr", recursive=False)
            self._rows.extend(section_rows)
            if child.name == "thead":
                self._thead_rows += len(section_rows)

    @property
    def row_count(self) -> int:
        return len(self._rows)

    def iter_rows(self) -> list[list[RawCell]]:
        return [
            [
                RawCell(
                    handle=cell,
                    is_header_tag=cell.name == "th",
                    colspan=cell.get("colspan") or 1,
                    rowspan=cell.get("rowspan") or 1,
                )
                for cell in row.find_all(_CELL_TAGS, recursive=False)
            ]
            for row in self._rows
        ]

    def header_section_size(self) -> int:
        return self._thead_rows


def parse_html_tables(html_content: str) -> list[HTMLTableSource]:
    """Return a source for every ``<table>`` in *html_content*, in document order."""
    if not html_content or not html_content.strip():
        return []
    soup = BeautifulSoup(html_content, HTML_PARSER_FEATURES)
    return [HTMLTableSource(table) for table in soup.find_all("table")]


# ---------------------------------------------------------------------------
# Visible text
# ---------------------------------------------------------------------------

_LENGTH = re.compile(r"^(-?\d*\.?\d+)([a-z%]*)$")
_CLIP_RECT = re.compile(r"^rect\((.*)\)$")
_CLIP_PATH_INSET = re.compile(r"^inset\(\s*(50|100)%\s*\)$")
_BRACKET_MARKER = re.compile(
    r"\[\s*(?:\d+|[a-z]|edit|note\s*\d*|citation needed|[*†‡§¶]+)\s*\]", re.IGNORECASE
)
_REFERENCE_SUP = re.compile(r"^(?:\[\s*(?:\d+|[a-z])\s*\]|[*†‡§¶]+)$", re.IGNORECASE)
_TRAILING_PARENTHETICAL = re.compile(r"\s*\(([^()]*)\)$")
_DIGIT_OR_CURRENCY = re.compile(r"[\d$€£¥₹₽₩]")


def parse_style(style: str | None) -> dict[str, str]:
    """Parse an inline ``style`` attribute into lowercase declarations."""
    declarations: dict[str, str] = {}
    if not style:
        return declarations
    for declaration in style.split(";"):
        name, sep, value = declaration.partition(":")
        if sep:
            value = value.replace("!important", "")
            declarations[name.strip().lower()] = value.strip().lower()
    return declarations


def _length_px(value: str | None) -> float | None:
    """Length in pixels; zero in any unit is 0; other units are unknown."""
    if value is None:
        return None
    match = _LENGTH.match(value)
    if not match:
        return None
    number = float(match.group(1))
    if number == 0:
        return 0.0
    return number if match.group(2) in ("", "px") else None


def _is_clipped(style: dict[str, str]) -> bool:
    clip = style.get("clip", "")
    match = _CLIP_RECT.match(clip)
    if match:
        edges = [_length_px(edge) for edge in re.split(r"[\s,]+", match.group(1).strip())]
        if edges and all(edge is not None and edge <= 1 for edge in edges):
            return True
    return bool(_CLIP_PATH_INSET.match(style.get("clip-path", "")))


def _is_collapsed(style: dict[str, str]) -> bool:
    if style.get("overflow") != "hidden":
        return False
    width = _length_px(style.get("width"))
    height = _length_px(style.get("height"))
    if width == 0 or height == 0:
        return True
    return width is not None and height is not None and width <= 1 and height <= 1


def _is_offscreen(style: dict[str, str], threshold: float) -> bool:
    if style.get("position") not in ("absolute", "fixed"):
        return False
    for edge in ("left", "top", "right", "bottom"):
        offset = _length_px(style.get(edge))
        if offset is not None and offset <= -threshold:
            return True
    return False


def _is_transparent(style: dict[str, str]) -> bool:
    try:
        return float(style.get("opacity", "1")) == 0
    except ValueError:
        return False


class VisibleTextExtractor:
    """A :class:`TextExtractor` for BeautifulSoup ``Tag`` cell handles.

    Parameters
    ----------
    config:
        Supplies the parenthetical trimming limits and the off-screen
        threshold.  Uses defaults when *None*.
    """

    def __init__(self, config: TableParserConfig | None = None) -> None:
        self._config = config or TableParserConfig()

    def extract_visible_text(self, handle: Tag | None) -> str:
        if handle is None:
            return ""
        pieces: list[str] = []
        for child in handle.children:
            self._collect(child, pieces)
        return self.clean_text("".join(pieces))

    def is_hidden(self, tag: Tag) -> bool:
        """True when *tag* (and therefore all of its descendants) is not rendered."""
        if tag.name in _NON_RENDERABLE_TAGS:
            return True
        if tag.has_attr("hidden"):
            return True
        if (tag.get("aria-hidden") or "").strip().lower() == "true":
            return True
        if set(_classes(tag)) & _SCREEN_READER_CLASSES:
            return True

        style = parse_style(tag.get("style"))
        if style.get("display") == "none":
            return True
        if style.get("visibility") in ("hidden", "collapse"):
            return True
        return (
            _is_transparent(style)
            or _is_clipped(style)
            or _is_collapsed(style)
            or _is_offscreen(style, self._config.offscreen_threshold_px)
        )

    def clean_text(self, text: str) -> str:
        """Drop bracketed markers and trim short trailing parentheticals."""
        text = normalize_text(_BRACKET_MARKER.sub("", text))
        while True:
            match = _TRAILING_PARENTHETICAL.search(text)
            if not match or not self._is_trimmable(match.group(1)):
                return text
            remainder = text[: match.start()].rstrip()
            if not remainder:
                return text
            text = remainder

    def _is_trimmable(self, inner: str) -> bool:
        inner = inner.strip()
        return (
            len(inner) <= self._config.max_trailing_parenthetical_chars
            and len(inner.split()) <= self._config.max_trailing_parenthetical_words
            and not _DIGIT_OR_CURRENCY.search(inner)
        )

    def _collect(self, node: Tag | NavigableString, pieces: list[str]) -> None:
        # Comments, CDATA and doctypes are strings too, but never rendered.
        if isinstance(node, PreformattedString):
            return
        if isinstance(node, NavigableString):
            pieces.append(str(node))
            return
        if not isinstance(node, Tag) or self.is_hidden(node):
            return
        if node.name == "br":
            pieces.append(" ")
            return
        if node.name == "sup" and self._is_reference_marker(node):
            return
        for child in node.children:
            self._collect(child, pieces)

    def _is_reference_marker(self, tag: Tag) -> bool:
        if "reference" in _classes(tag):
            return True
        if any(link.get("href", "").startswith("#") for link in tag.find_all("a")):
            return True
        return bool(_REFERENCE_SUP.match(tag.get_text().strip()))
