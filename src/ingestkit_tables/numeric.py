"""Cell text normalization and numeric parsing.

``parse_numeric`` reads the formatting conventions found in hand-authored
tables: currency symbols, thousands separators, accounting negatives,
percent signs and attached footnote glyphs.  It never raises; unparsable
text yields a record whose value is NaN.
"""

from __future__ import annotations

import math
import re

from ingestkit_tables.models import Cell, NumericRecord

_NOT_NUMERIC_TOKENS = {"", "-", "–", "—", "n/a"}

_CURRENCY = re.compile(r"[$€£¥₹₽₩]")
_WHITESPACE = re.compile(r"\s+")
_FOOTNOTE_GLYPHS = re.compile(r"(?<=[\d.%)])[A-Za-z*†‡§¶]+$")
_PARENTHESIZED = re.compile(r"^\((.*)\)$")
_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_YEAR = re.compile(r"^(?:19|20)\d{2}$")


def normalize_text(text: str | None) -> str:
    """Collapse runs of whitespace and trim."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def parse_numeric(text: str | None) -> NumericRecord:
    """Parse display text into a :class:`NumericRecord`.

    Rules, in order:

    1. Empty text, ``-`` (or a typographic dash) and ``N/A`` are not numeric.
    2. Currency symbols, thousands separators and whitespace are dropped,
       then trailing footnote glyphs (so ``"12.3 e"`` reads as 12.3).  A
       single trailing ``%`` is removed and a parenthesized value becomes
       negative.
    3. The remainder must be a plain decimal literal with a finite value.

    ``is_year`` and ``is_percentage`` are read from the original text.
    """
    original = (text or "").strip()
    if original.lower() in _NOT_NUMERIC_TOKENS:
        return NumericRecord(original=original)

    cleaned = _CURRENCY.sub("", original)
    cleaned = cleaned.replace(",", "")
    cleaned = _WHITESPACE.sub("", cleaned)
    cleaned = _FOOTNOTE_GLYPHS.sub("", cleaned)
    cleaned = cleaned.replace("−", "-")

    if cleaned.endswith("%"):
        cleaned = cleaned[:-1]
    match = _PARENTHESIZED.match(cleaned)
    if match:
        cleaned = "-" + match.group(1)
        if cleaned.endswith("%"):
            cleaned = cleaned[:-1]

    value = float("nan")
    if _NUMBER.match(cleaned):
        value = float(cleaned)

    is_numeric = math.isfinite(value)
    return NumericRecord(
        value=value if is_numeric else float("nan"),
        is_numeric=is_numeric,
        is_year=bool(_YEAR.match(original)),
        is_percentage="%" in original,
        original=original,
    )


def is_countable_numeric(cell: Cell | None) -> bool:
    """True for numeric cells that are not year-like.

    Years look numeric but behave as categorical labels, so every ratio
    statistic in the pipeline excludes them.
    """
    return cell is not None and cell.numeric.is_numeric and not cell.numeric.is_year


def has_meaningful_text(cell: Cell | None) -> bool:
    return cell is not None and bool(cell.text)
