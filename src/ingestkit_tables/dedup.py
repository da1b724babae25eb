"""Deduplication of column headers and row labels.

Text shared by every header (or every label) is factored out into table
metadata so each item can be shown with a compact display name.  Neither
function ever changes the number of items.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from ingestkit_tables.models import HeaderDedup, LabelDedup

DEFAULT_GENERIC_TERMS = ("dollars", "units", "number", "count", "value", "values")

_PREFIX_AT_SEPARATOR = re.compile(r"^(.+[\s\-:>])", re.DOTALL)
_SUFFIX_AT_SEPARATOR = re.compile(r"([\s\-:>].+)$", re.DOTALL)


def deduplicate_headers(
    headers: list[str],
    separator: str = " > ",
    generic_terms: Iterable[str] = DEFAULT_GENERIC_TERMS,
) -> HeaderDedup:
    """Split hierarchical headers and keep only the positions that differ.

    A position where every header has the same non-empty part is common;
    common parts that are not generic terms form the title.  Every other
    position with some text is unique, and each display name is
    the join of its unique-position parts (or the full header when it has
    none).
    """
    if not headers:
        return HeaderDedup(display_names=[])
    if len(headers) == 1:
        return HeaderDedup(display_names=[headers[0]])

    split = [[part.strip() for part in header.split(separator)] for header in headers]
    max_parts = max(len(parts) for parts in split)

    common: list[str] = []
    unique_positions: list[int] = []
    for pos in range(max_parts):
        values = [parts[pos] if pos < len(parts) else "" for parts in split]
        distinct = {value for value in values if value}
        if len(distinct) == 1 and all(value == values[0] for value in values):
            common.append(values[0])
        elif distinct:
            unique_positions.append(pos)

    display_names: list[str] = []
    for parts in split:
        unique_parts = [parts[pos] for pos in unique_positions if pos < len(parts) and parts[pos]]
        display_names.append(separator.join(unique_parts) or separator.join(parts))

    generic = {term.lower() for term in generic_terms}
    title = " - ".join(part for part in common if part.lower() not in generic)

    return HeaderDedup(
        display_names=display_names,
        common_parts=common,
        title=title,
        unique_positions=unique_positions,
    )


def _common_prefix(values: list[str]) -> str:
    first = values[0]
    length = 0
    for index, char in enumerate(first):
        if any(index >= len(value) or value[index] != char for value in values[1:]):
            break
        length = index + 1
    return first[:length]


def deduplicate_labels(labels: list[str]) -> LabelDedup:
    """Strip the word-aligned prefix and suffix shared by every label.

    The literal common prefix is cut back to end at the last separator
    (space, hyphen, colon or ``>``); the common suffix is cut to start at
    the first one.  A label that would become empty keeps its full text.
    """
    if len(labels) < 2:
        return LabelDedup(display_names=list(labels))

    raw_prefix = _common_prefix(labels)
    match = _PREFIX_AT_SEPARATOR.match(raw_prefix)
    prefix = match.group(1) if match else ""

    raw_suffix = _common_prefix([label[::-1] for label in labels])[::-1]
    match = _SUFFIX_AT_SEPARATOR.search(raw_suffix)
    suffix = match.group(1) if match else ""

    display_names: list[str] = []
    for label in labels:
        display = label[len(prefix):]
        if suffix:
            display = display[: max(len(display) - len(suffix), 0)]
        display_names.append(display.strip() or label)

    return LabelDedup(display_names=display_names, prefix=prefix, suffix=suffix)
