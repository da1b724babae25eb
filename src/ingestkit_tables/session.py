"""Caller-owned chart session: label-column choice and view orientation.

A :class:`ChartSession` is an immutable value.  Every operation returns a
new session, so callers can keep several views of the same table at once.
"""

from __future__ import annotations

import logging
from enum import Enum

import pandas as pd
from pydantic import BaseModel

from ingestkit_tables.config import TableParserConfig
from ingestkit_tables.models import ParsedTable, Series
from ingestkit_tables.series import reselect_label_column

logger = logging.getLogger("ingestkit_tables")


class ViewMode(str, Enum):
    """Which axis supplies the series."""

    COLUMNS = "columns"
    ROWS = "rows"


class ChartView(BaseModel):
    """Series and axis labels for one orientation of a table."""

    series: list[Series]
    labels: list[str]
    display_labels: list[str]
    series_label: str
    axis_label: str
    title: str = ""


class ChartSession(BaseModel):
    parsed: ParsedTable
    view_mode: ViewMode = ViewMode.COLUMNS
    label_column_index: int = 0


def start_session(
    parsed: ParsedTable,
    config: TableParserConfig | None = None,
) -> ChartSession:
    """Open a session on the default label column in columns mode.

    The series are rebuilt around the default label column, so the session
    starts from the same state as an explicit selection of that column.
    """
    index = parsed.label_column_index
    if parsed.all_columns:
        parsed = reselect_label_column(parsed, index, config)
    return ChartSession(parsed=parsed, view_mode=ViewMode.COLUMNS, label_column_index=index)


def select_label_column(
    session: ChartSession,
    index: int,
    config: TableParserConfig | None = None,
) -> ChartSession:
    """Return a session whose row labels come from column *index*.

    An index outside the table leaves the session unchanged.
    """
    if not 0 <= index < len(session.parsed.all_columns):
        logger.warning(
            "Ignoring label column %d; table has %d column(s).",
            index,
            len(session.parsed.all_columns),
        )
        return session
    parsed = reselect_label_column(session.parsed, index, config)
    return session.model_copy(update={"parsed": parsed, "label_column_index": index})


def set_view_mode(session: ChartSession, mode: ViewMode | str) -> ChartSession:
    return session.model_copy(update={"view_mode": ViewMode(mode)})


def current_view(session: ChartSession) -> ChartView:
    """Project the session's table into the active orientation.

    In columns mode the series are the columns and the axis runs over the
    rows; the title is the common header text.  In rows mode the series are
    the rows and the axis runs over the columns; the title is the common
    label prefix, or failing that the common suffix.
    """
    parsed = session.parsed
    if session.view_mode == ViewMode.COLUMNS:
        return ChartView(
            series=parsed.series_by_column,
            labels=parsed.row_labels,
            display_labels=parsed.row_display_names,
            series_label="Columns",
            axis_label="Rows",
            title=parsed.column_metadata.title,
        )
    return ChartView(
        series=parsed.series_by_row,
        labels=parsed.data_column_headers,
        display_labels=parsed.column_display_names,
        series_label="Rows",
        axis_label="Columns",
        title=(parsed.row_metadata.prefix or parsed.row_metadata.suffix).strip(),
    )


def view_to_dataframe(view: ChartView) -> pd.DataFrame:
    """One column per series, indexed by the axis display labels.

    Missing values stay NaN.
    """
    index = pd.Index(view.display_labels, name=view.axis_label)
    df = pd.DataFrame(
        {position: series.data for position, series in enumerate(view.series)},
        index=index,
    )
    df.columns = pd.Index([series.display_name for series in view.series], name=view.series_label)
    return df
