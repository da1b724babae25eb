"""Error codes and structured error model for the ingestkit-tables package.

The inference engine itself never raises for malformed input; these codes
are attached by :class:`~ingestkit_tables.router.TableRouter` so callers can
decide how to surface tables that cannot be charted.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes for table-structure inference.

    Values equal their names so they are stable strings suitable for
    metrics and alerting.  ``E_`` prefix = fatal, ``W_`` prefix = warning.
    """

    # Parse
    E_PARSE_EMPTY = "E_PARSE_EMPTY"
    E_PARSE_CORRUPT = "E_PARSE_CORRUPT"

    # Warnings (non-fatal)
    W_TABLE_TOO_SMALL = "W_TABLE_TOO_SMALL"
    W_NO_CHARTABLE_DATA = "W_NO_CHARTABLE_DATA"
    W_GRID_HOLES = "W_GRID_HOLES"


class IngestError(BaseModel):
    """Structured error with code, message, and table location context.

    ``table_index`` is the zero-based position of the ``<table>`` in the
    source document, or ``None`` for document-level errors.
    """

    code: ErrorCode
    message: str
    stage: str | None = None
    recoverable: bool = False
    table_index: int | None = None
