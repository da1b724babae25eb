"""TableRouter -- orchestrator and public API for HTML documents.

Routes every ``<table>`` of a document through the inference pipeline:

1. Compute a deterministic ingest key for the document.
2. Parse the markup into table sources via :func:`parse_html_tables`.
3. Skip tables with fewer rows than ``min_table_rows``.
4. Parse the rest via :class:`TableParser`.
5. Attach non-fatal warnings (no chartable data, grid holes).
6. Assemble and return :class:`ProcessingResult`.

The router never raises for malformed markup; failures are reported as
error codes on the result.
"""

from __future__ import annotations

import hashlib
import logging
import time
import uuid

from ingestkit_tables.config import TableParserConfig
from ingestkit_tables.errors import ErrorCode, IngestError
from ingestkit_tables.grid import count_holes
from ingestkit_tables.html_source import HTMLTableSource, VisibleTextExtractor, parse_html_tables
from ingestkit_tables.models import ProcessingResult, TableResult
from ingestkit_tables.parser import TableParser
from ingestkit_tables.protocols import TextExtractor

logger = logging.getLogger("ingestkit_tables")


def compute_ingest_key(html_content: str, parser_version: str) -> str:
    """SHA-256 over the parser version and the document markup."""
    digest = hashlib.sha256()
    digest.update(parser_version.encode("utf-8"))
    digest.update(b"\x00")
    digest.update(html_content.encode("utf-8"))
    return digest.hexdigest()


class TableRouter:
    """Top-level orchestrator for HTML table inference.

    Parameters
    ----------
    config:
        Pipeline configuration.  Uses defaults when *None*.
    text_extractor:
        Visible-text provider for cell handles.  Defaults to
        :class:`VisibleTextExtractor` built from *config*.
    """

    def __init__(
        self,
        config: TableParserConfig | None = None,
        text_extractor: TextExtractor | None = None,
    ) -> None:
        self._config = config or TableParserConfig()
        self._parser = TableParser(
            text_extractor or VisibleTextExtractor(self._config), self._config
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def can_handle(self, content_type: str) -> bool:
        """Return True for HTML content types (case-insensitive)."""
        return content_type.lower().split(";")[0].strip() in ("text/html", "application/xhtml+xml")

    def process_html(self, html_content: str) -> ProcessingResult:
        """Infer the structure of every table in *html_content*."""
        overall_start = time.monotonic()
        config = self._config
        ingest_key = compute_ingest_key(html_content or "", config.parser_version)
        ingest_run_id = str(uuid.uuid4())

        # ==============================================================
        # Step 1: Parse markup
        # ==============================================================
        try:
            sources = parse_html_tables(html_content)
        except Exception as exc:
            elapsed = time.monotonic() - overall_start
            err = IngestError(
                code=ErrorCode.E_PARSE_CORRUPT,
                message=f"Failed to parse HTML: {exc}",
                stage="parse",
            )
            logger.error(
                "ingestkit_tables | key=%s | code=%s | detail=%s",
                ingest_key[:12],
                err.code.value,
                err.message,
            )
            return ProcessingResult(
                ingest_key=ingest_key,
                ingest_run_id=ingest_run_id,
                parser_version=config.parser_version,
                errors=[ErrorCode.E_PARSE_CORRUPT.value],
                error_details=[err],
                processing_time_seconds=elapsed,
            )

        if not sources:
            elapsed = time.monotonic() - overall_start
            err = IngestError(
                code=ErrorCode.E_PARSE_EMPTY,
                message="Document contains no tables",
                stage="parse",
            )
            return ProcessingResult(
                ingest_key=ingest_key,
                ingest_run_id=ingest_run_id,
                parser_version=config.parser_version,
                errors=[ErrorCode.E_PARSE_EMPTY.value],
                error_details=[err],
                processing_time_seconds=elapsed,
            )

        # ==============================================================
        # Step 2: Parse tables
        # ==============================================================
        tables: list[TableResult] = []
        warnings: list[str] = []
        details: list[IngestError] = []

        for table_index, source in enumerate(sources):
            table_result, table_details = self._process_table(table_index, source)
            tables.append(table_result)
            details.extend(table_details)
            for code in table_result.warnings:
                if code not in warnings:
                    warnings.append(code)

        # ==============================================================
        # Step 3: Assemble result
        # ==============================================================
        parsed = [t for t in tables if t.parsed is not None]
        chartable = [t for t in parsed if t.parsed.has_chartable_data]
        elapsed = time.monotonic() - overall_start

        logger.info(
            "ingestkit_tables | key=%s | tables=%d | parsed=%d | chartable=%d | time=%.3fs",
            ingest_key[:12],
            len(tables),
            len(parsed),
            len(chartable),
            elapsed,
        )

        return ProcessingResult(
            ingest_key=ingest_key,
            ingest_run_id=ingest_run_id,
            parser_version=config.parser_version,
            tables=tables,
            tables_found=len(tables),
            tables_parsed=len(parsed),
            chartable_tables=len(chartable),
            warnings=warnings,
            error_details=details,
            processing_time_seconds=elapsed,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _process_table(
        self, table_index: int, source: HTMLTableSource
    ) -> tuple[TableResult, list[IngestError]]:
        config = self._config

        if source.row_count < config.min_table_rows:
            err = IngestError(
                code=ErrorCode.W_TABLE_TOO_SMALL,
                message=(
                    f"Table has {source.row_count} row(s); "
                    f"at least {config.min_table_rows} required"
                ),
                stage="route",
                recoverable=True,
                table_index=table_index,
            )
            logger.debug("Skipping table %d: %s", table_index, err.message)
            return (
                TableResult(
                    table_index=table_index,
                    row_count=source.row_count,
                    skipped=True,
                    warnings=[err.code.value],
                ),
                [err],
            )

        parsed = self._parser.parse(source)
        details: list[IngestError] = []

        holes = count_holes(parsed.grid)
        if holes:
            details.append(
                IngestError(
                    code=ErrorCode.W_GRID_HOLES,
                    message=f"Span geometry left {holes} empty grid position(s)",
                    stage="grid",
                    recoverable=True,
                    table_index=table_index,
                )
            )
        if not parsed.has_chartable_data:
            details.append(
                IngestError(
                    code=ErrorCode.W_NO_CHARTABLE_DATA,
                    message="Could not find numeric data in this table",
                    stage="series",
                    recoverable=True,
                    table_index=table_index,
                )
            )

        return (
            TableResult(
                table_index=table_index,
                row_count=source.row_count,
                parsed=parsed,
                warnings=[d.code.value for d in details],
            ),
            details,
        )
