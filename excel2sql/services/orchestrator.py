from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from ..db.connection import SqlRunner
from ..db.sql import build_delete_all, build_insert, build_show_tables
from ..errors import Excel2SqlError, TableImportError
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import ImportOptions
from ..models.error_record import (
    ROW_SHAPE_ERROR,
    TABLE_IMPORT_ERROR,
    UNEXPECTED_ERROR,
    ErrorRecord,
)
from ..models.processing_result import ImportOutcome, TableResult
from ..models.table import Table, conventional_table_name

"""Service orchestration for the Excel -> MySQL migration tool.

``import_table`` loads one Table: resolve the target name, check that the
table exists, optionally clear it, then insert the rows one statement at a
time. ``import_all`` runs one worker thread per table and turns whatever each
worker raises into a TableResult, so a failing table never affects another.

There are no transactions: every statement is applied on its own and a table
that fails halfway keeps the rows inserted before the failure.
"""

logger = logging.getLogger(__name__)


def resolve_table_name(options: ImportOptions, table: Table) -> str:
    if options.django_style:
        return conventional_table_name(options.excel, table.name)
    return table.name


def table_exists(table_name: str, pool: SqlRunner) -> None:
    """Fail unless ``SHOW TABLES LIKE`` finds the table.

    Raises:
        TableImportError: the table is missing (code 99), or the query failed
    """
    row = pool.first(build_show_tables(table_name))
    if row is None:
        raise TableImportError.table_missing(table_name)


def import_table(
    options: ImportOptions,
    pool: SqlRunner,
    table: Table,
    error_log: ErrorLogBuffer | None = None,
) -> ImportOutcome:
    """Load every row of ``table`` into its database table.

    Rows that do not match the header shape are logged and skipped; they are
    not counted. The first failing statement aborts this table.

    Returns:
        ImportOutcome with the number of inserted rows and the resolved name

    Raises:
        TableImportError: table missing, clear failed or an insert failed
    """
    table_name = resolve_table_name(options, table)
    table_exists(table_name, pool)

    if options.clear:
        pool.execute(build_delete_all(table_name))
        logger.debug("table=%s cleared", table_name)

    file_name = Path(options.excel).name
    count = 0
    for row in table.rows(options.skip):
        if row.invalid:
            logger.warning("sheet=%s row=%d skipped: %s", table.sheet_name, row.row_number, row.error)
            if error_log is not None:
                error_log.append(
                    ErrorRecord.create(
                        file=file_name,
                        sheet=table.sheet_name,
                        row=row.row_number,
                        error_type=ROW_SHAPE_ERROR,
                        message=row.error or "",
                    )
                )
            continue
        pool.execute(build_insert(table_name, table.fields, row.values))
        count += 1

    logger.debug("table=%s inserted_rows=%d", table_name, count)
    return ImportOutcome(rows_imported=count, table_name=table_name)


def _run_worker(
    options: ImportOptions,
    pool: SqlRunner,
    table: Table,
    error_log: ErrorLogBuffer | None,
) -> TableResult:
    """Worker boundary: never raises, always reports."""
    start = time.perf_counter()
    table_name = resolve_table_name(options, table)
    try:
        outcome = import_table(options, pool, table, error_log)
    except Exception as e:
        error_type = TABLE_IMPORT_ERROR if isinstance(e, Excel2SqlError) else UNEXPECTED_ERROR
        if error_type == UNEXPECTED_ERROR:
            logger.debug("unexpected failure importing %s", table_name, exc_info=True)
        if error_log is not None:
            error_log.append(
                ErrorRecord.create(
                    file=Path(options.excel).name,
                    sheet=table.sheet_name,
                    row=-1,
                    error_type=error_type,
                    message=str(e),
                )
            )
        return TableResult(
            sheet_name=table.sheet_name,
            table_name=table_name,
            inserted_rows=0,
            elapsed_seconds=time.perf_counter() - start,
            error=str(e),
        )
    return TableResult(
        sheet_name=table.sheet_name,
        table_name=outcome.table_name,
        inserted_rows=outcome.rows_imported,
        elapsed_seconds=time.perf_counter() - start,
    )


def import_all(
    options: ImportOptions,
    pool: SqlRunner,
    tables: Sequence[Table],
    error_log: ErrorLogBuffer | None = None,
    on_result: Callable[[TableResult], None] | None = None,
) -> list[TableResult]:
    """Import every table concurrently, one worker thread per table.

    Args:
        options: Shared, read-only run options
        pool: Shared connection pool
        tables: Parsed tables; each is handed to exactly one worker
        error_log: Optional buffer for row/table error records
        on_result: Called in the calling thread as each table finishes
            (completion order, not sheet order)

    Returns:
        One TableResult per table, in sheet order
    """
    if not tables:
        return []

    results: list[TableResult | None] = [None] * len(tables)
    with ThreadPoolExecutor(max_workers=len(tables), thread_name_prefix="import") as executor:
        futures = {
            executor.submit(_run_worker, options, pool, table, error_log): idx
            for idx, table in enumerate(tables)
        }
        for future in as_completed(futures):
            result = future.result()
            results[futures[future]] = result
            if on_result is not None:
                on_result(result)
    return [r for r in results if r is not None]
