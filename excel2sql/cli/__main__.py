from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from dotenv import load_dotenv

from excel2sql.config.loader import ConfigError, load_options
from excel2sql.db.connection import DryRunPool, create_pool
from excel2sql.db.sql import render_value
from excel2sql.errors import ParseError
from excel2sql.excel.reader import parse_workbook
from excel2sql.logging.error_log import ErrorLogBuffer
from excel2sql.logging.init import log_summary, setup_logging
from excel2sql.models.processing_result import RunSummary, TableResult
from excel2sql.models.table import Table
from excel2sql.services.orchestrator import import_all
from excel2sql.services.summary import render_error_line, render_summary_line, render_table_line

"""CLI entrypoint.

Flow:
- Resolve options (flags > .env / environment > config/import.yml)
- Parse the whole workbook (fatal on failure)
- Optionally apply the django-style naming convention
- Import every sheet concurrently and print one line per table
- Print the SUMMARY line and flush the error log
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

INSPECT_SAMPLE_ROWS = 3


def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not an integer: {text}") from e
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0: {text}")
    return value


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="excel2sql", description="Migrate data from an Excel workbook to a MySQL database"
    )
    p.add_argument("-e", "--excel", help="Workbook path")
    p.add_argument("-d", "--database", help="Target database name")
    p.add_argument("-t", "--database-type", dest="database_type", help="Database type (default: mysql)")
    p.add_argument("-H", "--host")
    p.add_argument("-p", "--port", type=int)
    p.add_argument("-U", "--user")
    p.add_argument("-P", "--password")
    p.add_argument(
        "-c", "--clear", action="store_true", default=None, help="Delete existing rows before loading"
    )
    p.add_argument(
        "-s",
        "--skip",
        type=_non_negative_int,
        help="Rows to skip from the top of each sheet; the header row counts as one (default: 0)",
    )
    p.add_argument(
        "--django-style",
        dest="django_style",
        action="store_true",
        default=None,
        help="Use <file>_<sheet> table names and c_ prefixed column names",
    )
    p.add_argument("--config", type=Path, help="YAML config file (default: config/import.yml if present)")
    p.add_argument("--dry-run", dest="dry_run", action="store_true", help="Log statements instead of executing them")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet fields & first rows then exit")
    return p.parse_args(argv)


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env into the environment; existing variables win unless override."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _inspect_data(tables: list[Table]) -> int:
    if not tables:
        print("inspect: no readable sheets")
        return EXIT_SUCCESS_ALL
    for table in tables:
        print(f"SHEET: {table.sheet_name} table={table.name} fields={table.fields}")
        for row in table.rows(1):
            if row.row_number > INSPECT_SAMPLE_ROWS:
                break
            if row.invalid:
                print(f"    row {row.row_number}: {row.error}")
            else:
                print(f"    row {row.row_number}: {[render_value(v) for v in row.values]}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # None のときのみ sys.argv を読む (テストで main([]) を呼べるように)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)

    _load_env_file(Path(".env"))
    try:
        options = load_options(vars(args), config_path=args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        tables = parse_workbook(options.excel)
    except ParseError as e:
        print(render_error_line(str(e)), flush=True)
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(tables)

    if options.django_style:
        for table in tables:
            table.apply_convention()

    mode = "dry-run" if options.dry_run else "live"
    logger.info(f"Importing {len(tables)} sheet(s) from {options.excel} mode={mode}")

    if options.dry_run:
        pool = DryRunPool()
    else:
        pool = create_pool(options.database, pool_size=len(tables))

    def report(result: TableResult) -> None:
        print(render_table_line(result), flush=True)

    error_log = ErrorLogBuffer()
    start = time.perf_counter()
    try:
        results = import_all(options, pool, tables, error_log=error_log, on_result=report)
    finally:
        pool.dispose()
    elapsed = time.perf_counter() - start

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log written to {log_path}")

    summary = RunSummary.from_results(results, elapsed)
    # log_summary adds the "SUMMARY " prefix itself
    log_summary(render_summary_line(summary)[len("SUMMARY "):])

    if summary.failed_tables > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
