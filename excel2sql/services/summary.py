from __future__ import annotations

from ..models.processing_result import RunSummary, TableResult

"""Output line rendering for the CLI.

Per table:  ``Import <n> rows for <table>`` or ``ERROR:> <message>``
Per run:    ``SUMMARY tables=<n> success=<s> failed=<f> rows=<r> elapsed_sec=<e> throughput_rps=<t>``
"""

ERROR_PREFIX = "ERROR:> "


def render_error_line(message: str) -> str:
    return f"{ERROR_PREFIX}{message}"


def render_table_line(result: TableResult) -> str:
    if result.ok:
        return f"Import {result.inserted_rows} rows for {result.table_name}"
    return render_error_line(result.error or "unknown error")


def _format_number(value: float) -> str:
    # Handle very small numbers and integer values appropriately
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(summary: RunSummary) -> str:
    """Render the SUMMARY line.

    >>> render_summary_line(RunSummary(2, 0, 1000, 2.0, 500.0))
    'SUMMARY tables=2 success=2 failed=0 rows=1000 elapsed_sec=2 throughput_rps=500'
    """
    return (
        f"SUMMARY tables={summary.total_tables} "
        f"success={summary.success_tables} "
        f"failed={summary.failed_tables} "
        f"rows={summary.total_inserted_rows} "
        f"elapsed_sec={_format_number(summary.elapsed_seconds)} "
        f"throughput_rps={_format_number(summary.throughput_rows_per_sec)}"
    )
