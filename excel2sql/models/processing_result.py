from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import NamedTuple

"""Processing result models for the Excel -> MySQL migration tool.

- ImportOutcome: what one successful table import returns
- TableResult: per-table report built at the worker boundary (success or failure)
- RunSummary: totals over a whole run, computed by the entry point for the
  SUMMARY line
"""


class ImportOutcome(NamedTuple):
    rows_imported: int
    table_name: str  # resolved name actually used in SQL


@dataclass(frozen=True)
class TableResult:
    """Outcome of one table's worker."""
    sheet_name: str
    table_name: str  # resolved name, or the sanitized name if resolution never happened
    inserted_rows: int
    elapsed_seconds: float
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RunSummary:
    success_tables: int
    failed_tables: int
    total_inserted_rows: int
    elapsed_seconds: float
    throughput_rows_per_sec: float

    @property
    def total_tables(self) -> int:
        return self.success_tables + self.failed_tables

    @classmethod
    def from_results(cls, results: Sequence[TableResult], elapsed_seconds: float) -> RunSummary:
        success = [r for r in results if r.ok]
        rows = sum(r.inserted_rows for r in success)
        # Calculate throughput (avoid division by zero)
        throughput = rows / elapsed_seconds if elapsed_seconds > 0 else 0.0
        return cls(
            success_tables=len(success),
            failed_tables=len(results) - len(success),
            total_inserted_rows=rows,
            elapsed_seconds=elapsed_seconds,
            throughput_rows_per_sec=throughput,
        )
