from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""One line of the structured error log.

A record is written for every row skipped because of its shape and for every
table whose import failed. ``row`` is the 0-based index within the sheet
(header = 0); table-level failures use ``-1`` since no single row is to blame.
"""

__all__ = [
    "ErrorRecord",
    "ROW_SHAPE_ERROR",
    "TABLE_IMPORT_ERROR",
    "UNEXPECTED_ERROR",
]

ROW_SHAPE_ERROR = "ROW_SHAPE_ERROR"
TABLE_IMPORT_ERROR = "TABLE_IMPORT_ERROR"
UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


def _utc_timestamp() -> str:
    # ISO8601 with a Z suffix instead of +00:00
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class ErrorRecord:
    timestamp: str
    file: str  # workbook file name, no directory
    sheet: str
    row: int
    error_type: str  # one of the *_ERROR constants above
    message: str

    @classmethod
    def create(cls, file: str, sheet: str, row: int, error_type: str, message: str) -> ErrorRecord:
        return cls(_utc_timestamp(), file, sheet, row, error_type, message)

    def to_json_line(self) -> str:
        """Serialize as a single JSON line; non-ASCII sheet names are kept as-is."""
        return json.dumps(asdict(self), ensure_ascii=False)
