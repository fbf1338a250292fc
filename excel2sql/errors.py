from __future__ import annotations

from enum import Enum

"""Error taxonomy for the Excel -> MySQL migration tool.

All failures raised by the import pipeline belong to one closed family rooted
at ``Excel2SqlError``:

- ``ParseError``: the workbook could not be opened/decoded, a range was
  malformed, or a row did not match the header shape.
- ``TableImportError``: a database-layer failure (connection/query error, or
  the structured "table does not exist" condition).

Every instance carries the wrapped lower-level exception (``cause``) so callers
can inspect it, and renders uniformly through ``str()`` / ``describe()``.
"""

__all__ = [
    "ErrorSource",
    "Excel2SqlError",
    "ParseError",
    "TableImportError",
    "TABLE_MISSING_CODE",
    "TABLE_MISSING_STATE",
]

# Sentinel payload of the "table does not exist" condition
TABLE_MISSING_CODE = 99
TABLE_MISSING_STATE = "-1"


class ErrorSource(Enum):
    """Which layer an error originated from."""
    PARSE = "parse"
    DATABASE = "database"


class Excel2SqlError(Exception):
    """Root of the closed error union. Not raised directly."""

    source: ErrorSource

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message

    def describe(self) -> str:
        """Diagnostic rendering: source tag, message and the wrapped cause."""
        text = f"{self.source.name}: {self.message}"
        if self.cause is not None:
            text += f" (caused by {self.cause!r})"
        return text


class ParseError(Excel2SqlError):
    source = ErrorSource.PARSE


class TableImportError(Excel2SqlError):
    """Database failure while importing one table.

    ``code`` / ``state`` mirror the MySQL error payload when one is known.
    """

    source = ErrorSource.DATABASE

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        *,
        code: int | None = None,
        state: str | None = None,
    ) -> None:
        super().__init__(message, cause)
        self.code = code
        self.state = state

    @classmethod
    def table_missing(cls, table_name: str) -> TableImportError:
        return cls(
            f"Table '{table_name}' doesn't exist",
            code=TABLE_MISSING_CODE,
            state=TABLE_MISSING_STATE,
        )

    @property
    def is_table_missing(self) -> bool:
        return self.code == TABLE_MISSING_CODE
