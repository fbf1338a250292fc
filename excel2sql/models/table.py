from __future__ import annotations

from collections.abc import Iterator
from itertools import islice
from pathlib import PurePath
from typing import Any

import pandas as pd

from ..errors import ParseError
from .cell_value import CellKind, CellValue
from .row_data import RowData

"""Table model: one worksheet mapped onto one database table.

The header row (row 0 of the sheet range) supplies the column list; the sheet
name, stripped of non-ASCII characters and parentheses, becomes the table
identifier. The range itself is kept so rows can be streamed lazily, any
number of times, by ``Table.rows()``.
"""

__all__ = [
    "FIELD_PREFIX",
    "ID_FIELD",
    "Table",
    "conventional_table_name",
    "sanitize_table_name",
]

FIELD_PREFIX = "c_"
ID_FIELD = "id"


def sanitize_table_name(sheet_name: str) -> str:
    """Drop non-ASCII characters and literal parentheses. Nothing else changes."""
    return "".join(ch for ch in sheet_name if ch.isascii() and ch not in "()")


def conventional_table_name(source_path: str | PurePath, raw_table_name: str) -> str:
    """Django style table name: ``<file stem>_<table name>``, lower-cased.

    >>> conventional_table_name("/data/manifest/main.xlsx", "Video")
    'main_video'
    """
    # "" and "/" have an empty stem
    stem = PurePath(source_path).stem
    return f"{stem.lower()}_{raw_table_name.lower()}"


def _to_frame(sheet_name: str, data: Any) -> pd.DataFrame:
    if isinstance(data, pd.DataFrame):
        return data
    try:
        return pd.DataFrame(data, dtype=object)
    except (ValueError, TypeError) as e:
        raise ParseError(f"sheet '{sheet_name}' has a malformed range: {e}", e) from e


class Table:
    """A worksheet and the database table it loads into.

    Attributes:
        sheet_name: Sheet name as it appears in the workbook
        name: Sanitized table identifier
        fields: Column identifiers taken from the TEXT cells of the header row
    """

    def __init__(self, sheet_name: str, data: Any) -> None:
        self.sheet_name = sheet_name
        self.name = sanitize_table_name(sheet_name)
        self._range = _to_frame(sheet_name, data)
        self._convention_applied = False

        self.fields: list[str] = []
        if self.row_count:
            header = [CellValue.from_raw(v) for v in self._range.iloc[0].tolist()]
            # non-text header cells are dropped, not replaced
            self.fields = [cell.value for cell in header if cell.is_text]

    def __repr__(self) -> str:
        return (
            f"Table(name={self.name!r}, fields={self.fields!r}, "
            f"rows={self.row_count})"
        )

    @property
    def row_count(self) -> int:
        """Number of rows in the range, header included."""
        return int(self._range.shape[0])

    @property
    def width(self) -> int:
        return int(self._range.shape[1])

    def rows(self, skip: int = 0) -> Iterator[RowData]:
        """Iterate the range from the top (header included), dropping ``skip`` rows.

        Every call starts a fresh pass. ``rows(0)`` yields the header row too,
        so callers wanting data only pass ``skip=1`` (plus any extra rows).
        Rows whose width differs from ``len(fields)`` (after dropping empty
        trailing cells) are yielded with ``error`` set rather than raising, as
        is every row of a table whose header has no text cells.
        """
        if skip < 0:
            raise ValueError(f"skip must be >= 0, got {skip}")
        return self._iter_rows(skip)

    def _iter_rows(self, skip: int) -> Iterator[RowData]:
        raw_rows = self._range.itertuples(index=False, name=None)
        for row_number, raw in islice(enumerate(raw_rows), skip, None):
            values = [CellValue.from_raw(v) for v in raw]
            expected = len(self.fields)
            if not expected:
                # nothing to insert into; never yield an empty column list
                yield RowData(
                    row_number=row_number,
                    values=values,
                    error=f"row {row_number} of sheet '{self.sheet_name}' has no header fields to map to",
                )
                continue
            # empty padding past the header width (the sheet is rectangular) is not data
            while len(values) > expected and values[-1].kind is CellKind.EMPTY:
                values.pop()
            if len(values) != expected:
                yield RowData(
                    row_number=row_number,
                    values=values,
                    error=(
                        f"row {row_number} of sheet '{self.sheet_name}' has "
                        f"{len(values)} cells but the header defines {expected} fields"
                    ),
                )
            else:
                yield RowData(row_number=row_number, values=values)

    def apply_convention(self) -> None:
        """Prefix every field except ``id`` with ``c_`` (in place, once)."""
        if self._convention_applied:
            return
        self.fields = [f if f == ID_FIELD else f"{FIELD_PREFIX}{f}" for f in self.fields]
        self._convention_applied = True
