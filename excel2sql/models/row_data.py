from __future__ import annotations

from dataclasses import dataclass, field

from .cell_value import CellValue

"""RowData model for the Excel -> MySQL migration tool.

RowData is one element yielded by ``Table.rows()``: the typed cells of a single
worksheet row, or the reason the row could not be read in the header's shape.
"""

__all__ = [
    "RowData",
]


@dataclass(frozen=True)
class RowData:
    """A single worksheet row.

    ``row_number`` is the 0-based index within the sheet's range, so the header
    row is 0 and the first data row is 1 regardless of how many rows were
    skipped.
    """
    row_number: int
    values: list[CellValue] = field(default_factory=list)
    error: str | None = None  # row-shape failure; row must not be inserted

    @property
    def invalid(self) -> bool:
        return self.error is not None
