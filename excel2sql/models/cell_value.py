from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np

"""Typed cell values read from a worksheet.

A ``CellValue`` is the tagged union the rest of the pipeline works with:
header extraction looks only at TEXT cells, and the SQL generator renders a
literal per kind. Dates, error cells and anything unrecognized collapse into
EMPTY (rendered as ``null``).
"""

__all__ = [
    "CellKind",
    "CellValue",
]


class CellKind(Enum):
    TEXT = "text"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    EMPTY = "empty"


@dataclass(frozen=True)
class CellValue:
    kind: CellKind
    value: Any = None

    @classmethod
    def text(cls, value: str) -> CellValue:
        return cls(CellKind.TEXT, value)

    @classmethod
    def boolean(cls, value: bool) -> CellValue:
        return cls(CellKind.BOOLEAN, bool(value))

    @classmethod
    def integer(cls, value: int) -> CellValue:
        return cls(CellKind.INTEGER, int(value))

    @classmethod
    def floating(cls, value: float) -> CellValue:
        return cls(CellKind.FLOAT, value)

    @classmethod
    def empty(cls) -> CellValue:
        return cls(CellKind.EMPTY)

    @classmethod
    def from_raw(cls, raw: Any) -> CellValue:
        """Classify a raw value as produced by pandas/openpyxl.

        bool is checked before the numeric kinds since it is an int subclass.
        """
        if raw is None:
            return cls.empty()
        if isinstance(raw, str):
            return cls.text(raw)
        if isinstance(raw, (bool, np.bool_)):
            return cls.boolean(bool(raw))
        if isinstance(raw, numbers.Integral):
            return cls.integer(int(raw))
        if isinstance(raw, numbers.Real):
            f = float(raw)
            if math.isnan(f):
                return cls.empty()
            return cls(CellKind.FLOAT, f)
        # NaT, pd.NA, datetimes, error cells, ...
        return cls.empty()

    @property
    def is_text(self) -> bool:
        return self.kind is CellKind.TEXT
