from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from ..errors import ParseError
from ..models.table import Table

"""Workbook reader.

Opens a workbook with pandas (openpyxl engine for .xlsx) and turns every sheet
into a ``Table``. Sheets are read without a header (``header=None``) and with
``dtype=object`` so each cell keeps the Python type openpyxl produced; the
header row is interpreted later by ``Table`` itself.

Only blank cells become missing values. pandas' default NA markers
(``"NA"``, ``"null"``, ``"N/A"`` ...) are ordinary text here, so header names
and cell values are never rewritten.
"""

logger = logging.getLogger(__name__)

# blank cells only; no default NA strings
NA_OPTIONS: dict[str, object] = {"keep_default_na": False, "na_values": [""]}


def _used_range(df: pd.DataFrame) -> pd.DataFrame:
    """Trim a sheet to the bounding box of its non-blank cells, re-indexed from 0.

    pandas anchors every sheet at A1; a sheet whose data starts at B2 would
    otherwise get a blank header row and a blank first column.
    """
    filled = df.notna()
    row_hits = filled.any(axis=1).to_numpy().nonzero()[0]
    col_hits = filled.any(axis=0).to_numpy().nonzero()[0]
    if len(row_hits) == 0:
        return pd.DataFrame(dtype=object)
    used = df.iloc[row_hits[0]:row_hits[-1] + 1, col_hits[0]:col_hits[-1] + 1]
    used = used.reset_index(drop=True)
    used.columns = range(used.shape[1])
    return used


def read_excel_file(path: Path | str) -> dict[str, pd.DataFrame]:
    """Read a workbook returning the used range of each sheet, keyed by sheet name, in file order.

    A sheet that cannot be read is logged and left out.

    Raises:
        ParseError: the file is missing, corrupt or not a spreadsheet
    """
    try:
        xls = pd.ExcelFile(path)
    except Exception as e:
        raise ParseError(f"cannot open workbook {path}: {e}", e) from e

    dfs: dict[str, pd.DataFrame] = {}
    with xls:
        for name in xls.sheet_names:
            try:
                raw = xls.parse(name, header=None, dtype=object, **NA_OPTIONS)
            except Exception as e:
                logger.warning("sheet %s not found: %s", name, e)
                continue
            dfs[str(name)] = _used_range(raw)
    return dfs


def parse_workbook(path: Path | str) -> list[Table]:
    """Parse every readable sheet of the workbook into a Table.

    Raises:
        ParseError: the workbook cannot be opened, or a sheet's range cannot
            be turned into a Table (aborts the whole parse)
    """
    raw = read_excel_file(path)
    tables = [Table(sheet_name, df) for sheet_name, df in raw.items()]
    logger.debug("parsed %d sheet(s) from %s", len(tables), path)
    return tables
