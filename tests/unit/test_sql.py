from __future__ import annotations

import math

import numpy as np
import pandas as pd
import pytest

from excel2sql.db.sql import build_delete_all, build_insert, build_show_tables, render_value
from excel2sql.models.cell_value import CellKind, CellValue


def test_build_insert_exact_text():
    sql = build_insert(
        "T",
        ["id", "name", "age"],
        [CellValue.integer(1), CellValue.text("Tom"), CellValue.integer(12)],
    )
    assert sql == 'INSERT INTO `T` (`id`, `name`, `age`) VALUES (1, "Tom", 12);'


def test_build_insert_all_kinds():
    sql = build_insert(
        "main_video",
        ["id", "c_active", "c_score", "c_note"],
        [CellValue.integer(7), CellValue.boolean(False), CellValue.floating(4.5), CellValue.empty()],
    )
    assert sql == (
        "INSERT INTO `main_video` (`id`, `c_active`, `c_score`, `c_note`) "
        "VALUES (7, 0, 4.5, null);"
    )


def test_build_insert_does_not_check_alignment():
    sql = build_insert("T", ["a", "b"], [CellValue.integer(1)])
    assert sql == "INSERT INTO `T` (`a`, `b`) VALUES (1);"


def test_text_is_not_escaped():
    # documented limitation: embedded quotes pass through verbatim
    assert render_value(CellValue.text('say "hi"')) == '"say "hi""'


@pytest.mark.parametrize(
    "cell,expected",
    [
        (CellValue.boolean(True), "1"),
        (CellValue.boolean(False), "0"),
        (CellValue.integer(-3), "-3"),
        (CellValue.floating(2.25), "2.25"),
        (CellValue.floating(12.0), "12"),
        (CellValue.floating(math.inf), "null"),
        (CellValue.text(""), '""'),
        (CellValue.empty(), "null"),
    ],
)
def test_render_value(cell: CellValue, expected: str):
    assert render_value(cell) == expected


def test_show_tables_and_delete():
    assert build_show_tables("main_video") == 'SHOW TABLES LIKE "main_video"'
    assert build_delete_all("main_video") == "DELETE FROM `main_video`;"


@pytest.mark.parametrize(
    "raw,kind",
    [
        ("Tom", CellKind.TEXT),
        (True, CellKind.BOOLEAN),
        (np.bool_(False), CellKind.BOOLEAN),
        (12, CellKind.INTEGER),
        (np.int64(12), CellKind.INTEGER),
        (1.5, CellKind.FLOAT),
        (np.float64(1.5), CellKind.FLOAT),
        (None, CellKind.EMPTY),
        (float("nan"), CellKind.EMPTY),
        (pd.NaT, CellKind.EMPTY),
        (pd.Timestamp("2024-01-01"), CellKind.EMPTY),
    ],
)
def test_cell_value_from_raw(raw, kind: CellKind):
    assert CellValue.from_raw(raw).kind is kind


def test_cell_value_from_raw_keeps_payload():
    assert CellValue.from_raw(True) == CellValue.boolean(True)
    assert CellValue.from_raw(np.int64(5)) == CellValue.integer(5)
    assert CellValue.from_raw("x").is_text
